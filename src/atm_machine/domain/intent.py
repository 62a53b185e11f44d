"""
Domain Intents — Action Commands from State Transition

Intent는 순수 전이 함수(transition)의 출력이며,
드라이버(session runner)가 I/O로 실행하는 명령어다.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DispenseIntent:
    """
    현금 지급 의도

    출금 성공 시에만 발생 (cash_inside는 이미 차감된 상태)
    """
    amount: int


@dataclass(frozen=True)
class LogIntent:
    """
    로그 기록 의도

    keystroke 원문은 절대 포함하지 않는다.
    """
    level: str  # "DEBUG" | "INFO" | "WARNING" | "ERROR"
    code: str
    message: str
    context: Optional[dict] = None


@dataclass
class TransitionIntents:
    """
    State Transition 결과로 발생하는 행동 의도들

    Oracle 테스트는 이 intents를 검증함
    """
    dispense_intent: Optional[DispenseIntent] = None
    log_intent: Optional[LogIntent] = None
    session_closed: bool = False  # AUTHENTICATING/AUTHENTICATED → WAITING
