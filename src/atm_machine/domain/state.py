"""
Domain State Models

ATM 세션 상태 정의 (인증 단계 + 키 입력 레지스터 + 현금 보유량)
"""

from dataclasses import dataclass, field
from typing import ClassVar, Tuple, Union

# Re-export events for convenience
from atm_machine.domain.events import Key, CardSwiped, KeyPressed, Transition

__all__ = [
    'Waiting',
    'Authenticating',
    'Authenticated',
    'Phase',
    'SessionState',
    'Key',
    'CardSwiped',
    'KeyPressed',
    'Transition',
]


@dataclass(frozen=True)
class Waiting:
    """카드 미삽입 (초기 상태)"""
    name: ClassVar[str] = "WAITING"


@dataclass(frozen=True)
class Authenticating:
    """
    카드 스와이프 완료, PIN 확인 대기

    expected_credential: 스와이프 시점에 캡처한 credential fingerprint
    """
    expected_credential: int
    name: ClassVar[str] = "AUTHENTICATING"


@dataclass(frozen=True)
class Authenticated:
    """PIN 검증 완료, 출금 가능"""
    name: ClassVar[str] = "AUTHENTICATED"


Phase = Union[Waiting, Authenticating, Authenticated]


@dataclass(frozen=True)
class SessionState:
    """
    ATM 세션 상태 (State Machine의 State)

    - phase: 인증 단계
    - keystroke_register: 마지막 reset 이후 입력된 키 (입력 순서 유지)
    - cash_inside: 출금 가능한 현금 총량 (세션 간 유지, 음수 불가)
    """
    phase: Phase = field(default_factory=Waiting)
    keystroke_register: Tuple[Key, ...] = ()
    cash_inside: int = 0

    def __post_init__(self):
        if not isinstance(self.cash_inside, int) or isinstance(self.cash_inside, bool):
            raise TypeError("cash_inside must be an int")
        if self.cash_inside < 0:
            raise ValueError(f"cash_inside must be non-negative: {self.cash_inside}")
        # list 등으로 넘어와도 tuple로 고정 (불변 스냅샷)
        if not isinstance(self.keystroke_register, tuple):
            object.__setattr__(self, "keystroke_register", tuple(self.keystroke_register))
        # WAITING에는 입력 중인 키가 없다
        if isinstance(self.phase, Waiting) and self.keystroke_register:
            raise ValueError("keystroke_register must be empty while WAITING")

    @classmethod
    def initial(cls, cash_inside: int) -> "SessionState":
        """드라이버 프로비저닝용 초기 상태 (WAITING, 빈 레지스터)"""
        return cls(phase=Waiting(), keystroke_register=(), cash_inside=cash_inside)
