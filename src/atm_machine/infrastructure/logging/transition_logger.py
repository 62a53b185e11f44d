"""
src/atm_machine/infrastructure/logging/transition_logger.py
Transition Logger — 상태 전환 journal record (재현 가능성)

원칙:
1. 이벤트 + 이전/다음 상태 + intent 포함
2. PIN/금액 키 입력 원문은 기록하지 않음 (숫자 키 → "DIGIT", 레지스터 → 길이만)
3. Credential 값은 기록하지 않음 (스와이프 여부만)
4. Schema validation: 필수 필드 누락 시 TransitionLogValidationError

Exports:
- log_transition(): journal record 생성
- validate_transition_schema(): Schema validation
- describe_state(), describe_event(): 마스킹된 스냅샷
- TransitionLogValidationError: 필수 필드 누락 예외
"""

from typing import Any, Dict, Optional

from atm_machine.domain.state import SessionState, Transition, CardSwiped, Authenticating
from atm_machine.domain.intent import TransitionIntents


class TransitionLogValidationError(Exception):
    """Transition log schema validation 실패"""

    pass


REQUIRED_FIELDS = ["timestamp", "event", "previous_state", "new_state", "code"]


def describe_state(state: SessionState) -> Dict[str, Any]:
    """
    State 스냅샷 (마스킹)

    Returns:
        {"phase", "awaiting_credential", "keystroke_count", "cash_inside"}
    """
    return {
        "phase": state.phase.name,
        "awaiting_credential": isinstance(state.phase, Authenticating),
        "keystroke_count": len(state.keystroke_register),
        "cash_inside": state.cash_inside,
    }


def describe_event(event: Transition) -> Dict[str, Any]:
    """Event 스냅샷 (credential/숫자 마스킹)"""
    if isinstance(event, CardSwiped):
        return {"type": "CARD_SWIPED"}
    key = "DIGIT" if event.key.is_digit else "ENTER"
    return {"type": "KEY_PRESSED", "key": key}


def log_transition(
    timestamp: float,
    event: Transition,
    previous_state: SessionState,
    new_state: SessionState,
    intents: TransitionIntents,
    dispensed: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Transition journal record 생성

    Args:
        timestamp: 처리 시각 (UNIX timestamp)
        event: 입력 이벤트
        previous_state: 전환 전 상태
        new_state: 전환 후 상태
        intents: transition() 결과 intents
        dispensed: 지급 결과 (DispenseIntent가 있을 때만)

    Returns:
        log_entry (dict)
    """
    log_intent = intents.log_intent
    log_entry = {
        "timestamp": timestamp,
        "event": describe_event(event),
        "previous_state": describe_state(previous_state),
        "new_state": describe_state(new_state),
        "code": log_intent.code if log_intent else "no_op",
        "session_closed": intents.session_closed,
    }

    if intents.dispense_intent is not None:
        log_entry["dispense"] = {
            "amount": intents.dispense_intent.amount,
            "dispensed": dispensed,
        }

    validate_transition_schema(log_entry)

    return log_entry


def validate_transition_schema(log_entry: Dict[str, Any]) -> None:
    """
    Transition log schema validation

    Raises:
        TransitionLogValidationError: 필수 필드 누락 / 타입 불일치
    """
    for field in REQUIRED_FIELDS:
        if field not in log_entry:
            raise TransitionLogValidationError(f"Missing required field: {field}")

    for field in ("event", "previous_state", "new_state"):
        if not isinstance(log_entry.get(field), dict):
            raise TransitionLogValidationError(f"{field} must be a dict")
