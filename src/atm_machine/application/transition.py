"""
ATM State Transition — Pure Function

인증 + 출금 프로토콜 상태 전환 로직 (순수 함수)

원칙:
1. 순수 함수 (side-effect 없음, I/O 금지)
2. 입력: (state, event, fingerprint)
3. 출력: (new_state, intents)
4. 전체 함수: 정의되지 않은 (phase, event) 조합은 state 그대로 반환

전이 규칙:
- WAITING + SWIPE → AUTHENTICATING(credential)
- AUTHENTICATING + SWIPE → 유지 (기존 credential 보존)
- AUTHENTICATING/AUTHENTICATED + DIGIT → 레지스터에 append
- AUTHENTICATING + ENTER → AUTHENTICATED (검증 성공) / WAITING (실패)
- AUTHENTICATED + ENTER → WAITING (출금 성공/거절 무관)
- 그 외 → 유지
"""

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from atm_machine.domain.state import (
    Waiting,
    Authenticating,
    Authenticated,
    SessionState,
)
from atm_machine.domain.events import (
    CREDENTIAL_MAX,
    Key,
    CardSwiped,
    KeyPressed,
    Transition,
)
from atm_machine.domain.intent import (
    TransitionIntents,
    DispenseIntent,
    LogIntent,
)
from atm_machine.domain.credentials import Fingerprinter, fingerprint_phase

# 출금 금액 상한 (64-bit unsigned)
MAX_WITHDRAWAL_AMOUNT = CREDENTIAL_MAX


def transition(
    state: SessionState,
    event: Transition,
    fingerprint: Fingerprinter = fingerprint_phase,
) -> Tuple[SessionState, TransitionIntents]:
    """
    순수 함수 State Transition (Oracle Testable)

    Args:
        state: 현재 세션 상태
        event: CardSwiped or KeyPressed
        fingerprint: PIN 검증용 fingerprint 함수 (주입 가능)

    Returns:
        (new_state, intents)
    """
    intents = TransitionIntents()
    phase = state.phase

    if isinstance(phase, Waiting):
        return _handle_waiting(state, event, intents)

    elif isinstance(phase, Authenticating):
        return _handle_authenticating(state, phase, event, fingerprint, intents)

    elif isinstance(phase, Authenticated):
        return _handle_authenticated(state, event, intents)

    # 알 수 없는 phase: 유지
    return state, intents


def _handle_waiting(
    state: SessionState,
    event: Transition,
    intents: TransitionIntents
) -> Tuple[SessionState, TransitionIntents]:
    """
    WAITING 상태 처리

    - SWIPE → AUTHENTICATING(credential)
    - 키 입력 → 무시 (카드 없음)
    """
    if isinstance(event, CardSwiped):
        intents.log_intent = LogIntent(
            level="INFO",
            code="card_accepted",
            message="Card swiped, awaiting PIN",
        )
        return replace(state, phase=Authenticating(event.credential)), intents

    intents.log_intent = LogIntent(
        level="DEBUG",
        code="key_ignored_while_waiting",
        message="Key pressed before card swipe",
    )
    return state, intents


def _handle_authenticating(
    state: SessionState,
    phase: Authenticating,
    event: Transition,
    fingerprint: Fingerprinter,
    intents: TransitionIntents
) -> Tuple[SessionState, TransitionIntents]:
    """
    AUTHENTICATING 상태 처리

    Critical Rule:
      - 인증 중 재스와이프는 무시, 최초 credential 유지 (교체 금지)
      - ENTER 시 검증은 phase 값 fingerprint와 expected_credential 비교
        (placeholder: keystroke 레지스터를 해시하지 않음)
    """
    if isinstance(event, CardSwiped):
        intents.log_intent = LogIntent(
            level="WARNING",
            code="card_ignored_mid_authentication",
            message="Card swiped during authentication, keeping original credential",
        )
        return state, intents

    if event.key.is_digit:
        return _register_digit(state, event, intents)

    # ENTER → 검증
    cleared = replace(state, keystroke_register=())

    if fingerprint(phase) == phase.expected_credential:
        intents.log_intent = LogIntent(
            level="INFO",
            code="pin_accepted",
            message="PIN verified",
        )
        return replace(cleared, phase=Authenticated()), intents

    intents.log_intent = LogIntent(
        level="WARNING",
        code="pin_rejected",
        message="PIN verification failed, returning to WAITING",
    )
    intents.session_closed = True
    return replace(cleared, phase=Waiting()), intents


def _handle_authenticated(
    state: SessionState,
    event: Transition,
    intents: TransitionIntents
) -> Tuple[SessionState, TransitionIntents]:
    """
    AUTHENTICATED 상태 처리

    규칙:
    - DIGIT: 출금 금액 누적
    - ENTER: 금액 파싱 → cash_inside 이하이면 차감 + DispenseIntent
             파싱 실패/초과 → 차감 없음
             어느 경우든 WAITING + 레지스터 초기화
    - SWIPE: 무시
    """
    if isinstance(event, CardSwiped):
        intents.log_intent = LogIntent(
            level="DEBUG",
            code="card_ignored_while_authenticated",
            message="Card swiped while authenticated",
        )
        return state, intents

    if event.key.is_digit:
        return _register_digit(state, event, intents)

    amount = parse_withdrawal_amount(state.keystroke_register)
    closed = replace(state, phase=Waiting(), keystroke_register=())
    intents.session_closed = True

    if amount is None:
        intents.log_intent = LogIntent(
            level="WARNING",
            code="withdrawal_amount_invalid",
            message="No valid withdrawal amount entered",
        )
        return closed, intents

    if amount > state.cash_inside:
        intents.log_intent = LogIntent(
            level="WARNING",
            code="withdrawal_exceeds_cash",
            message="Requested amount exceeds cash inside",
            context={"amount": amount, "cash_inside": state.cash_inside},
        )
        return closed, intents

    intents.dispense_intent = DispenseIntent(amount=amount)
    intents.log_intent = LogIntent(
        level="INFO",
        code="withdrawal_dispensed",
        message="Withdrawal approved",
        context={"amount": amount, "cash_inside": state.cash_inside - amount},
    )
    return replace(closed, cash_inside=state.cash_inside - amount), intents


def _register_digit(
    state: SessionState,
    event: KeyPressed,
    intents: TransitionIntents
) -> Tuple[SessionState, TransitionIntents]:
    """숫자 키 → 레지스터 append (phase, cash_inside 유지)"""
    new_state = replace(state, keystroke_register=state.keystroke_register + (event.key,))
    intents.log_intent = LogIntent(
        level="DEBUG",
        code="digit_registered",
        message="Digit registered",
        context={"keystroke_count": len(new_state.keystroke_register)},
    )
    return new_state, intents


def parse_withdrawal_amount(keystroke_register: Sequence[Key]) -> Optional[int]:
    """
    레지스터 → 출금 금액

    Args:
        keystroke_register: 입력 순서대로의 키

    Returns:
        금액 (unsigned int) or None (빈 입력 / 64-bit 초과)

    Example:
        >>> parse_withdrawal_amount([Key.ONE, Key.FOUR])
        14
        >>> parse_withdrawal_amount([]) is None
        True
    """
    digits = []
    for key in keystroke_register:
        if key is Key.ENTER:
            break
        digits.append(key.value)

    amount_str = "".join(digits)
    if not amount_str.isdigit():
        return None

    amount = int(amount_str)
    if amount > MAX_WITHDRAWAL_AMOUNT:
        return None
    return amount
