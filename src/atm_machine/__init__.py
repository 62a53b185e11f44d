"""
ATM State Machine

Exports:
- AtmMachine: IStateMachine 구현 (next_state)
- SessionState, Waiting, Authenticating, Authenticated: 세션 상태
- Key, CardSwiped, KeyPressed: 입력 이벤트
"""

from atm_machine.application.atm import AtmMachine
from atm_machine.domain.state import (
    SessionState,
    Waiting,
    Authenticating,
    Authenticated,
)
from atm_machine.domain.events import Key, CardSwiped, KeyPressed

__all__ = [
    "AtmMachine",
    "SessionState",
    "Waiting",
    "Authenticating",
    "Authenticated",
    "Key",
    "CardSwiped",
    "KeyPressed",
]

__version__ = "0.1.0"
