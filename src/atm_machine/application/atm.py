"""ATM State Machine 구현"""

from typing import Tuple

from atm_machine.interfaces.state_machine import IStateMachine
from atm_machine.domain.state import SessionState, Transition
from atm_machine.domain.intent import TransitionIntents
from atm_machine.domain.credentials import Fingerprinter, fingerprint_phase
from atm_machine.application.transition import transition


class AtmMachine(IStateMachine[SessionState, Transition]):
    """
    ATM State Machine

    핵심 규칙:
    - next_state는 transition()의 state 부분만 반환 (intents 버림)
    - fingerprint는 생성 시 주입 (기본: phase SHA1 placeholder)
    """

    def __init__(self, fingerprint: Fingerprinter = fingerprint_phase):
        self.fingerprint = fingerprint

    def next_state(self, state: SessionState, transition: Transition) -> SessionState:
        new_state, _ = self.evaluate(state, transition)
        return new_state

    def evaluate(
        self,
        state: SessionState,
        event: Transition
    ) -> Tuple[SessionState, TransitionIntents]:
        """(new_state, intents) 반환 — 드라이버용"""
        return transition(state, event, self.fingerprint)
