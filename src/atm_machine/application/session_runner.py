"""
src/atm_machine/application/session_runner.py
Session Runner — ATM 드라이버 (상태 보관 + intent 실행)

원칙:
1. Thin wrapper: 상태 결정은 순수 transition()에 위임
2. 보관 상태는 매 이벤트마다 transition 결과로 교체
3. Intent 실행: LogIntent → logging, DispenseIntent → CashDispenser
4. Journal: 모든 step 기록 (설정된 경우)
5. 지급 실패 시 상태 rollback 없음 (ERROR 로그 + journal critical 기록)

Exports:
- AtmSessionRunner: 이벤트 처리 드라이버
- StepResult: step 실행 결과
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from atm_machine.application.atm import AtmMachine
from atm_machine.domain.state import SessionState, Transition
from atm_machine.domain.intent import TransitionIntents
from atm_machine.infrastructure.hardware.dispenser_interface import CashDispenser
from atm_machine.infrastructure.logging.transition_logger import log_transition
from atm_machine.infrastructure.storage.journal_storage import JournalStorage

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Step 실행 결과"""

    previous_state: SessionState
    state: SessionState
    intents: TransitionIntents
    dispensed: Optional[bool] = None  # DispenseIntent가 있을 때만 True/False


class AtmSessionRunner:
    """
    Session Runner — 이벤트 1건씩 State Machine에 적용

    단일 세션만 다룬다 (동시 세션은 runner 인스턴스 분리)
    """

    def __init__(
        self,
        machine: AtmMachine,
        initial_state: SessionState,
        dispenser: Optional[CashDispenser] = None,
        journal: Optional[JournalStorage] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            machine: AtmMachine (fingerprint 주입 완료)
            initial_state: 프로비저닝된 초기 상태
            dispenser: 현금 지급기 (None이면 지급 생략, dispensed=None)
            journal: JournalStorage (None이면 journal 생략)
            clock: timestamp 소스 (테스트 주입용)
        """
        self.machine = machine
        self._state = initial_state
        self.dispenser = dispenser
        self.journal = journal
        self.clock = clock

    @property
    def state(self) -> SessionState:
        return self._state

    def handle(self, event: Transition) -> StepResult:
        """
        이벤트 처리

        순서:
        1. 순수 전이 (state, intents)
        2. 보관 상태 교체
        3. DispenseIntent 실행
        4. LogIntent 실행
        5. Journal 기록
        """
        previous_state = self._state
        new_state, intents = self.machine.evaluate(previous_state, event)
        self._state = new_state

        dispensed = None
        if intents.dispense_intent is not None:
            dispensed = self._dispense(intents.dispense_intent.amount)

        log_intent = intents.log_intent
        if log_intent is not None:
            level = logging.getLevelName(log_intent.level)
            if not isinstance(level, int):
                level = logging.INFO
            logger.log(
                level,
                f"[{log_intent.code}] {log_intent.message} | "
                f"{previous_state.phase.name} → {new_state.phase.name}"
            )

        if self.journal is not None:
            entry = log_transition(
                timestamp=self.clock(),
                event=event,
                previous_state=previous_state,
                new_state=new_state,
                intents=intents,
                dispensed=dispensed,
            )
            self.journal.append(entry, is_critical=dispensed is False)

        return StepResult(
            previous_state=previous_state,
            state=new_state,
            intents=intents,
            dispensed=dispensed,
        )

    def handle_all(self, events: Iterable[Transition]) -> List[StepResult]:
        return [self.handle(event) for event in events]

    def _dispense(self, amount: int) -> Optional[bool]:
        if self.dispenser is None:
            logger.warning(f"No dispenser configured, skipping dispense of {amount}")
            return None

        try:
            ok = bool(self.dispenser.dispense(amount))
        except Exception as e:
            logger.error(f"Dispenser raised during payout of {amount}: {type(e).__name__}: {e}")
            ok = False

        if not ok:
            logger.error(f"Dispenser failed to pay out {amount} (state not rolled back)")
        return ok
