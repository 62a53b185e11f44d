"""State Machine Interface"""

from abc import ABC, abstractmethod
from functools import reduce
from typing import Generic, Iterable, TypeVar

StateT = TypeVar("StateT")
TransitionT = TypeVar("TransitionT")


class IStateMachine(ABC, Generic[StateT, TransitionT]):
    """
    State Machine 인터페이스

    책임:
    - (state, transition) → next state 결정
    - 순수 함수: side-effect 없음, 같은 입력 → 같은 출력
    - 전체 함수: 적용 불가 transition은 state 그대로 반환 (예외 금지)
    """

    @abstractmethod
    def next_state(self, state: StateT, transition: TransitionT) -> StateT:
        """
        상태 전환 수행

        Args:
            state: 현재 상태 (불변 스냅샷)
            transition: 입력 이벤트

        Returns:
            StateT: 다음 상태
        """
        pass

    def run(self, initial_state: StateT, transitions: Iterable[TransitionT]) -> StateT:
        """transition 시퀀스를 순서대로 적용한 최종 상태"""
        return reduce(self.next_state, transitions, initial_state)
