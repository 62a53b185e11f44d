"""
Domain Events — ATM Input Events

ATM 상태 전환 트리거 이벤트 (카드 스와이프 / 키패드 입력)
"""

from enum import Enum
from dataclasses import dataclass
from typing import Union

# Credential fingerprint는 64-bit unsigned 정수
CREDENTIAL_MAX = 2 ** 64 - 1


class Key(Enum):
    """
    ATM 키패드 키

    - ZERO ~ NINE: 숫자 키 (value = 숫자 문자)
    - ENTER: 확인 키
    """
    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    ENTER = "Enter"

    @property
    def is_digit(self) -> bool:
        return self is not Key.ENTER

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CardSwiped:
    """
    카드 스와이프 이벤트

    credential: 카드에서 읽은 opaque fingerprint (0 <= credential <= 2**64-1)
    """
    credential: int

    def __post_init__(self):
        if not isinstance(self.credential, int) or isinstance(self.credential, bool):
            raise TypeError("credential must be an int")
        if not 0 <= self.credential <= CREDENTIAL_MAX:
            raise ValueError(f"credential out of 64-bit range: {self.credential}")


@dataclass(frozen=True)
class KeyPressed:
    """키패드 입력 이벤트"""
    key: Key


Transition = Union[CardSwiped, KeyPressed]
