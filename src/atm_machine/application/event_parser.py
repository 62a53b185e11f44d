"""
Event Parser — 텍스트 토큰 → Transition

시뮬레이션/CLI 입력용:
- "swipe:<credential>" → CardSwiped
- "key:<k>" or "<k>"   → KeyPressed (k: 0-9 or "enter", 대소문자 무시)

잘못된 토큰 → EventParseError
"""

import re
from typing import List

from atm_machine.domain.events import Key, CardSwiped, KeyPressed, Transition


class EventParseError(ValueError):
    """이벤트 토큰 파싱 실패"""

    pass


_KEYS_BY_TOKEN = {key.value.lower(): key for key in Key}


def parse_event(token: str) -> Transition:
    """
    단일 토큰 파싱

    Example:
        >>> parse_event("swipe:1234")
        CardSwiped(credential=1234)
        >>> parse_event("ENTER")
        KeyPressed(key=<Key.ENTER: 'Enter'>)
    """
    raw = token.strip().lower()
    if not raw:
        raise EventParseError("Empty event token")

    if raw.startswith("swipe:"):
        value = raw[len("swipe:"):]
        if not value.isdigit():
            raise EventParseError(f"Invalid credential in '{token}'")
        try:
            return CardSwiped(int(value))
        except ValueError as e:
            raise EventParseError(f"Invalid credential in '{token}': {e}") from e

    if raw.startswith("key:"):
        raw = raw[len("key:"):]

    key = _KEYS_BY_TOKEN.get(raw)
    if key is None:
        raise EventParseError(f"Unknown event token '{token}'")
    return KeyPressed(key)


def parse_events(text: str) -> List[Transition]:
    """공백/쉼표 구분 토큰 시퀀스 파싱"""
    return [parse_event(token) for token in re.split(r"[\s,]+", text) if token]
