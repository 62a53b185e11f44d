"""
src/atm_machine/domain/credentials.py
Credential Fingerprint 생성 (PIN 검증 placeholder)

Purpose:
- fingerprint_phase(): phase 값 자체의 64-bit fingerprint (기본 검증 함수)
- passthrough_fingerprint(): AUTHENTICATING의 credential을 그대로 반환 (데모/테스트용)
- fingerprint_keys(): PIN 키 시퀀스 → credential (데모 카드 발급용)

Design Decisions:
- SHA1 해시 앞 8바이트 (big-endian) → 64-bit unsigned (결정론적, 프로세스 간 동일)
- 기본 검증은 keystroke가 아닌 phase 값을 해시한다 (placeholder, 실제 보안 아님)
- 검증 함수는 주입 가능 (Fingerprinter) → 실서비스는 외부 인증기로 교체
"""

import hashlib
from typing import Callable, Dict, Iterable

from atm_machine.domain.events import Key
from atm_machine.domain.state import Phase, Authenticating

Fingerprinter = Callable[[Phase], int]


def _digest64(raw: str) -> int:
    """SHA1 해시 앞 8바이트 → 64-bit unsigned int"""
    return int.from_bytes(hashlib.sha1(raw.encode()).digest()[:8], "big")


def fingerprint_phase(phase: Phase) -> int:
    """
    Phase 값의 fingerprint (기본 PIN 검증 함수)

    Args:
        phase: 현재 인증 단계

    Returns:
        64-bit unsigned fingerprint

    Example:
        >>> fingerprint_phase(Authenticating(1234)) == fingerprint_phase(Authenticating(1234))
        True
    """
    if isinstance(phase, Authenticating):
        raw = f"{phase.name}:{phase.expected_credential}"
    else:
        raw = phase.name
    return _digest64(raw)


def passthrough_fingerprint(phase: Phase) -> int:
    """AUTHENTICATING이면 expected_credential 그대로, 그 외 0"""
    if isinstance(phase, Authenticating):
        return phase.expected_credential
    return 0


def fingerprint_keys(keys: Iterable[Key]) -> int:
    """
    PIN 키 시퀀스 → credential fingerprint

    Example:
        >>> pin = [Key.ONE, Key.TWO, Key.THREE, Key.FOUR]
        >>> fingerprint_keys(pin) == fingerprint_keys(list(pin))
        True
    """
    return _digest64(",".join(key.value for key in keys))


FINGERPRINTERS: Dict[str, Fingerprinter] = {
    "sha1": fingerprint_phase,
    "passthrough": passthrough_fingerprint,
}


def resolve_fingerprint(name: str) -> Fingerprinter:
    """이름 → Fingerprinter (config/CLI용)"""
    try:
        return FINGERPRINTERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown fingerprint: {name} (expected one of {sorted(FINGERPRINTERS)})"
        ) from None


__all__ = [
    "Fingerprinter",
    "fingerprint_phase",
    "passthrough_fingerprint",
    "fingerprint_keys",
    "resolve_fingerprint",
    "FINGERPRINTERS",
]
