"""
src/atm_machine/infrastructure/config.py
ATM 프로비저닝 설정 (YAML + 환경변수)

우선순위:
1. 환경변수 (.env 포함, python-dotenv)
2. config/atm.yaml
3. AtmConfig 기본값

환경변수:
- ATM_INITIAL_CASH: 초기 현금 보유량 (정수, >= 0)
- ATM_JOURNAL_DIR: journal 디렉토리 (빈 값이면 journal 비활성)
- ATM_FINGERPRINT: PIN 검증 fingerprint ("sha1" | "passthrough")
- ATM_LOG_LEVEL: 로그 레벨 ("DEBUG" | "INFO" | "WARNING" | "ERROR")
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from atm_machine.domain.credentials import FINGERPRINTERS

DEFAULT_CONFIG_PATH = Path("config/atm.yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class AtmConfigError(Exception):
    """설정 값 검증 실패"""

    pass


@dataclass(frozen=True)
class AtmConfig:
    """ATM 드라이버 설정"""
    initial_cash: int = 0
    journal_dir: Optional[Path] = None
    fingerprint: str = "sha1"
    log_level: str = "INFO"


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> AtmConfig:
    """
    설정 로드

    Args:
        config_path: YAML 경로 (None이면 config/atm.yaml, 없으면 생략)
        env_file: .env 경로 (None이면 python-dotenv 기본 탐색)

    Returns:
        AtmConfig

    Raises:
        AtmConfigError: 값 검증 실패 / YAML 형식 오류
    """
    load_dotenv(env_file)

    config = AtmConfig()

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise AtmConfigError(f"Config file not found: {path}")
        config = _apply(config, _read_yaml(path), source=str(path))
    elif DEFAULT_CONFIG_PATH.exists():
        config = _apply(config, _read_yaml(DEFAULT_CONFIG_PATH), source=str(DEFAULT_CONFIG_PATH))

    env_values = {
        "initial_cash": os.getenv("ATM_INITIAL_CASH"),
        "journal_dir": os.getenv("ATM_JOURNAL_DIR"),
        "fingerprint": os.getenv("ATM_FINGERPRINT"),
        "log_level": os.getenv("ATM_LOG_LEVEL"),
    }
    env_values = {key: value for key, value in env_values.items() if value is not None}

    return _apply(config, env_values, source="environment")


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise AtmConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise AtmConfigError(f"{path} must contain a mapping")

    # atm: 섹션이 있으면 그 안의 값만 사용
    section = data.get("atm", data)
    if not isinstance(section, dict):
        raise AtmConfigError(f"{path}: 'atm' section must be a mapping")
    return section


def _apply(config: AtmConfig, values: Dict[str, Any], source: str) -> AtmConfig:
    """values를 검증 후 config에 덮어쓴다"""
    updates: Dict[str, Any] = {}

    if "initial_cash" in values:
        updates["initial_cash"] = _parse_cash(values["initial_cash"], source)

    if "journal_dir" in values:
        raw = values["journal_dir"]
        updates["journal_dir"] = Path(raw) if raw not in (None, "") else None

    if "fingerprint" in values:
        name = str(values["fingerprint"]).lower()
        if name not in FINGERPRINTERS:
            raise AtmConfigError(
                f"{source}: unknown fingerprint '{values['fingerprint']}' "
                f"(expected one of {sorted(FINGERPRINTERS)})"
            )
        updates["fingerprint"] = name

    if "log_level" in values:
        level = str(values["log_level"]).upper()
        if level not in LOG_LEVELS:
            raise AtmConfigError(f"{source}: unknown log level '{values['log_level']}'")
        updates["log_level"] = level

    return replace(config, **updates)


def _parse_cash(raw: Any, source: str) -> int:
    if isinstance(raw, bool):
        raise AtmConfigError(f"{source}: initial_cash must be an integer")
    try:
        cash = int(raw)
    except (TypeError, ValueError):
        raise AtmConfigError(f"{source}: initial_cash must be an integer, got {raw!r}") from None
    if isinstance(raw, float) and raw != cash:
        raise AtmConfigError(f"{source}: initial_cash must be an integer, got {raw!r}")
    if cash < 0:
        raise AtmConfigError(f"{source}: initial_cash must be non-negative, got {cash}")
    return cash
