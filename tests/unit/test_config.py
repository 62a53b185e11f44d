"""
Unit Tests — ATM config (YAML + 환경변수)

우선순위: env > YAML > 기본값
"""

import os
from pathlib import Path

import pytest

from atm_machine.infrastructure.config import AtmConfig, AtmConfigError, load_config

ENV_VARS = ["ATM_INITIAL_CASH", "ATM_JOURNAL_DIR", "ATM_FINGERPRINT", "ATM_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """ATM_* 환경변수 제거 + config/atm.yaml 없는 디렉토리에서 실행"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # load_dotenv()가 직접 설정한 값 정리
    for name in ENV_VARS:
        os.environ.pop(name, None)


def _empty_env(tmp_path):
    env_file = tmp_path / "empty.env"
    env_file.write_text("")
    return env_file


def test_defaults_without_files(tmp_path):
    config = load_config(env_file=_empty_env(tmp_path))

    assert config == AtmConfig()


def test_default_yaml_location(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "atm.yaml").write_text("atm:\n  initial_cash: 100\n")

    config = load_config(env_file=_empty_env(tmp_path))

    assert config.initial_cash == 100


def test_yaml_values(tmp_path):
    path = tmp_path / "atm.yaml"
    path.write_text(
        "atm:\n"
        "  initial_cash: 250\n"
        "  journal_dir: logs/journal\n"
        "  fingerprint: passthrough\n"
        "  log_level: debug\n"
    )

    config = load_config(config_path=path, env_file=_empty_env(tmp_path))

    assert config == AtmConfig(
        initial_cash=250,
        journal_dir=Path("logs/journal"),
        fingerprint="passthrough",
        log_level="DEBUG",
    )


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "atm.yaml"
    path.write_text("initial_cash: 250\njournal_dir: logs/journal\n")
    monkeypatch.setenv("ATM_INITIAL_CASH", "40")
    monkeypatch.setenv("ATM_JOURNAL_DIR", "")

    config = load_config(config_path=path, env_file=_empty_env(tmp_path))

    assert config.initial_cash == 40
    assert config.journal_dir is None


def test_dotenv_file_is_loaded(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ATM_INITIAL_CASH=77\nATM_FINGERPRINT=passthrough\n")

    config = load_config(env_file=env_file)

    assert config.initial_cash == 77
    assert config.fingerprint == "passthrough"


@pytest.mark.parametrize("env,value", [
    ("ATM_INITIAL_CASH", "-5"),
    ("ATM_INITIAL_CASH", "ten"),
    ("ATM_FINGERPRINT", "md5"),
    ("ATM_LOG_LEVEL", "LOUD"),
])
def test_invalid_env_values(tmp_path, monkeypatch, env, value):
    monkeypatch.setenv(env, value)

    with pytest.raises(AtmConfigError):
        load_config(env_file=_empty_env(tmp_path))


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "atm.yaml"
    path.write_text("- 1\n- 2\n")

    with pytest.raises(AtmConfigError):
        load_config(config_path=path, env_file=_empty_env(tmp_path))


def test_yaml_float_cash_rejected(tmp_path):
    path = tmp_path / "atm.yaml"
    path.write_text("initial_cash: 10.5\n")

    with pytest.raises(AtmConfigError):
        load_config(config_path=path, env_file=_empty_env(tmp_path))


def test_missing_config_file(tmp_path):
    with pytest.raises(AtmConfigError):
        load_config(config_path=tmp_path / "nope.yaml", env_file=_empty_env(tmp_path))
