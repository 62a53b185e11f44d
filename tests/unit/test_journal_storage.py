"""
tests/unit/test_journal_storage.py

Journal Storage 테스트 (JSONL, O_APPEND, fsync policy, partial line recovery)

Failure-mode tests:
- partial line recovery (마지막 라인 JSON parse 실패 시 truncate)
- rotation boundary
- fsync policy (batch/critical)
"""

import json
from datetime import datetime, timezone

import pytest

from atm_machine.infrastructure.storage.journal_storage import JournalStorage


def test_append_basic(tmp_path):
    """append()는 JSONL 한 줄을 기록한다"""
    storage = JournalStorage(log_dir=tmp_path)

    storage.append({"code": "card_accepted"})

    log_files = list(tmp_path.glob("atm_journal_*.jsonl"))
    assert len(log_files) == 1
    lines = log_files[0].read_text().splitlines()
    assert [json.loads(line) for line in lines] == [{"code": "card_accepted"}]
    assert storage.write_syscall_count == 1


def test_partial_line_recovery(tmp_path):
    """마지막 라인이 잘려 있으면 읽을 때 truncate"""
    storage = JournalStorage(log_dir=tmp_path)
    storage.set_current_time(datetime(2026, 1, 1, tzinfo=timezone.utc))
    storage.append({"seq": 1})
    storage.append({"seq": 2})
    storage.close()

    path = tmp_path / "atm_journal_2026-01-01.jsonl"
    with open(path, "a") as f:
        f.write('{"seq": 3, "co')

    entries = storage.read("2026-01-01")

    assert entries == [{"seq": 1}, {"seq": 2}]
    assert path.read_text().count("\n") == 2
    assert storage.read("2026-01-01") == entries


def test_corrupt_middle_line_skipped_without_truncate(tmp_path):
    """중간 라인이 깨져 있으면 건너뛰기만 하고 파일은 그대로"""
    path = tmp_path / "atm_journal_2026-01-01.jsonl"
    original = '{"seq": 1}\n{"seq": \n{"seq": 3}\n'
    path.write_text(original)
    storage = JournalStorage(log_dir=tmp_path)

    assert storage.read("2026-01-01") == [{"seq": 1}, {"seq": 3}]
    assert path.read_text() == original


def test_read_missing_date_returns_empty(tmp_path):
    storage = JournalStorage(log_dir=tmp_path)

    assert storage.read() == []
    assert storage.read("1999-01-01") == []


def test_batch_fsync_policy(tmp_path):
    storage = JournalStorage(log_dir=tmp_path, fsync_batch_size=3)

    for i in range(7):
        storage.append({"seq": i})

    assert storage.fsync_count == 2


def test_critical_entry_fsyncs_immediately(tmp_path):
    storage = JournalStorage(log_dir=tmp_path, fsync_batch_size=100)

    storage.append({"seq": 1})
    storage.append({"seq": 2}, is_critical=True)

    assert storage.fsync_count == 1


def test_critical_policy_fsyncs_every_line(tmp_path):
    storage = JournalStorage(log_dir=tmp_path, fsync_policy="critical")

    storage.append({"seq": 1})
    storage.append({"seq": 2})

    assert storage.fsync_count == 2


def test_unknown_fsync_policy(tmp_path):
    with pytest.raises(ValueError):
        JournalStorage(log_dir=tmp_path, fsync_policy="periodic")


def test_daily_rotation(tmp_path):
    """UTC 날짜가 바뀌면 새 파일로 rotation (이전 파일 fsync)"""
    storage = JournalStorage(log_dir=tmp_path, fsync_batch_size=100)
    storage.set_current_time(datetime(2026, 1, 1, 23, 59, tzinfo=timezone.utc))
    storage.append({"seq": 1})

    storage.set_current_time(datetime(2026, 1, 2, 0, 0, 1, tzinfo=timezone.utc))
    storage.append({"seq": 2})
    storage.close()

    assert storage.read("2026-01-01") == [{"seq": 1}]
    assert storage.read("2026-01-02") == [{"seq": 2}]
    assert storage.fsync_count == 2  # pre-rotate + close
