"""
src/atm_machine/infrastructure/storage/journal_storage.py

ATM 세션 journal (JSONL, 하루 1파일)

- 한 step = 한 줄, os.write 1회
- 지급 실패 같은 critical entry는 바로 fsync
- 크래시로 잘린 마지막 줄은 다음 read() 때 잘라낸다
"""

import os
import json
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

FSYNC_POLICIES = ("batch", "critical")


def journal_filename(day: datetime) -> str:
    return f"atm_journal_{day.strftime('%Y-%m-%d')}.jsonl"


class JournalStorage:
    """
    Append-only ATM journal

    Writer는 runner 하나 (fd를 열어둔 채 사용).
    fsync_policy:
    - "batch": fsync_batch_size 줄마다, 또는 critical entry
    - "critical": 매 줄
    """

    def __init__(
        self,
        log_dir: Path,
        fsync_policy: str = "batch",
        fsync_batch_size: int = 10,
    ):
        if fsync_policy not in FSYNC_POLICIES:
            raise ValueError(f"Unknown fsync_policy: {fsync_policy}")

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.fsync_policy = fsync_policy
        self.fsync_batch_size = fsync_batch_size

        self.current_time: datetime = datetime.now(timezone.utc)
        self._time_pinned = False
        self.current_file_fd: Optional[int] = None
        self.current_file_path: Optional[Path] = None
        self.append_count = 0  # 마지막 fsync 이후 줄 수

        self.fsync_count = 0
        self.write_syscall_count = 0

    def set_current_time(self, time: datetime):
        """시계 고정 (rotation 테스트용)"""
        self.current_time = time
        self._time_pinned = True

    def append(self, log_entry: Dict[str, Any], is_critical: bool = False):
        if not self._time_pinned:
            self.current_time = datetime.now(timezone.utc)

        if self.current_file_fd is None:
            self._open(journal_filename(self.current_time))
        else:
            self.rotate_if_needed()

        line = json.dumps(log_entry) + "\n"
        os.write(self.current_file_fd, line.encode("utf-8"))
        self.write_syscall_count += 1
        self.append_count += 1

        must_sync = (
            is_critical
            or self.fsync_policy == "critical"
            or self.append_count >= self.fsync_batch_size
        )
        if must_sync:
            self._sync()

    def read(self, date: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        journal entry 목록

        Args:
            date: "YYYY-MM-DD" (None이면 현재 쓰는 파일)
        """
        path = self.log_dir / f"atm_journal_{date}.jsonl" if date else self.current_file_path
        if path is None or not path.exists():
            return []

        raw_lines = path.read_text().splitlines(keepends=True)
        entries = []
        broken_tail = False
        for i, line in enumerate(raw_lines):
            entry = _decode(line)
            if entry is None:
                broken_tail = i == len(raw_lines) - 1
                continue
            entries.append(entry)

        # 쓰다 만 마지막 줄은 파일에서 제거 (다음 append가 이어 붙지 않도록)
        if broken_tail:
            path.write_text("".join(raw_lines[:-1]))

        return entries

    def rotate_if_needed(self):
        """UTC 날짜가 바뀌었으면 이전 파일을 fsync 후 닫고 새 파일로"""
        if self.current_file_fd is None:
            return

        wanted = journal_filename(self.current_time)
        if wanted == self.current_file_path.name:
            return

        self._sync()
        os.close(self.current_file_fd)
        self._open(wanted)

    def close(self):
        if self.current_file_fd is None:
            return
        self._sync()
        os.close(self.current_file_fd)
        self.current_file_fd = None

    def _open(self, filename: str):
        self.current_file_path = self.log_dir / filename
        self.current_file_fd = os.open(
            self.current_file_path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o644
        )

    def _sync(self):
        os.fsync(self.current_file_fd)
        self.fsync_count += 1
        self.append_count = 0


def _decode(line: str) -> Optional[Dict[str, Any]]:
    """JSONL 한 줄 → dict (깨진 줄이면 None)"""
    try:
        return json.loads(line)
    except json.JSONDecodeError:
        return None
