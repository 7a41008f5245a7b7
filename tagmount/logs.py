"""Logging setup: request ids, record formatting and a rotating log file handler."""

from __future__ import annotations

import itertools
import logging
import os
import sys
import threading
from collections import deque
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

_REQ_COUNTER = itertools.count()
_REQ_LOCK = threading.Lock()
_local = threading.local()

_LEVEL_NAMES = {
    logging.CRITICAL: "ERROR",
    logging.ERROR: "ERROR",
    logging.WARNING: "WARN",
    logging.INFO: "INFO",
    logging.DEBUG: "DEBUG",
}


def next_request_id() -> int:
    """Allocate a new request id and make it current for this thread."""
    with _REQ_LOCK:
        value = next(_REQ_COUNTER)
    set_request_id(value)
    return value


def set_request_id(value: int) -> None:
    """Set the request id reported in this thread's log lines."""
    _local.request_id = value


def get_request_id() -> int:
    """The request id of the current thread; 0 if none was set."""
    return getattr(_local, "request_id", 0)


def _level_name(levelno: int) -> str:
    if levelno in _LEVEL_NAMES:
        return _LEVEL_NAMES[levelno]
    if levelno < logging.DEBUG:
        return "TRACE"
    return logging.getLevelName(levelno)


class _RecordFormatter(logging.Formatter):
    """Formats records with timestamp, thread, request id, target and level."""

    def format(self, record: logging.LogRecord) -> str:
        created = record.created
        local = datetime.fromtimestamp(created)
        secs = int(created)
        millis = int((created - secs) * 1000)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return (
            f"{local:[%Y-%m-%d][%H:%M:%S]}[{secs}.{millis:03d}]"
            f"[Thread: {record.thread}][Request: {get_request_id()}]"
            f"[{record.name}][{_level_name(record.levelno)}] {message}"
        )


def setup_logger(level: int | str, handlers: Iterable[logging.Handler]) -> logging.Logger:
    """Send records at ``level`` and above from the root logger to ``handlers``."""
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    formatter = _RecordFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root


def _birth_time(path: Path) -> float:
    st = path.stat()
    return getattr(st, "st_birthtime", st.st_mtime)


class RotatingLogger(logging.Handler):
    """A log file handler that switches files by date and removes old ones.

    The file name is the current UTC time formatted with ``fmt``; it is
    re-checked every ``rotate_check`` records. Only files created by this
    handler are removed on rotation; on start-up, surplus ``.log`` files
    in ``log_dir`` beyond ``num_backups`` are removed, oldest first.
    """

    def __init__(
        self,
        log_dir: str | os.PathLike[str],
        fmt: str,
        num_backups: int,
        rotate_check: int,
    ) -> None:
        if rotate_check <= 0:
            raise ValueError("rotate_check must be positive")
        super().__init__()
        self.log_dir = Path(log_dir)
        self.fmt = fmt
        self.num_backups = num_backups
        self.rotate_check = rotate_check

        oldest = self._oldest_logs(self.log_dir)
        overage = len(oldest) - num_backups
        for to_rm in oldest[: max(overage, 0)]:
            to_rm.unlink()

        self._cur_log = self.generate_name(self.log_dir, fmt)
        self._stream: IO[str] = self._open(self._cur_log)
        self._archives: deque[Path] = deque()
        self._counter = itertools.count()
        self._state_lock = threading.Lock()

    @property
    def current_log(self) -> Path:
        """The file currently written to."""
        return self._cur_log

    @staticmethod
    def generate_name(log_dir: str | os.PathLike[str], fmt: str) -> Path:
        """The log file path for the current UTC time."""
        return Path(log_dir) / datetime.now(timezone.utc).strftime(fmt)

    @staticmethod
    def _open(path: Path) -> IO[str]:
        return open(path, "a", encoding="utf-8")

    @staticmethod
    def _oldest_logs(log_dir: Path) -> list[Path]:
        entries: list[tuple[float, Path]] = []
        for entry in log_dir.iterdir():
            # Only .log files are considered, so nothing else is ever deleted.
            if not entry.name.endswith(".log"):
                continue
            try:
                entries.append((_birth_time(entry), entry))
            except OSError:
                continue
        entries.sort(key=lambda item: item[0])
        return [path for _, path in entries]

    def _rotate(self, new_log: Path, stream: IO[str]) -> None:
        self._archives.append(self._cur_log)
        self._cur_log = new_log
        old = self._stream
        self._stream = stream
        try:
            old.flush()
        finally:
            old.close()
        if len(self._archives) > self.num_backups:
            self._archives.popleft().unlink()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception as exc:  # noqa: BLE001
            print(f"Couldn't format record: {exc!r}", file=sys.stderr)
            return
        with self._state_lock:
            count = next(self._counter)
            if count % self.rotate_check == 0:
                new_log = self.generate_name(self.log_dir, self.fmt)
                if new_log != self._cur_log:
                    try:
                        stream = self._open(new_log)
                    except OSError as exc:
                        print(f"Couldn't allocate new log file: {exc!r}", file=sys.stderr)
                    else:
                        try:
                            self._rotate(new_log, stream)
                        except OSError as exc:
                            print(f"Couldn't rotate log: {exc!r}", file=sys.stderr)
            try:
                self._stream.write(line + "\n")
            except (OSError, ValueError) as exc:
                print(f"Couldn't write record to stream: {exc!r}", file=sys.stderr)
            try:
                self._stream.flush()
            except (OSError, ValueError) as exc:
                print(f"Couldn't flush log: {exc!r}", file=sys.stderr)

    def flush(self) -> None:
        with self._state_lock:
            try:
                self._stream.flush()
            except (OSError, ValueError) as exc:
                print(f"Couldn't flush log: {exc!r}", file=sys.stderr)

    def close(self) -> None:
        with self._state_lock:
            if not self._stream.closed:
                try:
                    self._stream.flush()
                finally:
                    self._stream.close()
        super().close()