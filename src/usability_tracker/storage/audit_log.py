"""Append-only textual audit log.

Every line has the form ``<unix-timestamp>,<text>\\n`` and is flushed and
synced to disk before :meth:`AuditLog.log` returns. The log is a
best-effort sink: I/O errors are reported through the diagnostic logger
and counted, never raised to the caller.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

ACTIVATE_MARKER = "_ACTIVATE_"
DEACTIVATE_MARKER = "_DEACTIVATE_"
QUESTIONNAIRE1_MARKER = "_QUESTIONNAIRE1_"
QUESTIONNAIRE2_MARKER = "_QUESTIONNAIRE2_"

LOG_FILE_PREFIX = "UsabilityTracker"


def log_filename(device_id: str, base_time: int) -> str:
    """File name for the log of one tracker lifetime."""
    return f"{LOG_FILE_PREFIX}-{device_id}-{base_time}.txt"


def format_line(timestamp: int, text: str) -> str:
    return f"{timestamp},{text}\n"


class AuditLog:
    """Per-launch audit log file with a durable write per line."""

    def __init__(
        self,
        path: Path,
        clock: Callable[[], float] = time.time,
        sync_writes: bool = True,
    ):
        self.path = path
        self._clock = clock
        self._sync_writes = sync_writes
        self._lock = threading.Lock()
        self._file: TextIO | None = None
        self._failed_writes = 0
        self._closed = False

        self._open()

    @classmethod
    def for_launch(
        cls,
        data_dir: Path,
        device_id: str,
        base_time: int,
        clock: Callable[[], float] = time.time,
        sync_writes: bool = True,
    ) -> AuditLog:
        """Create the log file for a tracker started at ``base_time``."""
        return cls(data_dir / log_filename(device_id, base_time), clock=clock, sync_writes=sync_writes)

    def _open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # newline="" keeps "\n" untranslated on every platform
            self._file = open(self.path, "a", encoding="utf-8", newline="")
            logger.info(f"Audit log opened at {self.path}")
        except OSError as e:
            self._file = None
            logger.warning(f"Could not open audit log {self.path}: {e} - entries will be dropped")

    @property
    def failed_writes(self) -> int:
        """Number of lines that could not be written."""
        return self._failed_writes

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def log(self, text: str) -> bool:
        """Append a timestamped line and sync it to disk.

        Returns True when the line was written.
        """
        line = format_line(int(self._clock()), text)

        with self._lock:
            if self._file is None:
                self._failed_writes += 1
                if not self._closed:
                    logger.debug(f"Audit log unavailable, dropped: {text!r}")
                return False

            try:
                self._file.write(line)
                self._file.flush()
                if self._sync_writes:
                    os.fsync(self._file.fileno())
            except OSError as e:
                self._failed_writes += 1
                logger.warning(f"Failed to write audit log entry: {e}")
                return False

        return True

    def close(self) -> None:
        """Close the underlying file. Later writes are dropped."""
        with self._lock:
            self._closed = True
            if self._file is None:
                return
            try:
                self._file.close()
            except OSError as e:
                logger.warning(f"Error closing audit log: {e}")
            finally:
                self._file = None
