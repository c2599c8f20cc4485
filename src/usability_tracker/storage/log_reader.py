"""Parser for audit log files written by :class:`AuditLog`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from usability_tracker.storage.audit_log import (
    ACTIVATE_MARKER,
    DEACTIVATE_MARKER,
    LOG_FILE_PREFIX,
    QUESTIONNAIRE1_MARKER,
    QUESTIONNAIRE2_MARKER,
)
from usability_tracker.trackers.history import NavigationEvent

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kinds of lines found in an audit log."""

    VIEW = "view"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    QUESTIONNAIRE1 = "questionnaire1"
    QUESTIONNAIRE2 = "questionnaire2"


@dataclass
class LogEntry:
    """A single decoded audit log line."""

    timestamp: int
    kind: EntryKind
    text: str
    screen_id: str | None = None
    rating: float | None = None
    history: list[NavigationEvent] = field(default_factory=list)
    freetext: str | None = None

    @property
    def is_survey(self) -> bool:
        return self.kind in (EntryKind.QUESTIONNAIRE1, EntryKind.QUESTIONNAIRE2)


def parse_history(text: str) -> list[NavigationEvent]:
    """Decode ``<retention>:<screen>`` pairs joined by commas."""
    events = []
    for pair in text.split(","):
        if not pair:
            continue
        retention, sep, screen_id = pair.partition(":")
        if not sep:
            raise ValueError(f"Malformed history pair: {pair!r}")
        events.append(NavigationEvent(screen_id=screen_id, retention_time=int(retention)))
    return events


def parse_line(line: str) -> LogEntry:
    """Decode one log line.

    Raises:
        ValueError: if the line does not follow the log format
    """
    line = line.rstrip("\r\n")
    timestamp_text, sep, text = line.partition(",")
    if not sep:
        raise ValueError(f"Missing timestamp separator: {line!r}")

    try:
        timestamp = int(timestamp_text)
    except ValueError:
        raise ValueError(f"Invalid timestamp: {timestamp_text!r}") from None

    if text == ACTIVATE_MARKER:
        return LogEntry(timestamp=timestamp, kind=EntryKind.ACTIVATE, text=text)

    if text == DEACTIVATE_MARKER:
        return LogEntry(timestamp=timestamp, kind=EntryKind.DEACTIVATE, text=text)

    if text.startswith(QUESTIONNAIRE1_MARKER + ","):
        payload = text[len(QUESTIONNAIRE1_MARKER) + 1 :]
        rating_text, _, history_text = payload.partition(",")
        try:
            rating = float(rating_text)
        except ValueError:
            raise ValueError(f"Invalid rating: {rating_text!r}") from None
        return LogEntry(
            timestamp=timestamp,
            kind=EntryKind.QUESTIONNAIRE1,
            text=text,
            rating=rating,
            history=parse_history(history_text),
        )

    if text.startswith(QUESTIONNAIRE2_MARKER + ","):
        payload = text[len(QUESTIONNAIRE2_MARKER) + 1 :]
        if len(payload) < 2 or not (payload.startswith("'") and payload.endswith("'")):
            raise ValueError(f"Free text is not quoted: {payload!r}")
        return LogEntry(
            timestamp=timestamp,
            kind=EntryKind.QUESTIONNAIRE2,
            text=text,
            freetext=payload[1:-1],
        )

    return LogEntry(timestamp=timestamp, kind=EntryKind.VIEW, text=text, screen_id=text)


def read_log(path: Path) -> list[LogEntry]:
    """Read all entries from a log file, skipping malformed lines."""
    entries = []
    with open(path, encoding="utf-8", newline="") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                entries.append(parse_line(line))
            except ValueError as e:
                logger.warning(f"{path.name}:{lineno}: skipping malformed line ({e})")
    return entries


def find_log_files(data_dir: Path) -> list[Path]:
    """Tracker log files in ``data_dir``, oldest first."""
    if not data_dir.exists():
        return []
    return sorted(
        data_dir.glob(f"{LOG_FILE_PREFIX}-*.txt"),
        key=lambda p: p.stem.rsplit("-", 1)[-1].zfill(20),
    )
