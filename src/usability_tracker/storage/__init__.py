"""Audit log storage."""

from usability_tracker.storage.audit_log import AuditLog
from usability_tracker.storage.log_reader import EntryKind, LogEntry, read_log

__all__ = ["AuditLog", "EntryKind", "LogEntry", "read_log"]
