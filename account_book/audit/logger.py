"""
Audit Logger

DESIGN DECISION: Every ledger mutation, save and load is logged.
This provides:
1. Traceability of what happened to each entry
2. Debugging capability when the ledger file misbehaves

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Keeps a bounded in-memory history for the current session
"""

import logging
import sys
from collections import deque
from typing import Any, Callable, Optional

import structlog
from pydantic import ValidationError

from account_book.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Route structlog through stdlib logging so handlers and levels are set in one place
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structured logger; import this instead of calling structlog directly."""
    return structlog.get_logger(name)


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
) -> None:
    """
    Attach the single stdlib handler that structlog output goes through.

    Logs go to log_file when given, otherwise to stderr, so they never
    interleave with the menu output on stdout.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and keeps the most
    recent ones in memory.
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many events to keep in recent_events.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = get_logger("account_book.audit")

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Events of this session, oldest first."""
        return list(self._history)

    def events_for_entry(self, entry_id: int) -> list[AuditEvent]:
        return [
            event for event in self._history
            if event.entity_type == "entry" and event.entity_id == entry_id
        ]

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was logged. Never raises.
        """
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # A broken log handler must not take the ledger down
            return False

        return True

    def _record(self, build: Callable[..., AuditEvent], *args: Any, **kwargs: Any) -> bool:
        """Build an event and log it. A malformed event is reported, not raised."""
        try:
            event = build(*args, **kwargs)
        except ValidationError as e:
            self._logger.error(
                "audit_event_invalid",
                builder=build.__name__,
                error=str(e),
            )
            return False
        return self.log(event)

    def log_entry_added(self, entry_id: int, category: str, amount: int) -> None:
        """Log a new entry."""
        self._record(AuditEventBuilder.entry_added, entry_id, category, amount)

    def log_entry_deleted(self, entry_id: int) -> None:
        self._record(AuditEventBuilder.entry_deleted, entry_id)

    def log_entry_not_found(self, entry_id: int) -> None:
        self._record(AuditEventBuilder.entry_not_found, entry_id)

    def log_saved(self, location: str, entry_count: int) -> None:
        self._record(AuditEventBuilder.ledger_saved, location, entry_count)

    def log_save_failed(self, location: str, entry_count: int) -> None:
        """Log a failed save."""
        self._record(AuditEventBuilder.save_failed, location, entry_count)

    def log_loaded(
        self,
        location: str,
        entry_count: int,
        skipped_lines: int,
        source_found: bool,
    ) -> None:
        """Log a completed load."""
        self._record(
            AuditEventBuilder.ledger_loaded,
            location=location,
            entry_count=entry_count,
            skipped_lines=skipped_lines,
            source_found=source_found,
        )

    def log_load_warning(
        self,
        location: str,
        message: str,
        line_number: Optional[int] = None,
    ) -> None:
        self._record(AuditEventBuilder.load_warning, location, message, line_number)

    def log_reload_refused(self, entry_count: int, unsaved_changes: bool = False) -> None:
        self._record(AuditEventBuilder.reload_refused, entry_count, unsaved_changes)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self._record(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
        )
