"""
Audit Models for Account Book

Every ledger mutation, save and load is recorded as an audit event.
This provides:
1. Traceability of what happened to each entry id
2. Debugging information when a save or load goes wrong
3. Ability to reconstruct the session

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    ENTRY_ADDED = "entry_added"
    ENTRY_DELETED = "entry_deleted"
    ENTRY_NOT_FOUND = "entry_not_found"

    # Persistence
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"
    LEDGER_LOADED = "ledger_loaded"
    LOAD_WARNING = "load_warning"
    RELOAD_REFUSED = "reload_refused"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant ledger action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'entry', 'ledger')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Entry id this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added(entry_id, "Food", 15000)
        event = AuditEventBuilder.save_failed("ledger.csv", 3)
    """

    @staticmethod
    def entry_added(
        entry_id: int,
        category: str,
        amount: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry {entry_id} added: {category} {amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(entry_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry {entry_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def entry_not_found(entry_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry {entry_id} does not exist",
            is_user_action=True,
        )

    @staticmethod
    def ledger_saved(location: str, entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            entity_type="ledger",
            description=f"Saved {entry_count} entries",
            details={
                "location": location,
                "entry_count": entry_count,
            },
        )

    @staticmethod
    def save_failed(location: str, entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Could not save {entry_count} entries",
            details={
                "location": location,
                "entry_count": entry_count,
            },
        )

    @staticmethod
    def ledger_loaded(
        location: str,
        entry_count: int,
        skipped_lines: int,
        source_found: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            description=f"Loaded {entry_count} entries",
            details={
                "location": location,
                "entry_count": entry_count,
                "skipped_lines": skipped_lines,
                "source_found": source_found,
            },
        )

    @staticmethod
    def load_warning(
        location: str,
        message: str,
        line_number: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_WARNING,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description=message[:500],
            details={
                "location": location,
                "line_number": line_number,
            },
        )

    @staticmethod
    def reload_refused(entry_count: int, unsaved_changes: bool = False) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RELOAD_REFUSED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description="Reload refused: ledger holds entries or unsaved changes",
            details={
                "entry_count": entry_count,
                "unsaved_changes": unsaved_changes,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
