"""
Audit Models for Ledger History

Every transition of a history engine can be logged for audit purposes.
This provides:
1. Traceability of what was undone or redone, and when
2. Debugging information when a replay closure fails
3. A record of save checkpoints per editing scope

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
The audit trail is NOT a persisted undo history: it cannot be replayed.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of history transitions we audit."""
    # Recording
    ACTION_RECORDED = "action_recorded"
    ACTION_MERGED = "action_merged"
    HISTORY_TRIMMED = "history_trimmed"

    # Replay
    ACTION_UNDONE = "action_undone"
    ACTION_REDONE = "action_redone"
    REPLAY_FAILED = "replay_failed"

    # Lifecycle
    CHECKPOINT_SAVED = "checkpoint_saved"
    HISTORY_CLEARED = "history_cleared"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    One of these is created for every engine transition when an audit
    logger is attached to the engine.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
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

    # Which editing scope produced it (e.g. "company", "template_designer")
    scope: str = Field(
        default="default",
        max_length=100,
        description="Name of the history engine's editing scope"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "scope": self.scope,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events for each engine transition.

    Usage:
        event = AuditEventBuilder.action_recorded("company", "Add expense", 3)
        event = AuditEventBuilder.history_cleared("template_designer")
    """

    @staticmethod
    def action_recorded(
        scope: str,
        action_description: str,
        undo_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_RECORDED,
            scope=scope,
            description=f"Recorded: {action_description}",
            details={
                "action": action_description,
                "undo_count": undo_count,
            },
        )

    @staticmethod
    def action_merged(
        scope: str,
        action_description: str,
        coalesce_key: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_MERGED,
            severity=AuditSeverity.DEBUG,
            scope=scope,
            description=f"Merged into previous edit: {action_description}",
            details={
                "action": action_description,
                "coalesce_key": coalesce_key,
            },
        )

    @staticmethod
    def history_trimmed(
        scope: str,
        dropped_description: str,
        max_history_size: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_TRIMMED,
            severity=AuditSeverity.DEBUG,
            scope=scope,
            description=f"Oldest history entry dropped: {dropped_description}",
            details={
                "dropped": dropped_description,
                "max_history_size": max_history_size,
            },
        )

    @staticmethod
    def action_undone(
        scope: str,
        action_description: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_UNDONE,
            scope=scope,
            description=f"Undo: {action_description}",
            details={"action": action_description},
        )

    @staticmethod
    def action_redone(
        scope: str,
        action_description: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_REDONE,
            scope=scope,
            description=f"Redo: {action_description}",
            details={"action": action_description},
        )

    @staticmethod
    def replay_failed(
        scope: str,
        direction: str,
        action_description: str,
        error: BaseException,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPLAY_FAILED,
            severity=AuditSeverity.ERROR,
            scope=scope,
            description=f"{direction.capitalize()} failed: {action_description}",
            details={
                "action": action_description,
                "direction": direction,
            },
            error_type=type(error).__name__,
            error_message=str(error),
        )

    @staticmethod
    def checkpoint_saved(
        scope: str,
        undo_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHECKPOINT_SAVED,
            scope=scope,
            description=f"Saved checkpoint at {undo_count} undoable edits",
            details={"undo_count": undo_count},
        )

    @staticmethod
    def history_cleared(
        scope: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_CLEARED,
            scope=scope,
            description="History cleared",
        )
