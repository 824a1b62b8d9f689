"""
Audit Storage

DESIGN DECISION: We define an abstract interface for audit storage.
This allows us to:
1. Keep the audit logger independent of where events end up
2. Use in-memory storage for tests and for the desktop session
3. Add a file or database backend later without touching the engine

Storage is synchronous: history engines run on the UI thread and every
operation completes before the triggering call returns.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Optional

from ledger_history.models.audit import AuditEvent, AuditEventType


class StorageError(Exception):
    """Base exception for audit storage operations."""
    pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit event storage.

    Audit events are append-only.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Returns:
            True if stored successfully

        Raises:
            StorageError: If the event could not be stored
        """
        pass

    @abstractmethod
    def get_events_by_scope(
        self,
        scope: str,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get events produced by one editing scope, oldest first.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 50,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        """
        Get recent events, newest first, optionally of one type.
        """
        pass


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Bounded in-memory audit storage.

    The oldest events are dropped once `retention` is exceeded.
    """

    def __init__(self, retention: int = 1000):
        if retention < 1:
            raise ValueError("retention must be at least 1")
        self._events: deque[AuditEvent] = deque(maxlen=retention)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_scope(
        self,
        scope: str,
        limit: int = 100,
    ) -> list[AuditEvent]:
        matching = [e for e in self._events if e.scope == scope]
        return matching[-limit:] if limit else []

    def get_recent_events(
        self,
        limit: int = 50,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        results = []
        for event in reversed(self._events):
            if event_type is not None and event.event_type != event_type:
                continue
            results.append(event)
            if len(results) >= limit:
                break
        return results

    def __len__(self) -> int:
        return len(self._events)
