"""Tests for the audit trail of history engines."""

import pytest

from ledger_history.audit import AuditLogger, InMemoryAuditStorage, StorageError
from ledger_history.audit.storage import AuditStorageInterface
from ledger_history.history import HistoryEngine
from ledger_history.models.action import ActionBuilder, ReversibleAction
from ledger_history.models.audit import AuditEventBuilder, AuditEventType


class FailingStorage(AuditStorageInterface):
    def append_event(self, event):
        raise StorageError("disk full")

    def get_events_by_scope(self, scope, limit=100):
        return []

    def get_recent_events(self, limit=50, event_type=None):
        return []


@pytest.fixture
def storage():
    return InMemoryAuditStorage()


@pytest.fixture
def engine(storage):
    return HistoryEngine(audit_logger=AuditLogger(storage=storage), scope="company")


def event_types(storage):
    return [e.event_type for e in reversed(storage.get_recent_events(limit=100))]


class TestInMemoryAuditStorage:
    """Tests for InMemoryAuditStorage."""

    def test_retention_drops_oldest(self):
        """Test the storage keeps only the newest events."""
        storage = InMemoryAuditStorage(retention=2)
        for i in range(3):
            storage.append_event(AuditEventBuilder.action_recorded("s", f"step {i}", i))
        assert len(storage) == 2
        assert storage.get_recent_events()[0].details["action"] == "step 2"

    def test_filter_by_scope(self):
        """Test events can be listed per editing scope."""
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.history_cleared("company"))
        storage.append_event(AuditEventBuilder.history_cleared("template_designer"))
        assert [e.scope for e in storage.get_events_by_scope("company")] == ["company"]

    def test_filter_by_type(self):
        """Test recent events can be filtered by type."""
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.history_cleared("company"))
        storage.append_event(AuditEventBuilder.checkpoint_saved("company", 0))
        events = storage.get_recent_events(event_type=AuditEventType.HISTORY_CLEARED)
        assert len(events) == 1

    def test_rejects_zero_retention(self):
        """Test retention must be positive."""
        with pytest.raises(ValueError):
            InMemoryAuditStorage(retention=0)


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_without_storage(self):
        """Test local-only logging succeeds."""
        assert AuditLogger().log(AuditEventBuilder.history_cleared("company")) is True

    def test_log_persists_to_empty_storage(self, storage):
        """Test events reach a storage that is still empty."""
        logger = AuditLogger(storage=storage)
        assert logger.log(AuditEventBuilder.history_cleared("company")) is True
        assert len(storage) == 1

    def test_storage_failure_is_not_raised(self):
        """Test a failing storage never breaks the caller."""
        logger = AuditLogger(storage=FailingStorage())
        assert logger.log(AuditEventBuilder.history_cleared("company")) is False


class TestEngineAuditTrail:
    """Tests for audit events emitted by HistoryEngine."""

    def test_transitions_are_audited(self, engine, storage):
        """Test each engine transition produces one event."""
        engine.record_action(ReversibleAction(description="Add", undo=lambda: None, redo=lambda: None))
        engine.undo()
        engine.redo()
        engine.mark_saved()
        engine.clear()

        assert event_types(storage) == [
            AuditEventType.ACTION_RECORDED,
            AuditEventType.ACTION_UNDONE,
            AuditEventType.ACTION_REDONE,
            AuditEventType.CHECKPOINT_SAVED,
            AuditEventType.HISTORY_CLEARED,
        ]
        assert all(e.scope == "company" for e in storage.get_recent_events())

    def test_long_description_is_audited(self, engine, storage):
        """Test a long action label is recorded and audited in full."""
        description = "Edit notes " + "n" * 1000
        engine.record_action(ReversibleAction(description=description, undo=lambda: None, redo=lambda: None))
        assert engine.undo_description == description
        assert storage.get_recent_events()[0].details["action"] == description

    def test_merge_is_audited(self, engine, storage):
        """Test merged edits produce a merge event."""
        values = []
        engine.record_action(ActionBuilder.coalescing_edit("Width", "w", values.append, 0, 1))
        engine.record_action(ActionBuilder.coalescing_edit("Width", "w", values.append, 1, 2))
        assert event_types(storage) == [
            AuditEventType.ACTION_RECORDED,
            AuditEventType.ACTION_MERGED,
        ]

    def test_trim_is_audited(self, storage):
        """Test dropped history entries are audited."""
        engine = HistoryEngine(max_history_size=1, audit_logger=AuditLogger(storage=storage))
        for name in ["A", "B"]:
            engine.record_action(ReversibleAction(description=name, undo=lambda: None, redo=lambda: None))
        trimmed = storage.get_recent_events(event_type=AuditEventType.HISTORY_TRIMMED)
        assert len(trimmed) == 1
        assert trimmed[0].details["dropped"] == "A"

    def test_replay_failure_is_audited(self, engine, storage):
        """Test a failing closure is audited before the error propagates."""
        def fail():
            raise KeyError("missing expense")

        engine.record_action(ReversibleAction(description="Delete", undo=fail, redo=fail))
        with pytest.raises(KeyError):
            engine.undo()

        failed = storage.get_recent_events(event_type=AuditEventType.REPLAY_FAILED)
        assert len(failed) == 1
        assert failed[0].error_type == "KeyError"
        assert failed[0].details["direction"] == "undo"
