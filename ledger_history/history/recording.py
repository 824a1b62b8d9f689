"""
Recording Suppression

Callers must not record actions while they repopulate form fields from a
model object, or while an undo/redo closure sets several dependent fields
that would otherwise each try to record themselves.

The engine has no suppression flag of its own. Each caller owns a
RecordingGuard and wraps programmatic state loads in `suppressed()`:

    with self._guard.suppressed():
        self.primary_color = template.primary_color
        ...

The guard is a depth counter restored in a `finally`, so nesting and
exceptions mid-load can't leave recording switched off.
"""

from contextlib import contextmanager
from typing import Iterator

from ledger_history.history.engine import HistoryEngine
from ledger_history.models.action import ReversibleAction


class RecordingGuard:
    """Caller-owned switch that turns RecordAction calls into no-ops."""

    def __init__(self) -> None:
        self._depth = 0

    @property
    def is_suppressed(self) -> bool:
        return self._depth > 0

    @contextmanager
    def suppressed(self) -> Iterator[None]:
        """Suppress recording for the duration of the block."""
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def record(self, engine: HistoryEngine, action: ReversibleAction) -> bool:
        """
        Record `action` on `engine` unless suppressed.

        Returns True if the action was handed to the engine.
        """
        if self.is_suppressed:
            return False
        engine.record_action(action)
        return True
