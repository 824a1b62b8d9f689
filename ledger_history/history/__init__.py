"""Undo/redo history package."""

from ledger_history.history.engine import HistoryEngine
from ledger_history.history.recording import RecordingGuard
from ledger_history.history.toolbar import HistoryItem, UndoRedoToolbar

__all__ = [
    "HistoryEngine",
    "HistoryItem",
    "RecordingGuard",
    "UndoRedoToolbar",
]
