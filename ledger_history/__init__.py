"""
Ledger History - Source Package

Undo/redo for a desktop bookkeeping app. Every edit to company data, and
every edit inside modals such as the invoice template designer, is recorded
as a reversible action in a linear history.

DESIGN PRINCIPLES:
1. Callers apply an edit first, then record how to reverse it
2. One logical edit = one history entry (bursts of same-field edits merge)
3. Undo/redo never throws for an empty history
4. Every editing scope owns its own history
5. "Unsaved changes" is answered by the history, not by diffing data
"""

from ledger_history.history import HistoryEngine, RecordingGuard, UndoRedoToolbar
from ledger_history.models.action import ActionBuilder, ReversibleAction

__version__ = "1.0.0"
__author__ = "Ledger History Team"

__all__ = [
    "ActionBuilder",
    "HistoryEngine",
    "RecordingGuard",
    "ReversibleAction",
    "UndoRedoToolbar",
]
