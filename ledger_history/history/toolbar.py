"""
Undo/Redo Toolbar Binding

The state behind the undo/redo button group shown in the app header and in
modals: enabled flags, tooltips, the history dropdown contents and the
dirty indicator. It re-reads everything from the engine on each change
notification, the engine's notification carries no payload.
"""

from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ledger_history.history.engine import HistoryEngine


class HistoryItem(BaseModel):
    """One row of the undo or redo dropdown."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Pass to undo_to/redo_to to jump here")
    description: str


class UndoRedoToolbar:
    """
    Button group state bound to a HistoryEngine.

    Works with any engine; call attach() again to rebind when the active
    editing scope changes (e.g. a modal opens).
    """

    def __init__(self, engine: Optional[HistoryEngine] = None):
        self._engine: Optional[HistoryEngine] = None
        self._action_callbacks: list[Callable[[], None]] = []

        self.can_undo = False
        self.can_redo = False
        self.undo_tooltip = "Undo"
        self.redo_tooltip = "Redo"
        self.is_dirty = False
        self.undo_items: list[HistoryItem] = []
        self.redo_items: list[HistoryItem] = []

        if engine is not None:
            self.attach(engine)

    @property
    def engine(self) -> Optional[HistoryEngine]:
        return self._engine

    def attach(self, engine: HistoryEngine) -> None:
        """Bind to `engine`, releasing any previously bound one."""
        self.detach()
        self._engine = engine
        engine.subscribe(self._on_engine_changed)
        self._update_state()

    def detach(self) -> None:
        if self._engine is not None:
            self._engine.unsubscribe(self._on_engine_changed)
            self._engine = None
        self._update_state()

    def on_action_performed(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after the toolbar undoes or redoes."""
        self._action_callbacks.append(callback)

    def refresh_history(self) -> None:
        """Rebuild the dropdown items from the engine's history."""
        if self._engine is None:
            self.undo_items = []
            self.redo_items = []
            return

        self.undo_items = [
            HistoryItem(index=i, description=d)
            for i, d in enumerate(self._engine.get_undo_history())
        ]
        self.redo_items = [
            HistoryItem(index=i, description=d)
            for i, d in enumerate(self._engine.get_redo_history())
        ]

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def undo(self) -> None:
        if self._engine is not None and self._engine.can_undo:
            self._engine.undo()
            self._action_performed()

    def redo(self) -> None:
        if self._engine is not None and self._engine.can_redo:
            self._engine.redo()
            self._action_performed()

    def undo_to(self, index: int) -> None:
        if self._engine is None:
            return
        if self._engine.undo_to(index):
            self._action_performed()

    def redo_to(self, index: int) -> None:
        if self._engine is None:
            return
        if self._engine.redo_to(index):
            self._action_performed()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _on_engine_changed(self) -> None:
        self._update_state()

    def _update_state(self) -> None:
        engine = self._engine
        if engine is None:
            self.can_undo = False
            self.can_redo = False
            self.undo_tooltip = "Undo"
            self.redo_tooltip = "Redo"
            self.is_dirty = False
            return

        self.can_undo = engine.can_undo
        self.can_redo = engine.can_redo
        self.is_dirty = not engine.is_at_saved_state

        undo_description = engine.undo_description
        redo_description = engine.redo_description
        self.undo_tooltip = f"Undo {undo_description}" if undo_description else "Undo"
        self.redo_tooltip = f"Redo {redo_description}" if redo_description else "Redo"

    def _action_performed(self) -> None:
        self.refresh_history()
        for callback in list(self._action_callbacks):
            callback()
