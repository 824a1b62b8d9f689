"""
History Engine

Linear undo/redo history for one editing scope. The application owns one
engine for company-data edits and a separate engine per modal that needs
localized undo (the template designer, for example).

State is fully described by (undo stack, redo stack, saved checkpoint):
- Recording a new action pushes it and discards the redo stack
- A coalescing action merges into the stack top when the keys match
- The checkpoint marks which stack top corresponds to the last save

IMPORTANT: The engine never applies an action's forward effect on record.
Callers mutate their state first, then record the action describing it.

Undo/Redo on an empty stack is a silent no-op. Exceptions raised by replay
closures are logged and propagate to the caller unchanged.
"""

from typing import Callable, Optional

import structlog

from ledger_history.audit import AuditLogger
from ledger_history.config import HistorySettings, get_settings
from ledger_history.models.action import ReversibleAction, merge_actions
from ledger_history.models.audit import AuditEvent, AuditEventBuilder


Listener = Callable[[], None]


class _Sentinel:
    """Checkpoint marker that is never an action on the undo stack."""

    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return f"<{self._name}>"


# Checkpoint when the saved state is the empty history
EMPTY = _Sentinel("empty")
# Checkpoint when the saved state was trimmed out of history
UNREACHABLE = _Sentinel("unreachable")


class HistoryEngine:
    """
    Owns the undo/redo stacks, the saved checkpoint and the merge policy.

    Not thread-safe: use from the UI thread only.
    """

    def __init__(
        self,
        max_history_size: Optional[int] = None,
        audit_logger: Optional[AuditLogger] = None,
        scope: str = "default",
    ):
        """
        Initialize an empty history.

        Args:
            max_history_size: Maximum undoable entries to keep. The oldest
                    entry is dropped once exceeded. None keeps everything.
            audit_logger: Receives an audit event for every transition.
            scope: Name of the editing scope, used in logs and audit events.
        """
        if max_history_size is not None and max_history_size < 1:
            raise ValueError("max_history_size must be at least 1 (or None)")

        self._undo_stack: list[ReversibleAction] = []
        self._redo_stack: list[ReversibleAction] = []
        self._checkpoint: object = EMPTY
        self._listeners: list[Listener] = []
        self._max_history_size = max_history_size
        self._audit = audit_logger
        self._scope = scope
        self._logger = structlog.get_logger(__name__).bind(scope=scope)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[HistorySettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        scope: str = "default",
    ) -> "HistoryEngine":
        """Build an engine using the configured history limit."""
        settings = settings or get_settings().history
        if not settings.audit_enabled:
            audit_logger = None
        return cls(
            max_history_size=settings.history_limit,
            audit_logger=audit_logger,
            scope=scope,
        )

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def max_history_size(self) -> Optional[int]:
        return self._max_history_size

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    @property
    def undo_description(self) -> Optional[str]:
        """Description of the action the next undo() reverts."""
        return self._undo_stack[-1].description if self._undo_stack else None

    @property
    def redo_description(self) -> Optional[str]:
        """Description of the action the next redo() reapplies."""
        return self._redo_stack[-1].description if self._redo_stack else None

    @property
    def is_at_saved_state(self) -> bool:
        """True iff the current undo-stack top is the saved checkpoint."""
        return self._top() is self._checkpoint

    def get_undo_history(self) -> list[str]:
        """Descriptions of undoable actions, most recent first."""
        return [action.description for action in reversed(self._undo_stack)]

    def get_redo_history(self) -> list[str]:
        """Descriptions of redoable actions, most recently undone first."""
        return [action.description for action in reversed(self._redo_stack)]

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Listener:
        """
        Call `listener()` after every state change.

        Returns the listener so this can be used as a decorator.
        """
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        """Stop notifying `listener`. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def record_action(self, action: ReversibleAction) -> None:
        """
        Record an action whose effect the caller has already applied.

        A coalescing action merges into the stack top only when all hold:
        - its key matches the top's key
        - the redo stack is empty (no merge onto a state that was undone to)
        - the top is not the saved checkpoint (so undo can reach it again)

        Otherwise it is pushed and the redo stack is discarded.
        """
        if not isinstance(action, ReversibleAction):
            raise TypeError(
                f"Expected ReversibleAction, got {type(action).__name__}"
            )

        if self._can_merge(action):
            top = self._undo_stack[-1]
            self._undo_stack[-1] = merge_actions(top, action)
            self._logger.debug(
                "history_action_merged",
                action=action.description,
                coalesce_key=action.coalesce_key,
            )
            self._audit_event(AuditEventBuilder.action_merged(
                self._scope, action.description, action.coalesce_key,
            ))
        else:
            self._undo_stack.append(action)
            self._redo_stack.clear()
            self._logger.debug(
                "history_action_recorded",
                action=action.description,
                undo_count=len(self._undo_stack),
            )
            self._audit_event(AuditEventBuilder.action_recorded(
                self._scope, action.description, len(self._undo_stack),
            ))
            self._trim()

        self._notify()

    def undo(self) -> bool:
        """
        Revert the most recent action.

        Returns False (and does nothing) when there is nothing to undo.
        """
        if not self._undo_stack:
            return False

        action = self._undo_stack.pop()
        self._replay(action, "undo")
        self._redo_stack.append(action)
        self._logger.debug("history_undo", action=action.description)
        self._audit_event(AuditEventBuilder.action_undone(
            self._scope, action.description,
        ))
        self._notify()
        return True

    def redo(self) -> bool:
        """
        Reapply the most recently undone action.

        Returns False (and does nothing) when there is nothing to redo.
        """
        if not self._redo_stack:
            return False

        action = self._redo_stack.pop()
        self._replay(action, "redo")
        self._undo_stack.append(action)
        self._logger.debug("history_redo", action=action.description)
        self._audit_event(AuditEventBuilder.action_redone(
            self._scope, action.description,
        ))
        self._notify()
        return True

    def undo_to(self, index: int) -> int:
        """
        Undo `index + 1` actions (index 0 = most recent).

        Stops early if the undo stack runs out. Returns the number of
        actions undone.
        """
        steps = 0
        for _ in range(index + 1):
            if not self.undo():
                break
            steps += 1
        return steps

    def redo_to(self, index: int) -> int:
        """
        Redo `index + 1` actions (index 0 = most recently undone).

        Stops early if the redo stack runs out. Returns the number of
        actions redone.
        """
        steps = 0
        for _ in range(index + 1):
            if not self.redo():
                break
            steps += 1
        return steps

    def mark_saved(self) -> None:
        """Mark the current state as the last persisted one."""
        self._checkpoint = self._top()
        self._logger.debug(
            "history_checkpoint_saved",
            undo_count=len(self._undo_stack),
        )
        self._audit_event(AuditEventBuilder.checkpoint_saved(
            self._scope, len(self._undo_stack),
        ))
        self._notify()

    def clear(self) -> None:
        """
        Drop all history and reset the checkpoint to the empty history.

        Call when a new document is loaded or a modal opens for create,
        so stale actions can't be replayed against the new state.
        """
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._checkpoint = EMPTY
        self._logger.debug("history_cleared")
        self._audit_event(AuditEventBuilder.history_cleared(self._scope))
        self._notify()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _top(self) -> object:
        return self._undo_stack[-1] if self._undo_stack else EMPTY

    def _can_merge(self, action: ReversibleAction) -> bool:
        if not action.is_coalescing or not self._undo_stack:
            return False
        if self._redo_stack:
            return False
        top = self._undo_stack[-1]
        if top is self._checkpoint:
            return False
        return top.coalesce_key == action.coalesce_key

    def _trim(self) -> None:
        if self._max_history_size is None:
            return
        while len(self._undo_stack) > self._max_history_size:
            dropped = self._undo_stack.pop(0)
            # Undoing everything no longer returns to the saved state
            if self._checkpoint is EMPTY or self._checkpoint is dropped:
                self._checkpoint = UNREACHABLE
            self._logger.debug(
                "history_trimmed",
                dropped=dropped.description,
                max_history_size=self._max_history_size,
            )
            self._audit_event(AuditEventBuilder.history_trimmed(
                self._scope, dropped.description, self._max_history_size,
            ))

    def _replay(self, action: ReversibleAction, direction: str) -> None:
        closure = action.undo if direction == "undo" else action.redo
        try:
            closure()
        except Exception as e:
            self._logger.error(
                "history_replay_failed",
                direction=direction,
                action=action.description,
                error=str(e),
                exc_info=True,
            )
            self._audit_event(AuditEventBuilder.replay_failed(
                self._scope, direction, action.description, e,
            ))
            raise

    def _audit_event(self, event: AuditEvent) -> None:
        if self._audit is not None:
            self._audit.log(event)

    def _notify(self) -> None:
        # Snapshot so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener()

    def __repr__(self) -> str:
        return (
            f"HistoryEngine(scope={self._scope!r}, undo={len(self._undo_stack)}, "
            f"redo={len(self._redo_stack)}, saved={self.is_at_saved_state})"
        )
