"""
Reversible Action Models

Every undoable edit in the ledger is one of these. An action carries a
human-readable description and two opaque closures: one that reverts the edit
and one that reapplies it. The history engine never looks inside the
closures, it only orders them.

DESIGN DECISION: There is a single concrete model rather than a class
hierarchy. Variations (single-field edits, coalescing edits, grouped edits)
are produced by ActionBuilder and differ only in the closures they build and
in the coalescing key they set.

Closures must only touch caller-owned state and must never call back into
the history engine.
"""

from typing import Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class ReversibleAction(BaseModel):
    """
    One undoable edit.

    The forward effect has already been applied by the caller when the
    action is created; `redo` is only invoked on a later Redo.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        description="Label shown in undo/redo menus"
    )
    undo: Callable[[], None] = Field(
        ...,
        description="Reverts the edit"
    )
    redo: Callable[[], None] = Field(
        ...,
        description="Reapplies the edit"
    )
    coalesce_key: Optional[str] = Field(
        default=None,
        description="Editing session key; back-to-back actions sharing it merge"
    )

    @property
    def is_coalescing(self) -> bool:
        """True when this action can merge with a same-keyed predecessor."""
        return bool(self.coalesce_key)

    def __repr__(self) -> str:
        return (
            f"ReversibleAction(description={self.description!r}, "
            f"coalesce_key={self.coalesce_key!r})"
        )


def merge_actions(
    existing: ReversibleAction,
    incoming: ReversibleAction,
) -> ReversibleAction:
    """
    Collapse `incoming` into `existing`.

    The result keeps the original undo closure, so one undo returns to the
    value from before the whole editing session, and takes the redo closure
    and description of the newest edit. A new instance is returned; the
    engine relies on that identity change for checkpoint tracking.
    """
    if existing.coalesce_key != incoming.coalesce_key:
        raise ValueError(
            f"Cannot merge actions with different keys: "
            f"{existing.coalesce_key!r} != {incoming.coalesce_key!r}"
        )
    return existing.model_copy(
        update={
            "redo": incoming.redo,
            "description": incoming.description,
        }
    )


class ActionBuilder:
    """
    Helper class to build actions for common edit shapes.

    Usage:
        action = ActionBuilder.coalescing_edit(
            "Change primary color", "template:PrimaryColor",
            template.set_primary_color, "#000000", "#336699",
        )
        action = ActionBuilder.composite("Apply preset", [a, b, c])
    """

    @staticmethod
    def coalescing_edit(
        description: str,
        key: str,
        setter: Callable[[T], None],
        old_value: T,
        new_value: T,
    ) -> ReversibleAction:
        # Values are bound now so later edits to the caller's locals can't leak in.
        return ReversibleAction(
            description=description,
            undo=lambda: setter(old_value),
            redo=lambda: setter(new_value),
            coalesce_key=key,
        )

    @staticmethod
    def property_change(
        description: str,
        setter: Callable[[T], None],
        old_value: T,
        new_value: T,
    ) -> ReversibleAction:
        """Single-field edit that always gets its own history entry."""
        return ReversibleAction(
            description=description,
            undo=lambda: setter(old_value),
            redo=lambda: setter(new_value),
        )

    @staticmethod
    def composite(
        description: str,
        actions: Iterable[ReversibleAction],
    ) -> ReversibleAction:
        """
        Group several actions into one history entry.

        Children are undone in reverse order and redone in recording order.
        """
        children = list(actions)
        if not children:
            raise ValueError("A composite action needs at least one child action")
        for child in children:
            if not isinstance(child, ReversibleAction):
                raise TypeError(
                    f"Composite children must be ReversibleAction, got {type(child).__name__}"
                )

        def undo_all() -> None:
            for child in reversed(children):
                child.undo()

        def redo_all() -> None:
            for child in children:
                child.redo()

        return ReversibleAction(
            description=description,
            undo=undo_all,
            redo=redo_all,
        )
