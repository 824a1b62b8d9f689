"""
Expense Editing

ExpenseBook is the in-memory stand-in for the company data store's expense
table. ExpenseEditor is the caller side of the history contract: it applies
each mutation to the book first, then records an action whose closures
capture the before/after values.

DESIGN DECISION: Closures only call ExpenseBook methods, never editor
methods, so replaying history can't record new actions.
"""

from typing import Any, Callable, Iterable, Optional
from uuid import UUID

import structlog

from ledger_history.history import HistoryEngine, RecordingGuard
from ledger_history.models.action import ActionBuilder, ReversibleAction
from ledger_history.models.expense import Expense, PaymentStatus


logger = structlog.get_logger(__name__)


class ExpenseNotFoundError(LookupError):
    """No expense with the given ID exists in the book."""
    pass


class ExpenseBook:
    """Ordered collection of expenses."""

    def __init__(self, expenses: Iterable[Expense] = ()):
        self._expenses: list[Expense] = list(expenses)

    def all(self) -> list[Expense]:
        return list(self._expenses)

    def get(self, expense_id: UUID) -> Expense:
        return self._expenses[self.index_of(expense_id)]

    def index_of(self, expense_id: UUID) -> int:
        for i, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return i
        raise ExpenseNotFoundError(f"Expense not found: {expense_id}")

    def insert(self, expense: Expense, index: Optional[int] = None) -> None:
        if index is None:
            self._expenses.append(expense)
        else:
            self._expenses.insert(index, expense)

    def replace(self, expense: Expense) -> None:
        self._expenses[self.index_of(expense.id)] = expense

    def remove(self, expense_id: UUID) -> int:
        """Remove an expense and return the position it held."""
        index = self.index_of(expense_id)
        del self._expenses[index]
        return index

    def reset(self, expenses: Iterable[Expense]) -> None:
        self._expenses = list(expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def __contains__(self, expense_id: object) -> bool:
        return any(e.id == expense_id for e in self._expenses)


class ExpenseEditor:
    """
    Add/edit/delete expenses with undo support.

    Usage:
        editor = ExpenseEditor(ExpenseBook(), engine)
        expense = editor.add_expense(supplier_name="Acme", amount=Decimal("20"), ...)
        engine.undo()  # expense is gone again
    """

    def __init__(
        self,
        book: ExpenseBook,
        engine: HistoryEngine,
        guard: Optional[RecordingGuard] = None,
        persist: Optional[Callable[[list[Expense]], None]] = None,
    ):
        """
        Args:
            book: The expenses being edited.
            engine: History engine for company-data edits.
            guard: Suppression guard; a private one is created if omitted.
            persist: Called with all expenses on save().
        """
        self._book = book
        self._engine = engine
        self._guard = guard or RecordingGuard()
        self._persist = persist

    @property
    def book(self) -> ExpenseBook:
        return self._book

    @property
    def engine(self) -> HistoryEngine:
        return self._engine

    @property
    def has_unsaved_changes(self) -> bool:
        return not self._engine.is_at_saved_state

    def load(self, expenses: Iterable[Expense]) -> None:
        """Replace the book contents and start a fresh history."""
        with self._guard.suppressed():
            self._book.reset(expenses)
        self._engine.clear()

    def add_expense(self, expense: Optional[Expense] = None, **fields: Any) -> Expense:
        """Add an expense, given either as a model or as field values."""
        if expense is None:
            expense = Expense(**fields)
        elif fields:
            raise TypeError("Pass either an Expense or field values, not both")

        book = self._book
        book.insert(expense)
        index = book.index_of(expense.id)

        self._record(ReversibleAction(
            description=f"Add expense '{expense.supplier_name}'",
            undo=lambda: book.remove(expense.id),
            redo=lambda: book.insert(expense, index),
        ))
        return expense

    def edit_expense(self, expense_id: UUID, **changes: Any) -> Expense:
        """
        Apply field changes to an expense.

        Changes are validated as a whole before anything is modified.
        """
        book = self._book
        old = book.get(expense_id)
        updated = Expense.model_validate({**old.model_dump(), **changes, "id": old.id})
        if updated == old:
            return old

        book.replace(updated)
        self._record(ReversibleAction(
            description=f"Edit expense '{updated.supplier_name}'",
            undo=lambda: book.replace(old),
            redo=lambda: book.replace(updated),
        ))
        return updated

    def delete_expense(self, expense_id: UUID) -> Expense:
        """Delete an expense; undo restores it at its original position."""
        book = self._book
        removed = book.get(expense_id)
        index = book.remove(expense_id)

        self._record(ReversibleAction(
            description=f"Delete expense '{removed.supplier_name}'",
            undo=lambda: book.insert(removed, index),
            redo=lambda: book.remove(removed.id),
        ))
        return removed

    def set_notes(self, expense_id: UUID, notes: str) -> Expense:
        """
        Update an expense's notes.

        Successive note edits on the same expense collapse into one history
        entry, so typing a sentence is undone in one step.
        """
        old = self._book.get(expense_id)
        if old.notes == notes:
            return old

        setter = self._field_setter(expense_id, "notes")
        setter(notes)
        self._record(ActionBuilder.coalescing_edit(
            f"Edit notes of '{old.supplier_name}'",
            f"expense:{expense_id}:notes",
            setter,
            old.notes,
            notes,
        ))
        return self._book.get(expense_id)

    def set_payment_status(self, expense_id: UUID, status: PaymentStatus) -> Expense:
        old = self._book.get(expense_id)
        if old.payment_status == status:
            return old

        setter = self._field_setter(expense_id, "payment_status")
        setter(status)
        self._record(ActionBuilder.property_change(
            f"Mark '{old.supplier_name}' as {status.value}",
            setter,
            old.payment_status,
            status,
        ))
        return self._book.get(expense_id)

    def save(self) -> None:
        """Persist all expenses and mark the history checkpoint."""
        expenses = self._book.all()
        if self._persist is not None:
            self._persist(expenses)
        self._engine.mark_saved()
        logger.info("expenses_saved", count=len(expenses))

    def _field_setter(self, expense_id: UUID, field: str) -> Callable[[Any], None]:
        book = self._book

        def set_value(value: Any) -> None:
            current = book.get(expense_id)
            book.replace(Expense.model_validate({**current.model_dump(), field: value}))

        return set_value

    def _record(self, action: ReversibleAction) -> None:
        self._guard.record(self._engine, action)
