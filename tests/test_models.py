"""
Tests for Ledger History models

Test strategy:
1. Unit tests for individual components (models, builders, engine)
2. Flow tests through the example editors (no UI, no external services)
3. Deterministic closures over plain Python state
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from ledger_history.models.action import (
    ActionBuilder,
    ReversibleAction,
    merge_actions,
)
from ledger_history.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from ledger_history.models.expense import (
    Expense,
    ExpenseCategory,
    PaymentStatus,
)
from ledger_history.models.template import (
    STYLE_PRESETS,
    InvoiceTemplate,
    TemplateStyle,
)


def noop():
    pass


class TestReversibleAction:
    """Tests for ReversibleAction construction."""

    def test_action_creation(self):
        """Test a well-formed action keeps its fields."""
        action = ReversibleAction(description="Add expense", undo=noop, redo=noop)
        assert action.description == "Add expense"
        assert action.coalesce_key is None
        assert action.is_coalescing is False

    def test_action_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        action = ReversibleAction(description="  Edit product  ", undo=noop, redo=noop)
        assert action.description == "Edit product"

    def test_action_rejects_empty_description(self):
        """Test that an empty description fails fast."""
        with pytest.raises(ValueError):
            ReversibleAction(description="", undo=noop, redo=noop)

    def test_action_rejects_blank_description(self):
        """Test that a whitespace-only description fails fast."""
        with pytest.raises(ValidationError):
            ReversibleAction(description="   ", undo=noop, redo=noop)

    def test_action_accepts_long_description_and_key(self):
        """Test that long labels and keys are not capped."""
        action = ReversibleAction(
            description="Edit " + "x" * 2000,
            undo=noop,
            redo=noop,
            coalesce_key="expense:" + "k" * 500,
        )
        assert len(action.description) == 2005
        assert action.is_coalescing is True

    def test_action_rejects_missing_undo(self):
        """Test that a None undo closure is rejected."""
        with pytest.raises(ValidationError):
            ReversibleAction(description="Edit", undo=None, redo=noop)

    def test_action_rejects_non_callable_redo(self):
        """Test that a non-callable redo is rejected."""
        with pytest.raises(ValidationError):
            ReversibleAction(description="Edit", undo=noop, redo="not callable")

    def test_action_is_immutable(self):
        """Test that recorded actions can't be modified."""
        action = ReversibleAction(description="Edit", undo=noop, redo=noop)
        with pytest.raises(ValidationError):
            action.description = "Changed"

    def test_empty_key_is_not_coalescing(self):
        """Test that an empty key never counts as a coalescing session."""
        action = ReversibleAction(description="Edit", undo=noop, redo=noop, coalesce_key="")
        assert action.is_coalescing is False

    def test_closures_run(self):
        """Test that undo/redo fields are the closures passed in."""
        calls = []
        action = ReversibleAction(
            description="Edit",
            undo=lambda: calls.append("undo"),
            redo=lambda: calls.append("redo"),
        )
        action.undo()
        action.redo()
        assert calls == ["undo", "redo"]


class TestActionBuilder:
    """Tests for ActionBuilder helpers."""

    def test_coalescing_edit(self):
        """Test coalescing_edit sets old value on undo and new on redo."""
        values = []
        action = ActionBuilder.coalescing_edit(
            "Change color", "template:PrimaryColor", values.append, "#000000", "#FFFFFF",
        )
        assert action.coalesce_key == "template:PrimaryColor"
        action.undo()
        action.redo()
        assert values == ["#000000", "#FFFFFF"]

    def test_coalescing_edit_rejects_empty_description(self):
        """Test the builder fails fast like direct construction."""
        with pytest.raises(ValueError):
            ActionBuilder.coalescing_edit("", "key", print, 0, 1)

    def test_property_change_has_no_key(self):
        """Test property_change never coalesces."""
        values = []
        action = ActionBuilder.property_change("Toggle logo", values.append, True, False)
        assert action.coalesce_key is None
        action.undo()
        assert values == [True]

    def test_composite_order(self):
        """Test composite undoes in reverse order and redoes in order."""
        calls = []
        children = [
            ReversibleAction(
                description=f"step {i}",
                undo=lambda i=i: calls.append(f"undo {i}"),
                redo=lambda i=i: calls.append(f"redo {i}"),
            )
            for i in range(3)
        ]
        group = ActionBuilder.composite("Three steps", children)

        group.undo()
        assert calls == ["undo 2", "undo 1", "undo 0"]

        calls.clear()
        group.redo()
        assert calls == ["redo 0", "redo 1", "redo 2"]

    def test_composite_requires_children(self):
        """Test an empty composite is rejected."""
        with pytest.raises(ValueError, match="at least one child"):
            ActionBuilder.composite("Nothing", [])

    def test_composite_rejects_non_actions(self):
        """Test composite children must be actions."""
        with pytest.raises(TypeError):
            ActionBuilder.composite("Bad", [noop])


class TestMergeActions:
    """Tests for merging coalescing actions."""

    def test_merge_keeps_original_undo(self):
        """Test the merged action undoes to the session's starting value."""
        values = []
        first = ActionBuilder.coalescing_edit("Width 1", "width", values.append, 0, 1)
        second = ActionBuilder.coalescing_edit("Width 2", "width", values.append, 1, 2)

        merged = merge_actions(first, second)
        merged.undo()
        merged.redo()

        assert values == [0, 2]
        assert merged.description == "Width 2"
        assert merged.coalesce_key == "width"

    def test_merge_returns_new_instance(self):
        """Test that merging never mutates the existing entry."""
        first = ActionBuilder.coalescing_edit("A", "k", print, 0, 1)
        second = ActionBuilder.coalescing_edit("B", "k", print, 1, 2)
        merged = merge_actions(first, second)
        assert merged is not first
        assert first.description == "A"

    def test_merge_rejects_different_keys(self):
        """Test that actions from different sessions can't merge."""
        first = ActionBuilder.coalescing_edit("A", "k1", print, 0, 1)
        second = ActionBuilder.coalescing_edit("B", "k2", print, 1, 2)
        with pytest.raises(ValueError, match="different keys"):
            merge_actions(first, second)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ACTION_RECORDED,
            description="Recorded: Add expense",
        )
        assert event.event_type == AuditEventType.ACTION_RECORDED
        assert event.severity == AuditSeverity.INFO
        assert event.scope == "default"

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.action_recorded("company", "Add expense", 3)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "action_recorded"
        assert log_dict["scope"] == "company"
        assert log_dict["details"]["undo_count"] == 3

    def test_replay_failed_event(self):
        """Test replay failures carry the error."""
        event = AuditEventBuilder.replay_failed(
            "company", "undo", "Delete expense", RuntimeError("boom"),
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_type == "RuntimeError"
        assert event.error_message == "boom"
        assert event.description == "Undo failed: Delete expense"

    def test_merged_event_is_debug(self):
        """Test merges are logged at debug severity."""
        event = AuditEventBuilder.action_merged("designer", "Change color", "template:PrimaryColor")
        assert event.severity == AuditSeverity.DEBUG
        assert event.details["coalesce_key"] == "template:PrimaryColor"


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_creation(self):
        """Test Expense model creation and defaults."""
        expense = Expense(
            supplier_name="Acme Supplies",
            amount=Decimal("100.00"),
            tax_amount=Decimal("13.00"),
            expense_date=date(2024, 12, 1),
        )
        assert expense.category == ExpenseCategory.OTHER
        assert expense.payment_status == PaymentStatus.UNPAID
        assert expense.total == Decimal("113.00")

    def test_expense_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(supplier_name="Acme", amount=Decimal("-1"), expense_date=date(2024, 1, 1))

    def test_expense_due_date_validation(self):
        """Test that due_date cannot be before expense_date."""
        with pytest.raises(ValueError, match="Due date cannot be before expense date"):
            Expense(
                supplier_name="Acme",
                amount=Decimal("10"),
                expense_date=date(2024, 12, 15),
                due_date=date(2024, 12, 1),
            )


class TestTemplateModel:
    """Tests for the InvoiceTemplate model."""

    def test_template_defaults(self):
        """Test default template matches the professional preset."""
        template = InvoiceTemplate(name="Default")
        preset = STYLE_PRESETS[TemplateStyle.PROFESSIONAL]
        for field, value in preset.items():
            assert getattr(template, field) == value

    def test_template_validates_assignment(self):
        """Test invalid colors are rejected on assignment."""
        template = InvoiceTemplate(name="Default")
        with pytest.raises(ValidationError):
            template.primary_color = "blue"
        assert template.primary_color == "#2C3E50"

    def test_every_style_has_preset(self):
        """Test that every style has a full color preset."""
        fields = set(STYLE_PRESETS[TemplateStyle.PROFESSIONAL])
        for style in TemplateStyle:
            assert set(STYLE_PRESETS[style]) == fields


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
