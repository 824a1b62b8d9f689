"""
Data Models Package

This package contains the Pydantic models used by Ledger History:
reversible actions, audit events, and the entity slices edited by the
example callers.
"""

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

__all__ = [
    # Action models
    "ActionBuilder",
    "ReversibleAction",
    "merge_actions",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Entity models
    "Expense",
    "ExpenseCategory",
    "PaymentStatus",
    "STYLE_PRESETS",
    "InvoiceTemplate",
    "TemplateStyle",
]
