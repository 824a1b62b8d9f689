"""
Example callers of the history engine.

These are the edit paths the app's expense page and invoice template
designer drive; page-level filtering, search and pagination live elsewhere.
"""

from ledger_history.editors.expenses import (
    ExpenseBook,
    ExpenseEditor,
    ExpenseNotFoundError,
)
from ledger_history.editors.template_designer import TemplateDesigner

__all__ = [
    "ExpenseBook",
    "ExpenseEditor",
    "ExpenseNotFoundError",
    "TemplateDesigner",
]
