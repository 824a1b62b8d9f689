"""
Expense Models

A deliberately small slice of the company data model: enough entity shape
for the expense editor to exercise add/edit/delete undo, not a full
bookkeeping schema.

DESIGN DECISION: Expense is immutable. Edits replace the stored instance
with an updated copy, so undo/redo closures can capture the before and
after values directly without defensive copies.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


class ExpenseCategory(str, Enum):
    """Supported expense categories."""
    RENT = "rent"
    UTILITIES = "utilities"
    INVENTORY = "inventory"
    SHIPPING = "shipping"
    OFFICE_SUPPLIES = "office_supplies"
    SOFTWARE = "software"
    TRAVEL = "travel"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class PaymentStatus(str, Enum):
    """Payment status for an expense."""
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIAL = "partial"
    OVERDUE = "overdue"


class Expense(BaseModel):
    """A purchase/expense transaction."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    supplier_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Supplier the expense was paid to"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.OTHER,
    )
    amount: Annotated[
        Decimal,
        Field(ge=0, decimal_places=2, description="Amount before tax")
    ]
    tax_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        decimal_places=2,
    )
    expense_date: date = Field(
        ...,
        description="Date of the expense"
    )
    due_date: Optional[date] = None

    payment_status: PaymentStatus = Field(
        default=PaymentStatus.UNPAID,
    )
    paid_date: Optional[date] = None

    notes: str = Field(
        default="",
        max_length=1000,
    )

    @property
    def total(self) -> Decimal:
        return self.amount + self.tax_amount

    @model_validator(mode='after')
    def validate_dates(self) -> 'Expense':
        """Validate date relationships."""
        if self.due_date and self.due_date < self.expense_date:
            raise ValueError("Due date cannot be before expense date")

        if self.paid_date and self.paid_date < self.expense_date:
            raise ValueError("Paid date cannot be before expense date")

        return self
