"""
Transaction Models for Finance App

These models define the schemas for accounts, categories and transactions.
They are designed to:
1. Validate form input before anything reaches the backend
2. Provide field-level error messages the form can show next to each input
3. Be serializable for storage and for action results

DESIGN DECISION: The form collects amount as text (it comes straight from a
number input). TransactionInput parses it to a Decimal so the backend never
sees a float.
"""

import datetime as dt
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money movement."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class RecurringInterval(str, Enum):
    """
    How often a recurring transaction repeats.

    Only meaningful when is_recurring is set. No scheduler lives in
    this package; the interval is stored for whoever processes it.
    """
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


# =============================================================================
# REFERENCE DATA
# =============================================================================

class Account(BaseModel):
    """A user account transactions are booked against."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    balance: Decimal = Field(default=Decimal("0"))
    is_default: bool = False


class Category(BaseModel):
    """A transaction category. Each category belongs to one TransactionType."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    type: TransactionType


# =============================================================================
# TRANSACTION
# =============================================================================

def _coerce_date(value: Any) -> Any:
    """Accept datetimes and ISO timestamps where a calendar date is expected."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TransactionInput(BaseModel):
    """
    Validated transaction form data.

    This is the schema the transaction form is checked against before
    submit. The same model is accepted by the create and update actions.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType = Field(
        ...,
        description="INCOME or EXPENSE"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Transaction amount"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-text description"
    )
    account_id: str = Field(
        ...,
        description="Account the transaction is booked against"
    )
    category: str = Field(
        ...,
        description="Category id"
    )
    date: dt.date = Field(
        ...,
        description="Date the transaction happened"
    )
    is_recurring: bool = Field(
        default=False,
        description="Whether this transaction repeats"
    )
    # Declared after is_recurring so its validator can see that field.
    recurring_interval: Optional[RecurringInterval] = Field(
        default=None,
        validate_default=True,
        description="Repeat period; required when is_recurring is set"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount_present(cls, v):
        if _is_blank(v):
            raise ValueError("Amount is required")
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator('account_id', mode='before')
    @classmethod
    def validate_account_present(cls, v):
        if _is_blank(v):
            raise ValueError("Account is required")
        return v

    @field_validator('category', mode='before')
    @classmethod
    def validate_category_present(cls, v):
        if _is_blank(v):
            raise ValueError("Category is required")
        return v

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v):
        if v is None:
            raise ValueError("Date is required")
        return _coerce_date(v)

    @field_validator('recurring_interval')
    @classmethod
    def validate_recurring_interval(
        cls,
        v: Optional[RecurringInterval],
        info: ValidationInfo,
    ) -> Optional[RecurringInterval]:
        """Interval is required for recurring transactions and dropped otherwise."""
        is_recurring = info.data.get("is_recurring", False)
        if is_recurring and v is None:
            raise ValueError("Recurring interval is required for recurring transactions")
        if not is_recurring:
            return None
        return v


class Transaction(TransactionInput):
    """A saved transaction."""

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique transaction ID"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the transaction was created"
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )


# =============================================================================
# RECEIPT SCANNER PAYLOAD
# =============================================================================

class ScannedReceipt(BaseModel):
    """
    What the receipt scanner hands back on completion.

    Only amount and date are guaranteed; description and category are
    applied to the form when the scanner found them.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(..., ge=0)
    date: dt.date
    description: Optional[str] = None
    category: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v):
        return _coerce_date(v)


# =============================================================================
# ACTION RESULT
# =============================================================================

class ActionResult(BaseModel):
    """
    Outcome of a create/update transaction action.

    On success `data` holds the saved transaction, including account_id.
    """

    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def account_id(self) -> Optional[str]:
        if self.data is None:
            return None
        return self.data.get("account_id")
