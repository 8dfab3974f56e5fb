"""Forms package."""

from finance_app.forms.transaction_form import (
    SubmitOutcome,
    TransactionFormController,
    account_label,
    format_date,
)

__all__ = [
    "SubmitOutcome",
    "TransactionFormController",
    "account_label",
    "format_date",
]
