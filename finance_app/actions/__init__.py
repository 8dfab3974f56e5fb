"""Transaction actions package."""

from finance_app.actions.transaction import TransactionActions

__all__ = ["TransactionActions"]
