"""
Abstract Storage Interface

DESIGN DECISION: The create/update transaction operation sits behind an
abstract interface. This allows us to:
1. Plug in a real database without touching the actions or the form
2. Use in-memory storage for local runs and tests
3. Keep business logic decoupled from storage implementation

The interface is intentionally small - just the operations the
transaction actions and the audit trail need.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_app.models.audit import AuditEvent
from finance_app.models.transaction import Transaction


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.
    """

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """
        Save a new transaction.

        Raises:
            DuplicateError: If a transaction with this id already exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by id, or None."""
        pass

    @abstractmethod
    async def update_transaction(self, transaction: Transaction) -> Transaction:
        """
        Replace an existing transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
            StorageError: If update fails
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        account_id: Optional[str] = None,
        limit: int = 100,
    ) -> list[Transaction]:
        """List transactions, newest date first, optionally for one account."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
