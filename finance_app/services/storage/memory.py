"""
In-Memory Storage Implementation

Process-local storage for transactions and audit events. Used by the
dashboard when no other backend is wired in, and by the tests.

TRADEOFFS:
- Nothing survives a restart
- Filtering happens in Python over the full set
"""

from typing import Optional

from finance_app.models.audit import AuditEvent
from finance_app.models.transaction import Transaction
from finance_app.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    TransactionStorageInterface,
)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Dict-backed transaction storage keyed by transaction id."""

    def __init__(self):
        self._transactions: dict[str, Transaction] = {}

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id in self._transactions:
            raise DuplicateError(f"Transaction already exists: {transaction.id}")
        self._transactions[transaction.id] = transaction
        return transaction

    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    async def update_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id not in self._transactions:
            raise NotFoundError(f"Transaction not found: {transaction.id}")
        self._transactions[transaction.id] = transaction
        return transaction

    async def list_transactions(
        self,
        account_id: Optional[str] = None,
        limit: int = 100,
    ) -> list[Transaction]:
        results = [
            t for t in self._transactions.values()
            if account_id is None or t.account_id == account_id
        ]
        results.sort(key=lambda t: (t.date, t.created_at), reverse=True)
        return results[:limit]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
