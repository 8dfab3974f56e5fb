"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for
transaction and audit storage.
"""

from finance_app.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)
from finance_app.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "TransactionStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryTransactionStorage",
]
