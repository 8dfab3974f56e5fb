"""Services package."""

from finance_app.services.email import (
    EmailDispatcher,
    EmailError,
    EmailProviderError,
    EmailProviderInterface,
    InvalidEmailRequestError,
    ResendEmailProvider,
)
from finance_app.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    # Email services
    "EmailDispatcher",
    "EmailError",
    "EmailProviderError",
    "EmailProviderInterface",
    "InvalidEmailRequestError",
    "ResendEmailProvider",
    # Storage services
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryTransactionStorage",
    "NotFoundError",
    "StorageError",
    "TransactionStorageInterface",
]
