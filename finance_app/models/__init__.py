"""
Data Models Package

This package contains all Pydantic models used in the Finance App.
All data flowing through the system must conform to these schemas.
"""

from finance_app.models.email import (
    DispatchResult,
    EmailRequest,
    ManyRecipients,
    OutboundEmail,
    Recipient,
    SingleRecipient,
    describe_error,
)
from finance_app.models.transaction import (
    Account,
    ActionResult,
    Category,
    RecurringInterval,
    ScannedReceipt,
    Transaction,
    TransactionInput,
    TransactionType,
)
from finance_app.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Email models
    "DispatchResult",
    "EmailRequest",
    "ManyRecipients",
    "OutboundEmail",
    "Recipient",
    "SingleRecipient",
    "describe_error",
    # Transaction models
    "Account",
    "ActionResult",
    "Category",
    "RecurringInterval",
    "ScannedReceipt",
    "Transaction",
    "TransactionInput",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
