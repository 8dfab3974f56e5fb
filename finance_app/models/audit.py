"""
Audit Models for Finance App

Every outbound email and every transaction save is recorded as an audit
event. This provides:
1. Traceability of what was sent to whom
2. Debugging information when a provider call fails
3. A history of transaction edits

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Email
    EMAIL_DISPATCHED = "email_dispatched"
    EMAIL_DISPATCH_FAILED = "email_dispatch_failed"

    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_SAVE_FAILED = "transaction_save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'email', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.email_dispatched(["a@x.com"], "Hi", batch=False)
        event = AuditEventBuilder.transaction_created(transaction_id, account_id)
    """

    @staticmethod
    def email_dispatched(
        recipients: list[str],
        subject: str,
        batch: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        mode = "batch" if batch else "single"
        return AuditEvent(
            event_type=AuditEventType.EMAIL_DISPATCHED,
            entity_type="email",
            correlation_id=correlation_id,
            description=f"Email sent ({mode}) to {len(recipients)} recipient(s)",
            details={
                "recipients": recipients,
                "subject": subject,
                "mode": mode,
            },
        )

    @staticmethod
    def email_dispatch_failed(
        recipients: list[str],
        subject: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EMAIL_DISPATCH_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="email",
            correlation_id=correlation_id,
            description="Email dispatch failed",
            details={
                "recipients": recipients,
                "subject": subject,
            },
            error_message=error_message,
        )

    @staticmethod
    def transaction_created(
        transaction_id: str,
        account_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction created: {amount}",
            details={
                "account_id": account_id,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        account_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction updated: {amount}",
            details={
                "account_id": account_id,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_save_failed(
        operation: str,
        error_message: str,
        transaction_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction {operation} failed",
            details={
                "operation": operation,
            },
            error_message=error_message,
        )

