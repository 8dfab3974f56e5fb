"""
Audit Logger

DESIGN DECISION: Every email dispatch and transaction save is logged.
This provides:
1. Traceability of outbound mail and data changes
2. Debugging capability when a provider call fails
3. A history the user can inspect

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_app.models.audit import AuditEvent, AuditEventBuilder
from finance_app.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility), if configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        logger=None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
            logger: structlog logger to write to. Defaults to the "audit" logger.
        """
        self._storage = storage
        self._logger = logger or structlog.get_logger("audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_email_dispatched(
        self,
        recipients: list[str],
        subject: str,
        batch: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful dispatch."""
        event = AuditEventBuilder.email_dispatched(
            recipients=recipients,
            subject=subject,
            batch=batch,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_email_dispatch_failed(
        self,
        recipients: list[str],
        subject: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed dispatch."""
        event = AuditEventBuilder.email_dispatch_failed(
            recipients=recipients,
            subject=subject,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_created(
        self,
        transaction_id: str,
        account_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.transaction_created(
            transaction_id=transaction_id,
            account_id=account_id,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_updated(
        self,
        transaction_id: str,
        account_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            account_id=account_id,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_save_failed(
        self,
        operation: str,
        error_message: str,
        transaction_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.transaction_save_failed(
            operation=operation,
            error_message=error_message,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a form submit).
    """
    return uuid4()
