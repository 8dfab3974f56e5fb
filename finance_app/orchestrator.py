"""
Main Orchestrator for Finance App

This module ties the components together:
1. Email (settings -> Resend provider -> dispatcher)
2. Transactions (storage -> actions -> form controller)

DESIGN DECISION: Configuration is read here, once, and passed into the
components as plain values. The dispatcher and the actions never read the
environment themselves, so they are trivial to build in tests.
"""

from typing import Optional

import structlog

from finance_app.actions import TransactionActions
from finance_app.audit import AuditLogger
from finance_app.config import get_settings
from finance_app.forms import TransactionFormController
from finance_app.models.transaction import Account, Category, Transaction
from finance_app.services.email import EmailDispatcher, ResendEmailProvider
from finance_app.services.storage import (
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    TransactionStorageInterface,
)


logger = structlog.get_logger("orchestrator")


def create_email_dispatcher(
    audit_logger: Optional[AuditLogger] = None,
) -> EmailDispatcher:
    """
    Build a dispatcher from RESEND_* settings.

    Raises:
        pydantic.ValidationError: If RESEND_API_KEY is not configured
    """
    resend_settings = get_settings().resend
    return EmailDispatcher(
        provider=ResendEmailProvider(api_key=resend_settings.api_key),
        from_address=resend_settings.from_address,
        audit_logger=audit_logger,
    )


def create_transaction_form(
    actions: TransactionActions,
    accounts: list[Account],
    categories: list[Category],
    initial_data: Optional[Transaction] = None,
) -> TransactionFormController:
    """Build a form in create mode, or edit mode when initial_data is given."""
    return TransactionFormController(
        accounts=accounts,
        categories=categories,
        create_transaction=actions.create_transaction,
        update_transaction=actions.update_transaction,
        edit_mode=initial_data is not None,
        initial_data=initial_data,
    )


def create_app_components(
    transaction_storage: Optional[TransactionStorageInterface] = None,
) -> tuple[Optional[EmailDispatcher], TransactionActions, TransactionStorageInterface]:
    """
    Factory function to create all application components.

    Args:
        transaction_storage: Storage backend for transactions.
                    Defaults to in-memory storage.

    Returns:
        (email_dispatcher, transaction_actions, transaction_storage)

    email_dispatcher is None when Resend is not configured.
    """
    audit_logger = AuditLogger(InMemoryAuditStorage())
    transaction_storage = transaction_storage or InMemoryTransactionStorage()

    try:
        email_dispatcher = create_email_dispatcher(audit_logger)
    except Exception as e:
        # Email not configured - continue without it
        logger.warning("email_not_configured", error=str(e))
        email_dispatcher = None

    transaction_actions = TransactionActions(
        storage=transaction_storage,
        audit_logger=audit_logger,
    )

    return email_dispatcher, transaction_actions, transaction_storage
