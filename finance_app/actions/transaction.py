"""
Transaction Actions

The create and update operations the transaction form submits to.

Both return an ActionResult instead of raising, so the form only has to
look at `success`. On success `data` is the saved transaction (JSON-ready),
which always carries `account_id` for the post-save redirect.
"""

from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from finance_app.audit import AuditLogger, create_correlation_id
from finance_app.models.email import describe_error
from finance_app.models.transaction import (
    ActionResult,
    Transaction,
    TransactionInput,
)
from finance_app.services.storage import (
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)


class TransactionActions:
    """
    Create/update operations backed by a TransactionStorageInterface.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        logger=None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._logger = logger or structlog.get_logger("transactions")

    @staticmethod
    def _to_input(data: Union[TransactionInput, dict[str, Any]]) -> TransactionInput:
        if isinstance(data, TransactionInput):
            return data
        return TransactionInput.model_validate(data)

    async def _fail(
        self,
        operation: str,
        exc: Exception,
        transaction_id: Optional[str],
        correlation_id: UUID,
    ) -> ActionResult:
        error = describe_error(exc)
        self._logger.warning(
            "transaction_save_failed",
            operation=operation,
            transaction_id=transaction_id,
            error=error,
        )
        if self._audit_logger:
            await self._audit_logger.log_transaction_save_failed(
                operation=operation,
                error_message=error,
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )
        return ActionResult(success=False, error=error)

    async def create_transaction(
        self,
        data: Union[TransactionInput, dict[str, Any]],
        correlation_id: Optional[UUID] = None,
    ) -> ActionResult:
        """
        Validate and save a new transaction.

        Returns:
            ActionResult with the saved transaction under `data`
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            validated = self._to_input(data)
            transaction = Transaction(**validated.model_dump())
            saved = await self._storage.save_transaction(transaction)
        except (ValidationError, StorageError) as e:
            return await self._fail("create", e, None, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_transaction_created(
                transaction_id=saved.id,
                account_id=saved.account_id,
                amount=str(saved.amount),
                correlation_id=correlation_id,
            )

        return ActionResult(success=True, data=saved.model_dump(mode="json"))

    async def update_transaction(
        self,
        transaction_id: str,
        data: Union[TransactionInput, dict[str, Any]],
        correlation_id: Optional[UUID] = None,
    ) -> ActionResult:
        """
        Validate and replace an existing transaction.

        The id and created_at of the stored transaction are kept.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            validated = self._to_input(data)
            existing = await self._storage.get_transaction(transaction_id)
            if existing is None:
                raise NotFoundError(f"Transaction not found: {transaction_id}")

            transaction = Transaction(
                **validated.model_dump(),
                id=existing.id,
                created_at=existing.created_at,
                updated_at=datetime.utcnow(),
            )
            saved = await self._storage.update_transaction(transaction)
        except (ValidationError, StorageError) as e:
            return await self._fail("update", e, transaction_id, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_transaction_updated(
                transaction_id=saved.id,
                account_id=saved.account_id,
                amount=str(saved.amount),
                correlation_id=correlation_id,
            )

        return ActionResult(success=True, data=saved.model_dump(mode="json"))
