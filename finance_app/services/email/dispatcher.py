"""
Email Dispatcher

Sends transactional email and normalizes every outcome into a
DispatchResult.

CONTRACT:
- One address   -> one single-message provider call
- List of N     -> one batch provider call carrying N messages, in order
- Every message shares the configured sender, the subject and the content
- Failures of any kind (bad input, network, provider rejection) are logged
  and returned as DispatchResult(success=False, error=...). Nothing is
  raised past send().
- No retries, no queuing.
"""

from typing import TYPE_CHECKING, Any, Optional, Union

import structlog
from pydantic import ValidationError

from finance_app.config import DEFAULT_FROM_ADDRESS
from finance_app.models.email import (
    DispatchResult,
    EmailRequest,
    ManyRecipients,
    OutboundEmail,
)
from finance_app.services.email.interface import (
    EmailProviderInterface,
    InvalidEmailRequestError,
)

if TYPE_CHECKING:
    from finance_app.audit import AuditLogger


class EmailDispatcher:
    """
    Stateless email dispatcher.

    The provider, sender identity and logger are injected at construction,
    so the dispatcher never reads process configuration on its own.
    """

    def __init__(
        self,
        provider: EmailProviderInterface,
        from_address: str = DEFAULT_FROM_ADDRESS,
        logger=None,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._provider = provider
        self._from_address = from_address
        self._logger = logger or structlog.get_logger("email")
        self._audit_logger = audit_logger

    def _build_request(
        self,
        to: Union[str, list[str]],
        subject: str,
        content: str,
    ) -> EmailRequest:
        try:
            return EmailRequest(to=to, subject=subject, content=content)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidEmailRequestError(problems) from e

    def _build_message(self, address: str, request: EmailRequest) -> OutboundEmail:
        return OutboundEmail(
            from_address=self._from_address,
            to=address,
            subject=request.subject,
            html=request.content,
        )

    def _warn_on_partial_batch(self, data: Any, addresses: list[str]) -> None:
        """Resend reports per-message rejections in an `errors` list."""
        if not isinstance(data, dict):
            return
        errors = data.get("errors") or []
        if not errors:
            return
        failed = []
        for err in errors:
            index = err.get("index") if isinstance(err, dict) else None
            if isinstance(index, int) and 0 <= index < len(addresses):
                failed.append(addresses[index])
        self._logger.warning(
            "email_batch_partial_failure",
            failed_count=len(errors),
            failed_recipients=failed,
            batch_size=len(addresses),
        )

    async def send(
        self,
        to: Union[str, list[str]],
        subject: str,
        content: str,
    ) -> DispatchResult:
        """
        Dispatch one email or one batch.

        Args:
            to: A single address, or an ordered list of addresses
            subject: Subject line shared by every message
            content: Rendered HTML body shared by every message

        Returns:
            DispatchResult with the provider response on success,
            or a textual description of the failure.
        """
        recipients = list(to) if isinstance(to, (list, tuple)) else [to]
        batch = isinstance(to, (list, tuple))

        try:
            request = self._build_request(
                list(to) if batch else to,
                subject,
                content,
            )
            recipient = request.recipient

            if isinstance(recipient, ManyRecipients):
                messages = [
                    self._build_message(address, request)
                    for address in recipient.addresses
                ]
                data = await self._provider.send_batch(messages)
                self._warn_on_partial_batch(data, recipient.addresses)
            else:
                data = await self._provider.send_email(
                    self._build_message(recipient.address, request)
                )
        except Exception as e:
            result = DispatchResult.failed(e)
            self._logger.error(
                "email_dispatch_failed",
                error=result.error,
                recipients=[str(r) for r in recipients],
                subject=subject,
            )
            await self._audit_failure(recipients, subject, result.error)
            return result

        self._logger.info(
            "email_dispatched",
            recipient_count=len(recipients),
            mode="batch" if batch else "single",
            subject=subject,
        )
        await self._audit_success(recipients, subject, batch)
        return DispatchResult.ok(data)

    async def _audit_success(
        self,
        recipients: list,
        subject: str,
        batch: bool,
    ) -> None:
        if not self._audit_logger:
            return
        try:
            await self._audit_logger.log_email_dispatched(
                recipients=[str(r) for r in recipients],
                subject=str(subject),
                batch=batch,
            )
        except Exception as e:
            self._logger.warning("email_audit_failed", error=str(e))

    async def _audit_failure(
        self,
        recipients: list,
        subject: str,
        error_message: str,
    ) -> None:
        if not self._audit_logger:
            return
        try:
            await self._audit_logger.log_email_dispatch_failed(
                recipients=[str(r) for r in recipients],
                subject=str(subject),
                error_message=error_message,
            )
        except Exception as e:
            self._logger.warning("email_audit_failed", error=str(e))
