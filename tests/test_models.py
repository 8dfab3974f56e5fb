"""
Tests for Finance App

Test strategy:
1. Unit tests for individual components (models, dispatcher, form)
2. Flow tests with stub providers and in-memory storage
3. No real API calls in tests
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from finance_app.models.email import (
    DispatchResult,
    EmailRequest,
    ManyRecipients,
    OutboundEmail,
    SingleRecipient,
    describe_error,
)
from finance_app.models.transaction import (
    Account,
    ActionResult,
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


def _transaction_data(**overrides):
    data = {
        "type": "EXPENSE",
        "amount": "42.50",
        "description": "Weekly shop",
        "account_id": "acc-1",
        "category": "groceries",
        "date": date(2026, 10, 1),
        "is_recurring": False,
    }
    data.update(overrides)
    return data


class TestEmailModels:
    """Tests for email request/result models."""

    def test_single_address_is_single_recipient(self):
        request = EmailRequest(to="a@x.com", subject="Hi", content="<p>hi</p>")
        assert request.recipient == SingleRecipient(address="a@x.com")

    def test_list_is_many_recipients_in_order(self):
        request = EmailRequest(
            to=["b@x.com", "a@x.com"],
            subject="Hi",
            content="<p>hi</p>",
        )
        recipient = request.recipient
        assert isinstance(recipient, ManyRecipients)
        assert recipient.addresses == ["b@x.com", "a@x.com"]

    def test_rejects_invalid_address(self):
        with pytest.raises(ValueError):
            EmailRequest(to="not-an-address", subject="Hi", content="x")

    def test_rejects_empty_recipient_list(self):
        with pytest.raises(ValueError, match="at least one address"):
            EmailRequest(to=[], subject="Hi", content="x")

    def test_rejects_blank_subject(self):
        with pytest.raises(ValueError):
            EmailRequest(to="a@x.com", subject="   ", content="x")

    def test_display_name_and_case_are_kept(self):
        request = EmailRequest(
            to="Alice <alice@Example.COM>",
            subject="Hi",
            content="x",
        )
        assert request.recipient == SingleRecipient(address="Alice <alice@Example.COM>")

    def test_subject_and_content_are_not_trimmed(self):
        request = EmailRequest(
            to="a@x.com",
            subject=" Monthly summary ",
            content="\n  <pre>  total</pre>\n",
        )
        assert request.subject == " Monthly summary "
        assert request.content == "\n  <pre>  total</pre>\n"

    def test_outbound_email_provider_params(self):
        message = OutboundEmail(
            from_address="Finance App <onboarding@resend.dev>",
            to="a@x.com",
            subject="Hi",
            html="<p>hi</p>",
        )
        assert message.to_provider_params() == {
            "from": "Finance App <onboarding@resend.dev>",
            "to": "a@x.com",
            "subject": "Hi",
            "html": "<p>hi</p>",
        }

    def test_dispatch_result_to_dict(self):
        assert DispatchResult.ok({"id": "1"}).to_dict() == {
            "success": True,
            "data": {"id": "1"},
        }
        failed = DispatchResult.failed(RuntimeError("boom"))
        assert failed.to_dict() == {"success": False, "error": "RuntimeError: boom"}

    def test_describe_error_without_message(self):
        assert describe_error(TimeoutError()) == "TimeoutError"


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_transaction_input_parses_amount_text(self):
        tx = TransactionInput(**_transaction_data())
        assert tx.amount == Decimal("42.50")
        assert tx.type == TransactionType.EXPENSE

    def test_amount_required(self):
        with pytest.raises(ValueError, match="Amount is required"):
            TransactionInput(**_transaction_data(amount=""))

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError):
            TransactionInput(**_transaction_data(amount="0"))

    def test_account_and_category_required(self):
        with pytest.raises(ValueError, match="Account is required"):
            TransactionInput(**_transaction_data(account_id=""))
        with pytest.raises(ValueError, match="Category is required"):
            TransactionInput(**_transaction_data(category=None))

    def test_recurring_requires_interval(self):
        with pytest.raises(ValueError, match="Recurring interval is required"):
            TransactionInput(**_transaction_data(is_recurring=True))

    def test_recurring_with_interval(self):
        tx = TransactionInput(**_transaction_data(
            is_recurring=True,
            recurring_interval="MONTHLY",
        ))
        assert tx.recurring_interval == RecurringInterval.MONTHLY

    def test_interval_dropped_when_not_recurring(self):
        tx = TransactionInput(**_transaction_data(recurring_interval="WEEKLY"))
        assert tx.recurring_interval is None

    def test_date_fields_are_calendar_dates(self):
        assert TransactionInput.model_fields["date"].annotation is date
        assert ScannedReceipt.model_fields["date"].annotation is date

    def test_date_accepts_datetime(self):
        tx = TransactionInput(**_transaction_data(date=datetime(2026, 10, 1, 15, 30)))
        assert tx.date == date(2026, 10, 1)

    def test_transaction_gets_identity(self):
        tx = Transaction(**_transaction_data())
        assert tx.id
        assert tx.created_at <= datetime.utcnow()

    def test_scanned_receipt_accepts_iso_timestamp(self):
        scanned = ScannedReceipt(amount="12.30", date="2026-10-02T09:15:00Z")
        assert scanned.date == date(2026, 10, 2)
        assert scanned.description is None

    def test_account_strips_whitespace(self):
        account = Account(id="acc-1", name="  Current  ")
        assert account.name == "Current"
        assert account.is_default is False

    def test_action_result_account_id(self):
        assert ActionResult(success=True, data={"account_id": "acc-1"}).account_id == "acc-1"
        assert ActionResult(success=False, error="x").account_id is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.EMAIL_DISPATCHED,
            description="Email sent",
        )
        assert event.event_type == AuditEventType.EMAIL_DISPATCHED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            description="Transaction created",
            entity_id="tx-1",
            details={"account_id": "acc-1"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_created"
        assert log_dict["entity_id"] == "tx-1"
        assert log_dict["details"]["account_id"] == "acc-1"

    def test_builder_email_dispatch_failed(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.email_dispatch_failed(
            recipients=["a@x.com"],
            subject="Hi",
            error_message="NetworkError: timeout",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.EMAIL_DISPATCH_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "NetworkError: timeout"
        assert event.correlation_id == correlation_id

    def test_builder_transaction_created(self):
        event = AuditEventBuilder.transaction_created(
            transaction_id="tx-1",
            account_id="acc-1",
            amount="42.50",
        )
        assert event.entity_type == "transaction"
        assert event.entity_id == "tx-1"
        assert event.is_user_action is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
