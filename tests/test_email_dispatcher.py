"""Tests for the email dispatcher, using stub providers."""

from unittest.mock import MagicMock

import pytest

from finance_app.audit import AuditLogger
from finance_app.models.audit import AuditEventType
from finance_app.services.email import (
    EmailDispatcher,
    EmailProviderError,
    EmailProviderInterface,
)
from finance_app.services.storage import InMemoryAuditStorage


SENDER = "Finance App <onboarding@resend.dev>"


class NetworkError(Exception):
    pass


class StubProvider(EmailProviderInterface):
    """Records calls; returns canned responses or raises a canned error."""

    def __init__(self, single_response=None, batch_response=None, error=None):
        self.single_response = single_response
        self.batch_response = batch_response
        self.error = error
        self.single_calls = []
        self.batch_calls = []

    async def send_email(self, message):
        self.single_calls.append(message)
        if self.error:
            raise self.error
        return self.single_response

    async def send_batch(self, messages):
        self.batch_calls.append(messages)
        if self.error:
            raise self.error
        return self.batch_response


@pytest.fixture
def logger():
    return MagicMock()


def make_dispatcher(provider, logger, audit_logger=None):
    return EmailDispatcher(
        provider=provider,
        from_address=SENDER,
        logger=logger,
        audit_logger=audit_logger,
    )


class TestSingleDispatch:

    @pytest.mark.asyncio
    async def test_single_address_success(self, logger):
        provider = StubProvider(single_response={"id": "1"})
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        assert result.success is True
        assert result.data == {"id": "1"}
        assert result.error is None
        assert result.to_dict() == {"success": True, "data": {"id": "1"}}

    @pytest.mark.asyncio
    async def test_single_address_makes_one_single_call(self, logger):
        provider = StubProvider(single_response={"id": "1"})
        dispatcher = make_dispatcher(provider, logger)

        await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        assert provider.batch_calls == []
        assert len(provider.single_calls) == 1
        message = provider.single_calls[0]
        assert message.to == "a@x.com"
        assert message.from_address == SENDER
        assert message.subject == "Hi"
        assert message.html == "<p>hi</p>"

    @pytest.mark.asyncio
    async def test_provider_payload_returned_unchanged(self, logger):
        payload = {"id": "abc", "extra": {"nested": [1, 2]}}
        provider = StubProvider(single_response=payload)
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        assert result.data == payload

    @pytest.mark.asyncio
    async def test_content_reaches_provider_unchanged(self, logger):
        provider = StubProvider(single_response={"id": "1"})
        dispatcher = make_dispatcher(provider, logger)

        await dispatcher.send("a@x.com", " Hi ", "\n  <p>hi</p>\n")

        message = provider.single_calls[0]
        assert message.subject == " Hi "
        assert message.html == "\n  <p>hi</p>\n"

    @pytest.mark.asyncio
    async def test_display_name_recipient_kept(self, logger):
        provider = StubProvider(single_response={"id": "1"})
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send("Alice <alice@Example.COM>", "Hi", "<p>hi</p>")

        assert result.success is True
        assert provider.single_calls[0].to == "Alice <alice@Example.COM>"


class TestBatchDispatch:

    @pytest.mark.asyncio
    async def test_list_makes_one_batch_call(self, logger):
        response = {"data": [{"id": "1"}, {"id": "2"}]}
        provider = StubProvider(batch_response=response)
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send(["a@x.com", "b@x.com"], "Hi", "<p>hi</p>")

        assert result.success is True
        assert result.data == response
        assert provider.single_calls == []
        assert len(provider.batch_calls) == 1

        messages = provider.batch_calls[0]
        assert [m.to for m in messages] == ["a@x.com", "b@x.com"]
        assert all(m.from_address == SENDER for m in messages)
        assert all(m.subject == "Hi" for m in messages)
        assert all(m.html == "<p>hi</p>" for m in messages)

    @pytest.mark.asyncio
    async def test_one_element_list_still_batches(self, logger):
        provider = StubProvider(batch_response={"data": [{"id": "1"}]})
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send(["a@x.com"], "Hi", "<p>hi</p>")

        assert result.success is True
        assert len(provider.batch_calls) == 1
        assert len(provider.batch_calls[0]) == 1
        assert provider.single_calls == []

    @pytest.mark.asyncio
    async def test_partial_batch_failure_is_logged_not_failed(self, logger):
        response = {
            "data": [{"id": "1"}],
            "errors": [{"index": 1, "message": "Invalid `to` field"}],
        }
        provider = StubProvider(batch_response=response)
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send(["a@x.com", "b@x.com"], "Hi", "<p>hi</p>")

        assert result.success is True
        assert result.data == response
        logger.warning.assert_called_once()
        _, kwargs = logger.warning.call_args
        assert kwargs["failed_recipients"] == ["b@x.com"]
        assert kwargs["batch_size"] == 2


class TestDispatchFailures:

    @pytest.mark.asyncio
    async def test_provider_error_is_returned_not_raised(self, logger):
        provider = StubProvider(error=NetworkError("timeout"))
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        assert result.success is False
        assert result.error == "NetworkError: timeout"
        assert result.data is None
        assert result.to_dict() == {"success": False, "error": "NetworkError: timeout"}

    @pytest.mark.asyncio
    async def test_batch_error_is_one_aggregate_failure(self, logger):
        provider = StubProvider(error=EmailProviderError("rejected"))
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send(["a@x.com", "b@x.com"], "Hi", "<p>hi</p>")

        assert result.success is False
        assert result.error == "EmailProviderError: rejected"
        assert len(provider.batch_calls) == 1

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, logger):
        provider = StubProvider(error=NetworkError("timeout"))
        dispatcher = make_dispatcher(provider, logger)

        await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        logger.error.assert_called_once()
        args, kwargs = logger.error.call_args
        assert args[0] == "email_dispatch_failed"
        assert kwargs["error"] == "NetworkError: timeout"
        assert kwargs["recipients"] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_invalid_address_never_reaches_provider(self, logger):
        provider = StubProvider(single_response={"id": "1"})
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send("not-an-address", "Hi", "<p>hi</p>")

        assert result.success is False
        assert result.error.startswith("InvalidEmailRequestError: ")
        assert provider.single_calls == []
        assert provider.batch_calls == []

    @pytest.mark.asyncio
    async def test_empty_list_is_a_failure(self, logger):
        provider = StubProvider(batch_response={"data": []})
        dispatcher = make_dispatcher(provider, logger)

        result = await dispatcher.send([], "Hi", "<p>hi</p>")

        assert result.success is False
        assert result.error
        assert provider.batch_calls == []

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, logger):
        provider = StubProvider(error=NetworkError("timeout"))
        dispatcher = make_dispatcher(provider, logger)

        await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        assert len(provider.single_calls) == 1


class TestDispatchAudit:

    @pytest.mark.asyncio
    async def test_success_is_audited(self, logger):
        storage = InMemoryAuditStorage()
        provider = StubProvider(batch_response={"data": [{"id": "1"}, {"id": "2"}]})
        dispatcher = make_dispatcher(provider, logger, AuditLogger(storage, logger=MagicMock()))

        await dispatcher.send(["a@x.com", "b@x.com"], "Hi", "<p>hi</p>")

        events = await storage.get_recent_events()
        assert len(events) == 1
        assert events[0].event_type == AuditEventType.EMAIL_DISPATCHED
        assert events[0].details["mode"] == "batch"
        assert events[0].details["recipients"] == ["a@x.com", "b@x.com"]

    @pytest.mark.asyncio
    async def test_failure_is_audited(self, logger):
        storage = InMemoryAuditStorage()
        provider = StubProvider(error=NetworkError("timeout"))
        dispatcher = make_dispatcher(provider, logger, AuditLogger(storage, logger=MagicMock()))

        await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        events = await storage.get_recent_events()
        assert len(events) == 1
        assert events[0].event_type == AuditEventType.EMAIL_DISPATCH_FAILED
        assert events[0].error_message == "NetworkError: timeout"

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_change_result(self, logger):
        audit_logger = MagicMock()

        async def broken(**kwargs):
            raise RuntimeError("audit down")

        audit_logger.log_email_dispatched = broken
        provider = StubProvider(single_response={"id": "1"})
        dispatcher = make_dispatcher(provider, logger, audit_logger)

        result = await dispatcher.send("a@x.com", "Hi", "<p>hi</p>")

        assert result.success is True
        logger.warning.assert_called_once()
