"""
Email Provider using Resend

DESIGN DECISION: We use Resend because:
1. Single-send and batch-send are both first-class API operations
2. One API key, no SMTP setup
3. Responses are small JSON payloads we can hand back unchanged

The resend SDK is synchronous and keeps its API key in module state, so a
process talks to Resend with one key. The key is applied once, when the
provider is built, and never from the worker threads the blocking SDK calls
run in.
"""

import asyncio
from typing import Any

import resend

from finance_app.models.email import OutboundEmail
from finance_app.services.email.interface import (
    EmailProviderError,
    EmailProviderInterface,
)


class ResendEmailProvider(EmailProviderInterface):
    """
    Resend implementation of the email provider interface.

    IMPORTANT BOUNDARIES:
    1. One SDK call per method invocation, no retries
    2. Every SDK failure surfaces as EmailProviderError
    3. Responses are returned exactly as the SDK produced them
    """

    def __init__(self, api_key: str):
        if not api_key:
            raise ValueError("Resend API key is required")
        self._api_key = api_key
        resend.api_key = api_key

    def _send_one(self, params: dict) -> Any:
        return resend.Emails.send(params)

    def _send_many(self, params: list[dict]) -> Any:
        return resend.Batch.send(params)

    async def send_email(self, message: OutboundEmail) -> Any:
        try:
            return await asyncio.to_thread(
                self._send_one,
                message.to_provider_params(),
            )
        except Exception as e:
            raise EmailProviderError(
                f"Resend send failed: {type(e).__name__}: {e}"
            ) from e

    async def send_batch(self, messages: list[OutboundEmail]) -> Any:
        try:
            return await asyncio.to_thread(
                self._send_many,
                [m.to_provider_params() for m in messages],
            )
        except Exception as e:
            raise EmailProviderError(
                f"Resend batch send failed: {type(e).__name__}: {e}"
            ) from e
