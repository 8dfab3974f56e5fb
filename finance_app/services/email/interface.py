"""
Abstract Email Provider Interface

DESIGN DECISION: The dispatcher talks to an abstract provider with exactly
two operations, one message or one batch. This allows us to:
1. Swap Resend for another transactional email API
2. Use stub providers in tests without patching an SDK
"""

from abc import ABC, abstractmethod
from typing import Any

from finance_app.models.email import OutboundEmail


class EmailProviderInterface(ABC):
    """
    Abstract interface for a transactional email provider.

    Implementations make exactly one outbound call per method invocation
    and raise on failure. They do not retry.
    """

    @abstractmethod
    async def send_email(self, message: OutboundEmail) -> Any:
        """
        Send a single message.

        Returns:
            The provider's response payload, unchanged

        Raises:
            EmailProviderError: If the provider call fails
        """
        pass

    @abstractmethod
    async def send_batch(self, messages: list[OutboundEmail]) -> Any:
        """
        Send several independent messages in one provider call.

        Returns:
            The provider's batch response payload, unchanged

        Raises:
            EmailProviderError: If the provider call fails
        """
        pass


class EmailError(Exception):
    """Base exception for email errors."""
    pass


class EmailProviderError(EmailError):
    """The provider call failed (network, auth, or rejection)."""
    pass


class InvalidEmailRequestError(EmailError):
    """Recipient, subject or content failed validation."""
    pass
