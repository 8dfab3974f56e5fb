"""Email services package."""

from finance_app.services.email.dispatcher import EmailDispatcher
from finance_app.services.email.interface import (
    EmailError,
    EmailProviderError,
    EmailProviderInterface,
    InvalidEmailRequestError,
)
from finance_app.services.email.resend_provider import ResendEmailProvider

__all__ = [
    "EmailDispatcher",
    "EmailError",
    "EmailProviderError",
    "EmailProviderInterface",
    "InvalidEmailRequestError",
    "ResendEmailProvider",
]
