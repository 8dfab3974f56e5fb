"""
Email Models for Finance App

These models describe one dispatch: what the caller asked for, what goes
out to the provider, and the uniform result handed back.

DESIGN DECISION: The caller-facing recipient is "one address or a list of
addresses". Internally that is a tagged union (SingleRecipient | ManyRecipients)
so the dispatcher chooses the single or batch path by matching on the tag,
not by re-inspecting the raw input.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.networks import validate_email


# =============================================================================
# RECIPIENTS
# =============================================================================

class SingleRecipient(BaseModel):
    """Exactly one recipient address."""

    kind: Literal["single"] = "single"
    address: str


class ManyRecipients(BaseModel):
    """An ordered list of recipient addresses, sent as one batch."""

    kind: Literal["many"] = "many"
    addresses: list[str] = Field(..., min_length=1)


Recipient = Annotated[
    Union[SingleRecipient, ManyRecipients],
    Field(discriminator="kind"),
]


# =============================================================================
# REQUEST / MESSAGE
# =============================================================================

class EmailRequest(BaseModel):
    """
    A validated dispatch request.

    Transient: built and consumed within a single call to the dispatcher.
    Subject and content are passed on exactly as the caller gave them.
    Addresses keep their display name and case; only surrounding whitespace
    is dropped.
    """

    to: Union[str, list[str]] = Field(
        ...,
        description="Single address or ordered list of addresses"
    )
    subject: str = Field(
        ...,
        min_length=1,
        max_length=998,
        description="Subject line shared by every message"
    )
    content: str = Field(
        ...,
        description="Rendered HTML body shared by every message"
    )

    @field_validator('to')
    @classmethod
    def validate_recipients(cls, v):
        """Check each address, accepting "Name <addr>" forms, without normalizing."""
        if isinstance(v, list):
            if not v:
                raise ValueError("Recipient list must contain at least one address")
            addresses = [address.strip() for address in v]
        else:
            addresses = [v.strip()]
        for address in addresses:
            validate_email(address)
        return addresses if isinstance(v, list) else addresses[0]

    @field_validator('subject')
    @classmethod
    def validate_subject(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Subject must not be blank")
        return v

    @property
    def recipient(self) -> Union[SingleRecipient, ManyRecipients]:
        if isinstance(self.to, list):
            return ManyRecipients(addresses=list(self.to))
        return SingleRecipient(address=self.to)


class OutboundEmail(BaseModel):
    """One message as handed to the email provider."""
    model_config = ConfigDict(populate_by_name=True)

    from_address: str = Field(..., alias="from")
    to: str
    subject: str
    html: str

    def to_provider_params(self) -> dict:
        """Provider wire shape: {from, to, subject, html}."""
        return self.model_dump(by_alias=True)


# =============================================================================
# RESULT
# =============================================================================

class DispatchResult(BaseModel):
    """
    Normalized outcome of a dispatch.

    On success `data` is the provider response, unchanged.
    On failure `error` is a "<ExceptionType>: <message>" string.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any) -> "DispatchResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, exc: BaseException) -> "DispatchResult":
        return cls(success=False, error=describe_error(exc))

    def to_dict(self) -> dict:
        """Caller-facing shape: {success, data} or {success, error}."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


def describe_error(exc: BaseException) -> str:
    """Render an exception as "<Type>: <message>", or just the type name."""
    message = str(exc).strip()
    name = type(exc).__name__
    return f"{name}: {message}" if message else name
