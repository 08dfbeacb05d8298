"""
Transport-agnostic email message.

Dependencies: pydantic
System role: Mail payload handed from the host to the mail transport
"""

from pydantic import BaseModel, Field, model_validator


class MailAddress(BaseModel):
    """Single mailbox with optional display name."""

    address: str = Field(description="Email address")
    name: str = Field(default="", description="Display name")

    def formatted(self) -> str:
        """Render as "Name <address>", or the bare address without a name."""
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address


class Message(BaseModel):
    """Outgoing email; at least one of html/text must be non-empty."""

    sender: MailAddress | None = Field(default=None, description="From identity override")
    to: list[MailAddress] = Field(default_factory=list)
    cc: list[MailAddress] = Field(default_factory=list)
    bcc: list[MailAddress] = Field(default_factory=list)
    subject: str = ""
    html: str = ""
    text: str = ""

    @model_validator(mode="after")
    def _require_body(self) -> "Message":
        if not self.html and not self.text:
            raise ValueError("message needs an HTML or text body")
        return self
