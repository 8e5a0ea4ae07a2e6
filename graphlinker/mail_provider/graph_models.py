"""Pydantic models for Microsoft Graph API message shape (subset we need)."""

from typing import Optional

from pydantic import BaseModel, Field


class EmailAddress(BaseModel):
    """Graph emailAddress."""

    address: str
    name: Optional[str] = None


class Recipient(BaseModel):
    """Graph recipient (from, toRecipients, etc.)."""

    emailAddress: EmailAddress


class ItemBody(BaseModel):
    """Graph itemBody (message body)."""

    contentType: str = "html"  # "text" | "html"
    content: str = ""


class AttachmentInfo(BaseModel):
    """Attachment metadata as returned when listing with $expand=attachments."""

    id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    contentType: Optional[str] = None


class GraphMessage(BaseModel):
    """Microsoft Graph message resource (subset)."""

    id: str
    receivedDateTime: Optional[str] = None  # ISO 8601
    subject: str = ""
    body: ItemBody = ItemBody()
    bodyPreview: Optional[str] = None
    from_: Optional[Recipient] = Field(None, alias="from")
    toRecipients: list[Recipient] = []
    ccRecipients: list[Recipient] = []
    attachments: list[AttachmentInfo] = []

    model_config = {"populate_by_name": True, "extra": "allow"}

    @property
    def sender_address(self) -> Optional[str]:
        if self.from_ and self.from_.emailAddress:
            return self.from_.emailAddress.address
        return None


class OutgoingAttachment(BaseModel):
    """Decoded file attachment ready to be sent."""

    name: str
    contentType: str
    content: bytes


class OutgoingMessage(BaseModel):
    """A fully constructed message to send from a mailbox."""

    subject: str = ""
    body: ItemBody = ItemBody()
    toRecipients: list[str] = []
    ccRecipients: list[str] = []
    bccRecipients: list[str] = []
    attachments: list[OutgoingAttachment] = []

    @property
    def all_recipients(self) -> list[str]:
        return [*self.toRecipients, *self.ccRecipients, *self.bccRecipients]
