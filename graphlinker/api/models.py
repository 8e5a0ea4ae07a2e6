"""Pydantic models for the HTTP surface."""

from typing import Optional

from pydantic import BaseModel, Field

from graphlinker.gateway import AttachmentPayload
from graphlinker.mail_provider.graph_models import GraphMessage
from graphlinker.mail_provider.mapping import split_recipients


class EmailRequest(BaseModel):
    """POST /emails/{sender} body. to/cc/bcc are `;`-separated address lists."""

    to: str = ""
    cc: Optional[str] = None
    bcc: Optional[str] = None
    subject: str = ""
    body: str = ""
    attachments: Optional[list[AttachmentPayload]] = None

    def to_list(self) -> list[str]:
        return split_recipients(self.to)

    def cc_list(self) -> list[str]:
        return split_recipients(self.cc)

    def bcc_list(self) -> list[str]:
        return split_recipients(self.bcc)


class AttachmentSummary(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    contentType: Optional[str] = None


class MessageSummary(BaseModel):
    """One listed message, as returned by GET /emails/{sender}."""

    id: str
    subject: str = ""
    from_: Optional[str] = Field(None, alias="from")
    receivedDateTime: Optional[str] = None
    bodyPreview: Optional[str] = None
    attachments: list[AttachmentSummary] = []

    model_config = {"populate_by_name": True}

    @classmethod
    def from_graph(cls, message: GraphMessage) -> "MessageSummary":
        return cls(
            id=message.id,
            subject=message.subject,
            from_=message.sender_address,
            receivedDateTime=message.receivedDateTime,
            bodyPreview=message.bodyPreview,
            attachments=[AttachmentSummary(**a.model_dump()) for a in message.attachments],
        )
