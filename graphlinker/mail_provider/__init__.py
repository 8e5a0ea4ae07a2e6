"""Mail provider: Graph-like capabilities, Graph models and a mock implementation."""

from graphlinker.mail_provider.graph_models import (
    AttachmentInfo,
    EmailAddress,
    GraphMessage,
    ItemBody,
    OutgoingAttachment,
    OutgoingMessage,
    Recipient,
)
from graphlinker.mail_provider.protocol import MailProvider, MailReader, MailSender
from graphlinker.mail_provider.graph_mock import GraphMockProvider
from graphlinker.mail_provider.mapping import (
    clean_recipients,
    decode_attachment,
    split_recipients,
)

__all__ = [
    "AttachmentInfo",
    "EmailAddress",
    "GraphMessage",
    "ItemBody",
    "OutgoingAttachment",
    "OutgoingMessage",
    "Recipient",
    "MailProvider",
    "MailReader",
    "MailSender",
    "GraphMockProvider",
    "clean_recipients",
    "decode_attachment",
    "split_recipients",
]
