"""Mail gateway facade."""

from graphlinker.gateway.facade import AttachmentPayload, MailGateway

__all__ = [
    "AttachmentPayload",
    "MailGateway",
]
