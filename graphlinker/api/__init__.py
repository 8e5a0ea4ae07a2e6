"""HTTP surface for the mail gateway."""

from graphlinker.api.models import AttachmentSummary, EmailRequest, MessageSummary

__all__ = [
    "AttachmentSummary",
    "EmailRequest",
    "MessageSummary",
]
