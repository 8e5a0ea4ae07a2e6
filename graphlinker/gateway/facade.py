"""Mail gateway facade: enforce the allow-list, then delegate to the mail provider."""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from graphlinker.access import AccessEvaluator
from graphlinker.config import DEFAULT_FOLDER, DEFAULT_TOP
from graphlinker.errors import RecipientNotAllowedError, SenderNotAllowedError
from graphlinker.mail_provider.graph_models import GraphMessage, ItemBody, OutgoingMessage
from graphlinker.mail_provider.mapping import clean_recipients, decode_attachment, to_utc
from graphlinker.mail_provider.protocol import MailReader, MailSender
from graphlinker.utils.logger import get_logger

logger = get_logger("graphlinker.gateway")


class AttachmentPayload(BaseModel):
    """Attachment as supplied by callers: name, content type and base64 bytes."""

    name: str
    contentType: str = "application/octet-stream"
    base64Content: str


class MailGateway:
    """Checks every request against the evaluator before any provider call.

    Rejections raise SenderNotAllowedError / RecipientNotAllowedError and leave the
    provider untouched. Provider failures propagate unchanged.
    """

    def __init__(self, evaluator: AccessEvaluator, reader: MailReader, sender: MailSender):
        self._evaluator = evaluator
        self._reader = reader
        self._sender = sender

    @property
    def evaluator(self) -> AccessEvaluator:
        return self._evaluator

    def _require_sender(self, sender: str) -> None:
        if not self._evaluator.is_sender_allowed(sender):
            logger.warning("gateway.sender_rejected", sender=sender)
            raise SenderNotAllowedError(sender)

    def _require_receivers(self, sender: str, receivers: Iterable[str]) -> None:
        for receiver in receivers:
            pattern = self._evaluator.match_receiver(sender, receiver)
            if pattern is None:
                logger.warning("gateway.send.recipient_rejected", sender=sender, recipient=receiver)
                raise RecipientNotAllowedError(receiver, sender)
            logger.debug("gateway.send.recipient_allowed", sender=sender, recipient=receiver, pattern=pattern)

    async def list_messages(
        self,
        sender: str,
        top: int = DEFAULT_TOP,
        folder: str = DEFAULT_FOLDER,
        from_date: Optional[datetime] = None,
    ) -> list[GraphMessage]:
        """Latest `top` messages of the sender's folder, newest first, optionally received at or after `from_date`."""
        self._require_sender(sender)
        since = to_utc(from_date) if from_date is not None else None
        messages = await self._reader.list_messages(sender, folder, top, received_since=since)
        logger.info("gateway.list_messages", sender=sender, folder=folder, top=top, count=len(messages))
        return list(messages)

    async def send_message(
        self,
        sender: str,
        to: Sequence[str],
        subject: str,
        body: str,
        cc: Optional[Sequence[str]] = None,
        bcc: Optional[Sequence[str]] = None,
        attachments: Optional[Sequence[AttachmentPayload]] = None,
    ) -> OutgoingMessage:
        """Validate sender and every recipient, decode attachments, then send with a copy to Sent Items."""
        self._require_sender(sender)
        to_list = clean_recipients(to)
        cc_list = clean_recipients(cc)
        bcc_list = clean_recipients(bcc)
        self._require_receivers(sender, [*to_list, *cc_list, *bcc_list])

        message = OutgoingMessage(
            subject=subject,
            body=ItemBody(contentType="html", content=body),
            toRecipients=to_list,
            ccRecipients=cc_list,
            bccRecipients=bcc_list,
            attachments=[
                decode_attachment(a.name, a.contentType, a.base64Content) for a in (attachments or [])
            ],
        )
        await self._sender.send_message(sender, message, save_to_sent_items=True)
        logger.info(
            "gateway.send_message",
            sender=sender,
            to_count=len(to_list),
            cc_count=len(cc_list),
            bcc_count=len(bcc_list),
            attachment_count=len(message.attachments),
        )
        return message
