"""Mail provider capabilities (Graph-like interface), scoped by mailbox."""

from datetime import datetime
from typing import Protocol

from graphlinker.mail_provider.graph_models import GraphMessage, OutgoingMessage


class MailReader(Protocol):
    """List messages in a mailbox folder."""

    async def list_messages(
        self,
        mailbox: str,
        folder: str,
        top: int,
        received_since: datetime | None = None,
    ) -> list[GraphMessage]:
        """Return at most `top` messages ordered by receivedDateTime desc, received at or after `received_since` (UTC) when set."""
        ...


class MailSender(Protocol):
    """Send a message as a mailbox."""

    async def send_message(
        self,
        mailbox: str,
        message: OutgoingMessage,
        save_to_sent_items: bool = True,
    ) -> None:
        ...


class MailProvider(MailReader, MailSender, Protocol):
    """Both capabilities; what GraphProvider and GraphMockProvider implement."""
