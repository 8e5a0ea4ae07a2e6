"""Mock mail provider: reads inbox.json, writes sent_items.json."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from graphlinker.config import DEFAULT_FOLDER
from graphlinker.mail_provider.graph_models import GraphMessage, OutgoingMessage
from graphlinker.mail_provider.mapping import parse_graph_datetime, to_utc
from graphlinker.utils.logger import get_logger

logger = get_logger("graphlinker.mail_provider")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _received_at(message: GraphMessage) -> datetime:
    return parse_graph_datetime(message.receivedDateTime) or _EPOCH


class GraphMockProvider:
    """Mock provider: inbox from a JSON file, sent items appended to another JSON file.

    Inbox items are Graph message objects. An optional `mailbox` key scopes an item
    to one mailbox and an optional `folder` key to a folder (default Inbox); items
    without them are visible from every mailbox's Inbox.
    """

    def __init__(
        self,
        inbox_path: Path,
        sent_items_path: Path,
    ):
        self._inbox_path = inbox_path
        self._sent_items_path = sent_items_path
        self._inbox: list[GraphMessage] = []
        logger.info(
            "mail_provider.init",
            inbox_path=str(self._inbox_path),
            sent_items_path=str(self._sent_items_path),
        )
        self._load_inbox()

    def _load_inbox(self) -> None:
        if not self._inbox_path.exists():
            self._inbox = []
            logger.warning("mail_provider.inbox_missing", inbox_path=str(self._inbox_path))
            return
        with self._inbox_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        items = data if isinstance(data, list) else data.get("value", data.get("messages", []))
        self._inbox = [GraphMessage.model_validate(item) for item in items]
        logger.info("mail_provider.inbox_loaded", message_count=len(self._inbox))

    def _load_sent(self) -> list[dict[str, Any]]:
        if not self._sent_items_path.exists():
            return []
        with self._sent_items_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        items = data if isinstance(data, list) else data.get("value", [])
        return items or []

    def _save_sent(self, items: list[dict[str, Any]]) -> None:
        self._sent_items_path.parent.mkdir(parents=True, exist_ok=True)
        with self._sent_items_path.open("w", encoding="utf-8") as f:
            json.dump(items, f, indent=2, default=str)
        logger.info("mail_provider.sent_written", count=len(items), sent_items_path=str(self._sent_items_path))

    @staticmethod
    def _in_scope(message: GraphMessage, mailbox: str, folder: str) -> bool:
        extra = message.model_extra or {}
        item_mailbox = extra.get("mailbox")
        item_folder = extra.get("folder") or DEFAULT_FOLDER
        if item_mailbox and str(item_mailbox).casefold() != mailbox.casefold():
            return False
        return str(item_folder).casefold() == folder.casefold()

    async def list_messages(
        self,
        mailbox: str,
        folder: str,
        top: int,
        received_since: datetime | None = None,
    ) -> list[GraphMessage]:
        matching = [m for m in self._inbox if self._in_scope(m, mailbox, folder)]
        if received_since is not None:
            since = to_utc(received_since)
            matching = [m for m in matching if _received_at(m) >= since]
        matching.sort(key=_received_at, reverse=True)
        logger.debug("mail_provider.list_messages", mailbox=mailbox, folder=folder, count=len(matching[:top]))
        return matching[:top]

    async def send_message(
        self,
        mailbox: str,
        message: OutgoingMessage,
        save_to_sent_items: bool = True,
    ) -> None:
        logger.info("mail_provider.send_message", mailbox=mailbox, recipient_count=len(message.all_recipients))
        if not save_to_sent_items:
            return
        sent_list = self._load_sent()
        sent_dt = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        sent_list.append({
            "id": f"sent_{len(sent_list)}",
            "mailbox": mailbox,
            "sentDateTime": sent_dt,
            "subject": message.subject,
            "body": message.body.model_dump(),
            "toRecipients": message.toRecipients,
            "ccRecipients": message.ccRecipients,
            "bccRecipients": message.bccRecipients,
            "attachments": [
                {"name": a.name, "contentType": a.contentType, "size": len(a.content)}
                for a in message.attachments
            ],
        })
        self._save_sent(sent_list)
