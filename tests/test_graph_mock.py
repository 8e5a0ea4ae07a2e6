"""Tests for GraphMockProvider: mailbox/folder scoping, ordering, date filter, sent items file."""

import asyncio
import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

import fakes  # noqa: F401  (puts the project root on sys.path)

from graphlinker.api.models import MessageSummary
from graphlinker.mail_provider import GraphMockProvider, ItemBody, OutgoingAttachment, OutgoingMessage

INBOX = [
    {"id": "old", "receivedDateTime": "2024-05-01T08:00:00Z", "subject": "old"},
    {"id": "new", "receivedDateTime": "2024-05-03T08:00:00Z", "subject": "new",
     "from": {"emailAddress": {"address": "carol@corp.com"}}},
    {"id": "mid", "receivedDateTime": "2024-05-02T08:00:00Z", "subject": "mid", "mailbox": "alice@corp.com"},
    {"id": "other", "receivedDateTime": "2024-05-04T08:00:00Z", "mailbox": "noreply@corp.com"},
    {"id": "archived", "receivedDateTime": "2024-05-05T08:00:00Z", "folder": "Archive"},
]


class TestGraphMockProvider(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.inbox_path = root / "inbox.json"
        self.sent_path = root / "out" / "sent_items.json"
        self.inbox_path.write_text(json.dumps({"value": INBOX}), encoding="utf-8")
        self.provider = GraphMockProvider(inbox_path=self.inbox_path, sent_items_path=self.sent_path)

    def test_list_newest_first_scoped_to_mailbox_and_folder(self):
        messages = asyncio.run(self.provider.list_messages("ALICE@corp.com", "Inbox", 10))
        self.assertEqual([m.id for m in messages], ["new", "mid", "old"])
        self.assertEqual(messages[0].sender_address, "carol@corp.com")

    def test_top(self):
        messages = asyncio.run(self.provider.list_messages("alice@corp.com", "inbox", 1))
        self.assertEqual([m.id for m in messages], ["new"])

    def test_received_since_is_inclusive(self):
        since = datetime(2024, 5, 2, 8, 0, tzinfo=timezone.utc)
        messages = asyncio.run(self.provider.list_messages("alice@corp.com", "Inbox", 10, received_since=since))
        self.assertEqual([m.id for m in messages], ["new", "mid"])

    def test_other_folder(self):
        messages = asyncio.run(self.provider.list_messages("alice@corp.com", "Archive", 10))
        self.assertEqual([m.id for m in messages], ["archived"])

    def test_unmodelled_graph_fields_do_not_reach_the_summary(self):
        item = {"id": "x", "receivedDateTime": "2024-05-01T08:00:00Z", "conversationId": "c1", "isDraft": False}
        self.inbox_path.write_text(json.dumps([item]), encoding="utf-8")
        provider = GraphMockProvider(inbox_path=self.inbox_path, sent_items_path=self.sent_path)
        [message] = asyncio.run(provider.list_messages("alice@corp.com", "Inbox", 10))
        summary = MessageSummary.from_graph(message).model_dump(by_alias=True)
        self.assertEqual(summary["id"], "x")
        self.assertNotIn("conversationId", summary)
        self.assertNotIn("isDraft", summary)

    def test_missing_inbox(self):
        provider = GraphMockProvider(inbox_path=Path(self._tmp.name) / "none.json", sent_items_path=self.sent_path)
        self.assertEqual(asyncio.run(provider.list_messages("alice@corp.com", "Inbox", 10)), [])

    def test_send_appends_sent_items(self):
        message = OutgoingMessage(
            subject="Hi",
            body=ItemBody(contentType="html", content="<p>x</p>"),
            toRecipients=["carol@corp.com"],
            bccRecipients=["dave@corp.com"],
            attachments=[OutgoingAttachment(name="a.txt", contentType="text/plain", content=b"abc")],
        )
        asyncio.run(self.provider.send_message("alice@corp.com", message))
        asyncio.run(self.provider.send_message("alice@corp.com", message))
        sent = json.loads(self.sent_path.read_text(encoding="utf-8"))
        self.assertEqual(len(sent), 2)
        self.assertEqual(sent[0]["mailbox"], "alice@corp.com")
        self.assertEqual(sent[0]["toRecipients"], ["carol@corp.com"])
        self.assertEqual(sent[0]["bccRecipients"], ["dave@corp.com"])
        self.assertEqual(sent[0]["attachments"], [{"name": "a.txt", "contentType": "text/plain", "size": 3}])

    def test_send_without_saving(self):
        message = OutgoingMessage(subject="Hi", toRecipients=["carol@corp.com"])
        asyncio.run(self.provider.send_message("alice@corp.com", message, save_to_sent_items=False))
        self.assertFalse(self.sent_path.exists())


if __name__ == "__main__":
    unittest.main()
