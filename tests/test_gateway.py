"""Tests for MailGateway: authorization before delegation, recipient cleanup, attachments, error propagation."""

import asyncio
import base64
import unittest
from datetime import datetime, timedelta, timezone

from fakes import RecordingProvider, make_evaluator

from graphlinker.errors import AttachmentDecodeError, RecipientNotAllowedError, SenderNotAllowedError
from graphlinker.gateway import AttachmentPayload, MailGateway
from graphlinker.mail_provider import GraphMessage


def _gateway(provider: RecordingProvider) -> MailGateway:
    return MailGateway(make_evaluator(), reader=provider, sender=provider)


class TestListMessages(unittest.TestCase):
    def test_allowed_sender_delegates(self):
        provider = RecordingProvider(messages=[GraphMessage(id=f"m{i}") for i in range(5)])
        result = asyncio.run(_gateway(provider).list_messages("ALICE@corp.com", top=3, folder="Archive"))
        self.assertEqual([m.id for m in result], ["m0", "m1", "m2"])
        self.assertEqual(
            provider.list_calls,
            [{"mailbox": "ALICE@corp.com", "folder": "Archive", "top": 3, "received_since": None}],
        )

    def test_defaults(self):
        provider = RecordingProvider()
        asyncio.run(_gateway(provider).list_messages("alice@corp.com"))
        self.assertEqual(provider.list_calls[0]["top"], 10)
        self.assertEqual(provider.list_calls[0]["folder"], "Inbox")

    def test_from_date_is_passed_as_utc(self):
        provider = RecordingProvider()
        naive = datetime(2024, 5, 1, 8, 0)
        asyncio.run(_gateway(provider).list_messages("alice@corp.com", from_date=naive))
        self.assertEqual(provider.list_calls[0]["received_since"], datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc))

        provider = RecordingProvider()
        cet = datetime(2024, 5, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        asyncio.run(_gateway(provider).list_messages("alice@corp.com", from_date=cet))
        self.assertEqual(provider.list_calls[0]["received_since"], datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc))

    def test_unknown_sender_rejected_without_provider_call(self):
        provider = RecordingProvider()
        with self.assertRaises(SenderNotAllowedError):
            asyncio.run(_gateway(provider).list_messages("eve@other.com"))
        self.assertEqual(provider.list_calls, [])

    def test_provider_error_propagates(self):
        provider = RecordingProvider(fail_with=RuntimeError("throttled"))
        with self.assertRaises(RuntimeError):
            asyncio.run(_gateway(provider).list_messages("alice@corp.com"))


class TestSendMessage(unittest.TestCase):
    def test_send_with_all_fields(self):
        provider = RecordingProvider()
        payload = base64.b64encode(b"hello").decode()
        asyncio.run(
            _gateway(provider).send_message(
                "alice@corp.com",
                to=["carol@corp.com"],
                subject="Hi",
                body="<p>Hello</p>",
                cc=["bob@partner.com"],
                bcc=["dave@corp.com"],
                attachments=[AttachmentPayload(name="a.txt", contentType="text/plain", base64Content=payload)],
            )
        )
        self.assertEqual(len(provider.sent), 1)
        sent = provider.sent[0]
        self.assertEqual(sent["mailbox"], "alice@corp.com")
        self.assertTrue(sent["save_to_sent_items"])
        message = sent["message"]
        self.assertEqual(message.subject, "Hi")
        self.assertEqual(message.body.contentType, "html")
        self.assertEqual(message.body.content, "<p>Hello</p>")
        self.assertEqual(message.toRecipients, ["carol@corp.com"])
        self.assertEqual(message.ccRecipients, ["bob@partner.com"])
        self.assertEqual(message.bccRecipients, ["dave@corp.com"])
        self.assertEqual(message.attachments[0].content, b"hello")
        self.assertEqual(message.attachments[0].contentType, "text/plain")

    def test_blank_recipients_are_dropped(self):
        provider = RecordingProvider()
        asyncio.run(
            _gateway(provider).send_message(
                "alice@corp.com", to=["a@corp.com", "", "  ", "b@corp.com"], subject="s", body="b", cc=["   "]
            )
        )
        message = provider.sent[0]["message"]
        self.assertEqual(message.toRecipients, ["a@corp.com", "b@corp.com"])
        self.assertEqual(message.ccRecipients, [])

    def test_first_disallowed_recipient_aborts_send(self):
        provider = RecordingProvider()
        with self.assertRaises(RecipientNotAllowedError) as ctx:
            asyncio.run(
                _gateway(provider).send_message(
                    "alice@corp.com",
                    to=["carol@corp.com", "eve@other.com"],
                    subject="s",
                    body="b",
                    bcc=["mallory@other.com"],
                )
            )
        self.assertEqual(ctx.exception.recipient, "eve@other.com")
        self.assertEqual(ctx.exception.sender, "alice@corp.com")
        self.assertEqual(provider.sent, [])

    def test_bcc_is_checked(self):
        provider = RecordingProvider()
        with self.assertRaises(RecipientNotAllowedError) as ctx:
            asyncio.run(
                _gateway(provider).send_message(
                    "alice@corp.com", to=["carol@corp.com"], subject="s", body="b", bcc=["eve@other.com"]
                )
            )
        self.assertEqual(ctx.exception.recipient, "eve@other.com")
        self.assertEqual(provider.sent, [])

    def test_unknown_sender_rejected(self):
        provider = RecordingProvider()
        with self.assertRaises(SenderNotAllowedError):
            asyncio.run(_gateway(provider).send_message("eve@other.com", to=["carol@corp.com"], subject="s", body="b"))
        self.assertEqual(provider.sent, [])

    def test_malformed_attachment_aborts_send(self):
        provider = RecordingProvider()
        bad = AttachmentPayload(name="bad.bin", base64Content="!!not base64!!")
        with self.assertRaises(AttachmentDecodeError) as ctx:
            asyncio.run(
                _gateway(provider).send_message(
                    "alice@corp.com", to=["carol@corp.com"], subject="s", body="b", attachments=[bad]
                )
            )
        self.assertEqual(ctx.exception.name, "bad.bin")
        self.assertEqual(provider.sent, [])

    def test_provider_error_propagates(self):
        provider = RecordingProvider(fail_with=ConnectionError("reset"))
        with self.assertRaises(ConnectionError):
            asyncio.run(_gateway(provider).send_message("alice@corp.com", to=["carol@corp.com"], subject="s", body="b"))


if __name__ == "__main__":
    unittest.main()
