"""Stand-ins for the mail provider and config shared by the tests."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from graphlinker.access import AccessEvaluator, AllowedAccount, AuthorizationConfig, AzureADConfig

ALICE = AllowedAccount(
    email="alice@corp.com",
    display_name="Alice",
    allowed_receivers=("*@corp.com", "bob@partner.com"),
)
NOREPLY = AllowedAccount(
    email="noreply@corp.com",
    display_name="No-reply",
    allowed_receivers=("ops@corp.com",),
)


def make_azure_ad(accounts=(ALICE, NOREPLY)) -> AzureADConfig:
    return AzureADConfig(
        tenant_id="tenant-0000",
        client_id="client-0000",
        client_secret="secret",
        allowed_accounts=tuple(accounts),
    )


def make_evaluator(accounts=(ALICE, NOREPLY)) -> AccessEvaluator:
    return AccessEvaluator(AuthorizationConfig(accounts))


class RecordingProvider:
    """Records list/send calls; optionally raises `fail_with` from every call."""

    def __init__(self, messages=None, fail_with: Exception | None = None):
        self.messages = list(messages or [])
        self.fail_with = fail_with
        self.list_calls: list[dict] = []
        self.sent: list[dict] = []

    async def list_messages(self, mailbox, folder, top, received_since=None):
        self.list_calls.append(
            {"mailbox": mailbox, "folder": folder, "top": top, "received_since": received_since}
        )
        if self.fail_with is not None:
            raise self.fail_with
        return self.messages[:top]

    async def send_message(self, mailbox, message, save_to_sent_items=True):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"mailbox": mailbox, "message": message, "save_to_sent_items": save_to_sent_items})
