"""
Simple script to verify the gateway's Microsoft Graph credentials and read a mailbox.

Loads the azure_ad section of the gateway config (AZURE_* env vars override it),
acquires an app-only token with the client secret, then lists the latest messages
of one allowed mailbox.

Usage:
    python scripts/verify_graph_credentials.py
    python scripts/verify_graph_credentials.py --mailbox alice@corp.com --top 5
    python scripts/verify_graph_credentials.py --config config/gateway.yaml

The app registration needs Application Mail.Read and Mail.Send permissions
with admin consent.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from graphlinker.access import load_gateway_config
from graphlinker.auth import get_client_secret_credential
from graphlinker.config import DEFAULT_FOLDER, GRAPH_SCOPES
from graphlinker.errors import ConfigurationError
from graphlinker.mail_provider.graph_real import GraphProvider


def print_header(text: str) -> None:
    """Print a formatted header."""
    print(f"\n{'='*60}")
    print(f"  {text}")
    print(f"{'='*60}\n")


def print_success(text: str) -> None:
    print(f"[OK] {text}")


def print_error(text: str) -> None:
    print(f"[ERROR] {text}")


def print_info(text: str) -> None:
    print(f"[INFO] {text}")


async def verify(config_path: Path | None, mailbox: str | None, top: int) -> bool:
    """Verify client-credential auth and mailbox read access."""

    print_header("Microsoft Graph API - Application Permissions")
    print_info("Loading gateway config...")
    try:
        azure_ad = load_gateway_config(config_path)
    except ConfigurationError as e:
        print_error(str(e))
        return False

    print_success("Gateway config loaded")
    print(f"    Tenant ID: {azure_ad.tenant_id[:8]}...")
    print(f"    Client ID: {azure_ad.client_id[:8]}...")
    print(f"    Allowed accounts: {len(azure_ad.allowed_accounts)}")

    if not mailbox:
        if not azure_ad.allowed_accounts:
            print_error("No allowed accounts configured and no --mailbox given")
            return False
        mailbox = azure_ad.allowed_accounts[0].email

    print_header("Testing Authentication")
    credential = get_client_secret_credential(
        tenant_id=azure_ad.tenant_id,
        client_id=azure_ad.client_id,
        client_secret=azure_ad.client_secret,
    )
    try:
        token = credential.get_token(*GRAPH_SCOPES)
        print_success(f"Access token acquired (expires: {token.expires_on})")
    except Exception as e:
        print_error(f"Failed to acquire token: {e}")
        print_info("Check tenant_id, client_id and client_secret (or AZURE_* env vars)")
        return False

    print_header("Testing Graph API Access")
    print_info(f"Fetching messages from mailbox: {mailbox}")
    provider = GraphProvider(
        tenant_id=azure_ad.tenant_id,
        client_id=azure_ad.client_id,
        client_secret=azure_ad.client_secret,
    )
    try:
        messages = await provider.list_messages(mailbox, DEFAULT_FOLDER, top)
    except Exception as e:
        error_str = str(e)
        print_error(f"Failed to fetch messages: {e}")
        if "Authorization_RequestDenied" in error_str or "403" in error_str:
            print_info("Permission denied. Make sure you have:")
            print_info("  1. Added Application (not Delegated) Mail.Read permission")
            print_info("  2. Granted ADMIN CONSENT in Azure Portal")
        elif "ResourceNotFound" in error_str or "MailboxNotFound" in error_str:
            print_info(f"Mailbox not found: {mailbox}")
        return False

    if messages:
        print_success(f"Successfully retrieved {len(messages)} messages!")
        print_header("Recent Emails")
        for i, msg in enumerate(messages, 1):
            received = (msg.receivedDateTime or "Unknown")[:19]
            print(f"{i}. {received}")
            print(f"   From: {msg.sender_address or 'Unknown'}")
            print(f"   Subject: {msg.subject or '(No subject)'}")
            print(f"   Attachments: {len(msg.attachments)}")
            print()
    else:
        print_success("API access works! (No messages found in inbox)")

    print_header("Verification Complete")
    print_success("All checks passed! Application permissions are working.")
    return True


def main():
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(description="Verify Microsoft Graph API credentials for the gateway")
    parser.add_argument("--config", type=Path, default=None, help="Gateway config file")
    parser.add_argument("--mailbox", default=None, help="Mailbox to read (default: first allowed account)")
    parser.add_argument("--top", type=int, default=5, help="Number of messages to list")
    args = parser.parse_args()

    success = asyncio.run(verify(args.config, args.mailbox, args.top))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
