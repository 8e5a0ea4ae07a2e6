"""Map request fields to provider models: recipient lists, attachments, date filters."""

import base64
import binascii
from datetime import datetime, timezone
from typing import Iterable, Optional

from graphlinker.errors import AttachmentDecodeError
from graphlinker.mail_provider.graph_models import OutgoingAttachment

RECIPIENT_SEPARATOR = ";"


def split_recipients(raw: Optional[str]) -> list[str]:
    """Split a `;`-separated address list; entries are trimmed and empties dropped."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(RECIPIENT_SEPARATOR) if part.strip()]


def clean_recipients(addresses: Optional[Iterable[str]]) -> list[str]:
    """Drop None, empty and whitespace-only addresses; trim the rest."""
    if not addresses:
        return []
    return [a.strip() for a in addresses if a and a.strip()]


def decode_attachment(name: str, content_type: str, base64_content: str) -> OutgoingAttachment:
    """Decode a base64 attachment payload. Raises AttachmentDecodeError on malformed input."""
    # Line breaks and spaces (MIME-wrapped base64) are ignored; other stray characters are not
    compact = "".join((base64_content or "").split())
    try:
        content = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentDecodeError(name) from e
    return OutgoingAttachment(name=name, contentType=content_type, content=content)


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def graph_datetime_literal(value: datetime) -> str:
    """Format a datetime as an OData DateTimeOffset literal in UTC (e.g. 2024-05-01T08:00:00Z)."""
    return to_utc(value).isoformat().replace("+00:00", "Z")


def received_since_filter(value: datetime) -> str:
    """$filter expression for messages received at or after `value` (inclusive)."""
    return f"receivedDateTime ge {graph_datetime_literal(value)}"


def parse_graph_datetime(s: Optional[str]) -> Optional[datetime]:
    if not s:
        return None
    try:
        return to_utc(datetime.fromisoformat(s.replace("Z", "+00:00")))
    except (ValueError, TypeError):
        return None
