"""Extract naming records from RFC 822 (.eml) message files."""

from __future__ import annotations

import logging
from datetime import datetime
from email import policy
from email.errors import HeaderParseError
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Any

from mailnamer.errors import ValidationError

_MESSAGE_EXTENSIONS = {".eml"}

logger = logging.getLogger(__name__)


def load_record(path: str | Path) -> dict[str, Any]:
    """Read a message file and return its naming properties.

    Headers that are absent or unparsable are left out of the record so the
    missing-property report can name them.
    """
    message_path = Path(path)
    _validate_message_path(message_path)

    try:
        with message_path.open("rb") as handle:
            message = BytesParser(policy=policy.default).parse(handle)
        record = message_record(message)
        record["Size"] = message_path.stat().st_size
    except OSError as exc:
        raise ValidationError(
            what=f"message could not be read: {message_path}",
            why=str(exc),
            remediation="check the file permissions and that the file is not locked",
        ) from exc
    except (HeaderParseError, IndexError, ValueError) as exc:
        raise ValidationError(
            what=f"message headers could not be parsed: {message_path}",
            why=str(exc) or type(exc).__name__,
            remediation="repair or re-export the message with well-formed headers",
        ) from exc
    logger.debug("Loaded %d properties from %s", len(record), message_path)
    return record


def message_record(message: EmailMessage) -> dict[str, Any]:
    """Map message headers onto mail-client style property names."""
    record: dict[str, Any] = {}

    subject = message.get("Subject")
    if subject is not None:
        record["Subject"] = str(subject)

    sender = message.get("From")
    addresses = getattr(sender, "addresses", ()) if sender is not None else ()
    if addresses:
        address = addresses[0]
        record["SenderEmailAddress"] = address.addr_spec
        record["SenderName"] = address.display_name or address.addr_spec
    elif sender is not None and str(sender).strip():
        record["SenderName"] = str(sender).strip()

    for header, name in (("To", "To"), ("Cc", "CC"), ("Message-ID", "MessageID")):
        value = message.get(header)
        if value is not None:
            record[name] = str(value).strip()

    sent_on = _header_datetime(message.get("Date"))
    if sent_on is not None:
        record["SentOn"] = sent_on

    received_time = _received_datetime(message.get_all("Received") or []) or sent_on
    if received_time is not None:
        record["ReceivedTime"] = received_time

    record["AttachmentCount"] = sum(1 for _ in message.iter_attachments())
    return record


def _header_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    parsed = getattr(value, "datetime", None)
    if isinstance(parsed, datetime):
        return parsed
    try:
        return parsedate_to_datetime(str(value))
    except (TypeError, ValueError):
        logger.debug("Unparsable date header: %r", str(value))
        return None


def _received_datetime(received_headers: list[Any]) -> datetime | None:
    """Return the delivery time stamped by the topmost Received header."""
    for header in received_headers:
        _, separator, stamp = str(header).rpartition(";")
        if separator:
            parsed = _header_datetime(stamp.strip())
            if parsed is not None:
                return parsed
    return None


def _validate_message_path(path: Path) -> None:
    if not path.exists():
        raise ValidationError(
            what=f"message not found: {path}",
            why="the provided path does not exist",
            remediation="provide an existing .eml file path",
        )
    if not path.is_file():
        raise ValidationError(
            what=f"message must reference a file: {path}",
            why="directories cannot be archived as messages",
            remediation="point at individual .eml files",
        )
    extension = path.suffix.lower()
    if extension not in _MESSAGE_EXTENSIONS:
        allowed = ", ".join(sorted(_MESSAGE_EXTENSIONS))
        raise ValidationError(
            what=f"unsupported message format '{extension or '<none>'}'.",
            why="mailnamer reads RFC 822 message files only",
            remediation=f"export messages using one of: {allowed}",
        )
