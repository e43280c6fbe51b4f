"""Build the JSON document indexed for one message."""

import json
from datetime import timezone
from email.message import Message
from email.utils import parsedate_to_datetime

from .config import Config
from .parsing import parse_message
from .walker import Trace, TraversalState, TreeWalker


RECIPIENT_HEADERS = ("To", "Cc", "Bcc")


def _header(message: Message, name: str):
    """Header value, or None if absent or too broken for the header parser."""
    try:
        return message.get(name)
    except (TypeError, ValueError, IndexError):
        return None


def _addresses(header) -> list[str]:
    return [str(addr) for addr in header.addresses]


def get_sender(message: Message) -> str | None:
    """First From address, rendered as "Name <addr>"."""
    header = _header(message, "From")
    if header is None:
        return None
    addresses = _addresses(header)
    return addresses[0] if addresses else None


def get_recipients(message: Message) -> list[str]:
    """All To, Cc and Bcc addresses, in header order."""
    recipients = []
    for name in RECIPIENT_HEADERS:
        try:
            headers = message.get_all(name) or []
        except (TypeError, ValueError, IndexError):
            continue
        for header in headers:
            recipients.extend(_addresses(header))
    return recipients


def get_date(message: Message, date_format: str = "timestamp") -> int | str | None:
    """Date header as epoch seconds or as its text; None if missing or unparsable."""
    header = _header(message, "Date")
    if header is None:
        return None
    text = str(header).strip()
    try:
        dt = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    if dt is None:
        return None
    if date_format == "string":
        return text
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def assemble_header(message: Message, date_format: str = "timestamp") -> dict:
    """Start a document with the message's from/to/subject/date.

    Fields that are missing are left out rather than set to empty values.
    """
    document: dict = {}

    sender = get_sender(message)
    if sender is not None:
        document["from"] = sender

    recipients = get_recipients(message)
    if recipients:
        document["to"] = recipients

    subject = _header(message, "Subject")
    if subject is not None:
        document["subject"] = str(subject)

    date = get_date(message, date_format)
    if date is not None:
        document["date"] = date

    return document


def finalize(document: dict) -> dict:
    """Hand the document over for serialization. It must not be mutated afterwards."""
    return document


def to_json(document: dict, pretty: bool = True) -> str:
    """Serialize in insertion order, keeping non-ASCII text as is."""
    if pretty:
        return json.dumps(document, indent=2, ensure_ascii=False)
    return json.dumps(document, ensure_ascii=False)


def build_document(
    message: Message,
    config: Config | None = None,
    trace: Trace | None = None,
) -> dict:
    """Header fields plus one entry per indexable part."""
    config = config or Config()
    document = assemble_header(message, config.date_format)
    walker = TreeWalker(config, trace)
    walker.walk(document, message, None, TraversalState())
    return finalize(document)


def mail_to_document(
    raw: bytes,
    config: Config | None = None,
    trace: Trace | None = None,
) -> dict:
    """Parse raw message bytes and build its document.

    Raises MessageParseError if the bytes are not a message.
    """
    return build_document(parse_message(raw), config, trace)
