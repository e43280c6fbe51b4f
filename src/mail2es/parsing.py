"""Email parsing primitives: message tree, part variants, decoding, charsets."""

import codecs
from email import policy
from email.message import Message
from email.parser import BytesParser
from enum import Enum


class Mail2EsError(Exception):
    """Base class for mail2es errors."""


class MessageParseError(Mail2EsError):
    """The input could not be turned into a message."""


class UnsupportedCharsetError(Mail2EsError, LookupError):
    """No codec is available for a part's charset."""

    def __init__(self, charset: str):
        super().__init__(f"charset conversion is not possible from: {charset} to: UTF-8")
        self.charset = charset


class PartKind(Enum):
    """Variant of a node in the MIME tree."""
    CONTAINER = "container"  # message/rfc822 and friends
    PARTIAL = "partial"      # message/partial
    MULTIPART = "multipart"
    LEAF = "leaf"
    UNKNOWN = "unknown"


CONTAINER_TYPES = ("message/rfc822", "message/news", "message/global")
PARTIAL_TYPE = "message/partial"


def parse_message(raw: bytes) -> Message:
    """Parse raw RFC 5322 bytes into a message tree.

    Raises MessageParseError for empty input or when the parser gives up.
    """
    if not raw or not raw.strip():
        raise MessageParseError("empty message")
    try:
        return BytesParser(policy=policy.default).parsebytes(raw)
    except Exception as e:
        raise MessageParseError(f"cannot parse message: {e}") from e


def part_kind(part: Message) -> PartKind:
    """Classify a part into one of the PartKind variants."""
    ct = part.get_content_type()
    maintype = part.get_content_maintype()

    if ct == PARTIAL_TYPE:
        return PartKind.PARTIAL
    if ct in CONTAINER_TYPES:
        return PartKind.CONTAINER if contained_message(part) is not None else PartKind.UNKNOWN
    if maintype == "multipart":
        return PartKind.MULTIPART if part.is_multipart() else PartKind.UNKNOWN
    if maintype == "message" and part.is_multipart():
        # message/delivery-status, message/external-body, ...
        return PartKind.UNKNOWN
    return PartKind.LEAF


def contained_message(part: Message) -> Message | None:
    """Return the message embedded in a message/rfc822 part, if any."""
    payload = part.get_payload()
    if isinstance(payload, list) and payload and isinstance(payload[0], Message):
        return payload[0]
    return None


def child_parts(part: Message) -> list[Message]:
    """Ordered children of a multipart node."""
    payload = part.get_payload()
    if not isinstance(payload, list):
        return []
    return [p for p in payload if isinstance(p, Message)]


def decoded_octets(part: Message) -> bytes:
    """Raw body octets after content-transfer decoding."""
    payload = part.get_payload(decode=True)
    return payload if isinstance(payload, bytes) else b""


def convert_charset(octets: bytes, charset: str) -> str:
    """Decode octets in the named charset to text.

    Bytes that are invalid in the charset become U+FFFD. An unknown charset,
    a codec that is not a text encoding (e.g. "base64"), or one that refuses
    to decode at all (e.g. "undefined", "idna"), raises
    UnsupportedCharsetError.
    """
    try:
        name = codecs.lookup(charset).name
        return octets.decode(name, errors="replace")
    except (LookupError, UnicodeError) as e:
        raise UnsupportedCharsetError(charset) from e
