"""Turn a part's decoded octets into UTF-8 text or base64."""

import base64
import logging
from dataclasses import dataclass
from enum import Enum

from .content_types import ContentType
from .parsing import UnsupportedCharsetError, convert_charset


logger = logging.getLogger(__name__)

# Unlabeled text/plain is usually legacy ASCII; other unlabeled text
# attachments mostly come from Windows-locale tools writing Latin-1.
DEFAULT_PLAIN_CHARSET = "us-ascii"
DEFAULT_TEXT_CHARSET = "iso-8859-1"
FALLBACK_CHARSET = "utf-8"


class Representation(Enum):
    TEXT = "body"
    BINARY = "file"

    @property
    def key(self) -> str:
        """Field name used in the part entry."""
        return self.value


@dataclass(frozen=True)
class NormalizedBody:
    representation: Representation
    value: str


def source_charset(content_type: ContentType) -> str:
    """Declared charset, or the default for this text subtype."""
    if content_type.charset:
        return content_type.charset
    if content_type.is_type("text", "plain"):
        return DEFAULT_PLAIN_CHARSET
    return DEFAULT_TEXT_CHARSET


def normalize_body(octets: bytes, content_type: ContentType) -> NormalizedBody:
    """Normalize a body for the output document.

    text/* parts are converted to text from their (declared or default)
    charset. Everything else is base64-encoded. An unsupported charset is
    logged and the octets are decoded as UTF-8 with replacement characters.
    """
    if not content_type.is_type("text", "*"):
        encoded = base64.b64encode(octets).decode("ascii")
        return NormalizedBody(Representation.BINARY, encoded)

    charset = source_charset(content_type)
    try:
        text = convert_charset(octets, charset)
    except UnsupportedCharsetError as e:
        logger.warning("%s; decoding %s part as %s", e, content_type, FALLBACK_CHARSET)
        text = octets.decode(FALLBACK_CHARSET, errors="replace")
    return NormalizedBody(Representation.TEXT, text)
