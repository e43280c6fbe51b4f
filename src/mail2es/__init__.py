"""Convert an email message into a JSON document for Elasticsearch."""

from .config import Config, ConfigError, load_config
from .content_types import ContentType, content_type_from_filename, is_indexable, resolve_content_type
from .document import assemble_header, build_document, finalize, mail_to_document, to_json
from .normalize import NormalizedBody, Representation, normalize_body
from .parsing import (
    Mail2EsError,
    MessageParseError,
    PartKind,
    UnsupportedCharsetError,
    parse_message,
)
from .walker import TraversalState, TreeWalker

__all__ = [
    "Config",
    "ConfigError",
    "ContentType",
    "Mail2EsError",
    "MessageParseError",
    "NormalizedBody",
    "PartKind",
    "Representation",
    "TraversalState",
    "TreeWalker",
    "UnsupportedCharsetError",
    "assemble_header",
    "build_document",
    "content_type_from_filename",
    "finalize",
    "is_indexable",
    "load_config",
    "mail_to_document",
    "normalize_body",
    "parse_message",
    "resolve_content_type",
    "to_json",
]
