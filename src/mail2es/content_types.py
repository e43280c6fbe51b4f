"""Content-type handling: which parts are worth indexing."""

from dataclasses import dataclass, field
from email.message import Message
from email.utils import collapse_rfc2231_value


@dataclass(frozen=True)
class ContentType:
    """A MIME content type with its parameters."""
    maintype: str
    subtype: str
    params: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def parse(cls, value: str) -> "ContentType":
        """Parse a bare "type/subtype" string (parameters are ignored)."""
        ct = value.split(";", 1)[0].strip().lower()
        maintype, _, subtype = ct.partition("/")
        return cls(maintype, subtype)

    @classmethod
    def from_part(cls, part: Message) -> "ContentType":
        """Content type of a parsed part, with its parameters lowercased by name."""
        params = {}
        for key, value in (part.get_params() or [])[1:]:
            params[key.lower()] = collapse_rfc2231_value(value)
        return cls(part.get_content_maintype(), part.get_content_subtype(), params)

    @property
    def charset(self) -> str | None:
        return self.params.get("charset") or None

    def is_type(self, maintype: str, subtype: str) -> bool:
        """Case-insensitive match; subtype "*" matches any subtype."""
        if self.maintype != maintype.lower():
            return False
        return subtype == "*" or self.subtype == subtype.lower()

    def with_type(self, other: "ContentType") -> "ContentType":
        """Same parameters, type/subtype taken from other."""
        return ContentType(other.maintype, other.subtype, dict(self.params))

    def __str__(self) -> str:
        return f"{self.maintype}/{self.subtype}"


def _types(*names: str) -> tuple[ContentType, ...]:
    return tuple(ContentType.parse(n) for n in names)


# File suffixes -> content types seen in the wild for that kind of document.
# The first content type of each row is the canonical one.
FILE_TYPE_MAPPINGS: list[tuple[tuple[str, ...], tuple[ContentType, ...]]] = [
    (("txt",), _types("text/plain", "application/txt")),
    (("html", "htm"), _types("text/html")),
    (("c",), _types("text/x-csrc")),
    (("pdf",), _types("application/pdf", "application/x-pdf", "text/pdf", "text/x-pdf")),
    (("rtf",), _types("application/rtf", "application/x-rtf", "text/rtf", "text/richtext")),
    (("doc",), _types(
        "application/msword",
        "application/x-msword",
        "application/vnd.msword",
        "application/vnd.ms-word",
    )),
    (("docx",), _types("application/vnd.openxmlformats-officedocument.wordprocessingml.document")),
    (("xls",), _types("application/vnd.ms-excel", "application/msexcel", "application/x-msexcel")),
    (("xlsx",), _types("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")),
    (("ppt",), _types(
        "application/vnd.ms-powerpoint",
        "application/mspowerpoint",
        "application/ms-powerpoint",
        "application/x-mspowerpoint",
    )),
    (("pptx",), _types("application/vnd.openxmlformats-officedocument.presentationml.presentation")),
    (("odt",), _types("application/vnd.oasis.opendocument.text")),
    (("ods",), _types("application/vnd.oasis.opendocument.spreadsheet")),
    (("odp",), _types("application/vnd.oasis.opendocument.presentation")),
]

OCTET_STREAM = ContentType("application", "octet-stream")


def content_type_from_filename(filename: str | None) -> ContentType | None:
    """Canonical content type for a filename's suffix, or None if unknown."""
    if not filename or "." not in filename:
        return None
    suffix = filename.rsplit(".", 1)[1].lower()
    for suffixes, types in FILE_TYPE_MAPPINGS:
        if suffix in suffixes:
            return types[0]
    return None


def resolve_content_type(
    content_type: ContentType | None,
    filename: str | None,
) -> ContentType | None:
    """Replace a generic application/octet-stream by the type its filename implies.

    Any other declared type is returned unchanged.
    """
    if content_type is None or content_type != OCTET_STREAM:
        return content_type
    inferred = content_type_from_filename(filename)
    if inferred is None:
        return content_type
    return content_type.with_type(inferred)


def is_whitelisted(content_type: ContentType | None) -> bool:
    """Check a content type against every type in FILE_TYPE_MAPPINGS."""
    if content_type is None:
        return False
    for _, types in FILE_TYPE_MAPPINGS:
        for ct in types:
            if content_type.is_type(ct.maintype, ct.subtype):
                return True
    return False


def is_indexable(content_type: ContentType | None, filename: str | None = None) -> bool:
    """Should a part with this declared content type and filename be indexed?"""
    return is_whitelisted(resolve_content_type(content_type, filename))
