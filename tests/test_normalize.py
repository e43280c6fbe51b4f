"""Tests for body normalization."""

import base64
import logging

import pytest

from mail2es.content_types import ContentType
from mail2es.normalize import Representation, normalize_body, source_charset
from mail2es.parsing import UnsupportedCharsetError, convert_charset


def ct(value: str, **params: str) -> ContentType:
    parsed = ContentType.parse(value)
    return ContentType(parsed.maintype, parsed.subtype, params)


class TestSourceCharset:
    def test_declared(self):
        assert source_charset(ct("text/plain", charset="utf-8")) == "utf-8"

    def test_plain_defaults_to_ascii(self):
        assert source_charset(ct("text/plain")) == "us-ascii"

    def test_other_text_defaults_to_latin1(self):
        assert source_charset(ct("text/html")) == "iso-8859-1"
        assert source_charset(ct("text/x-csrc")) == "iso-8859-1"

    def test_empty_charset_param_uses_default(self):
        assert source_charset(ct("text/html", charset="")) == "iso-8859-1"


class TestConvertCharset:
    def test_utf8(self):
        assert convert_charset("café".encode("utf-8"), "utf-8") == "café"

    def test_invalid_bytes_replaced(self):
        assert convert_charset(b"caf\xe9", "us-ascii") == "caf\ufffd"

    def test_unknown_charset(self):
        with pytest.raises(UnsupportedCharsetError) as exc_info:
            convert_charset(b"hello", "x-no-such-charset")
        assert exc_info.value.charset == "x-no-such-charset"
        assert isinstance(exc_info.value, LookupError)

    @pytest.mark.parametrize("charset", ["undefined", "idna"])
    def test_codec_that_refuses_to_decode(self, charset):
        with pytest.raises(UnsupportedCharsetError) as exc_info:
            convert_charset(b"odd", charset)
        assert exc_info.value.charset == charset

    def test_non_text_codec(self):
        with pytest.raises(UnsupportedCharsetError):
            convert_charset(b"aGVsbG8=", "base64")


class TestNormalizeBody:
    def test_plain_ascii_without_charset(self):
        octets = b"Hello, world!\nSecond line."
        body = normalize_body(octets, ct("text/plain"))
        assert body.representation is Representation.TEXT
        assert body.representation.key == "body"
        assert body.value.encode("utf-8") == octets

    def test_html_latin1_without_charset(self):
        octets = b"<p>Caf\xe9 cr\xe8me br\xfbl\xe9e</p>"
        body = normalize_body(octets, ct("text/html"))
        assert body.representation is Representation.TEXT
        assert body.value == "<p>Café crème brûlée</p>"
        assert body.value.encode("iso-8859-1") == octets

    def test_declared_charset(self):
        octets = "Grüße".encode("utf-8")
        body = normalize_body(octets, ct("text/plain", charset="UTF-8"))
        assert body.value == "Grüße"

    def test_binary_is_base64(self):
        octets = bytes(range(256))
        body = normalize_body(octets, ct("image/png"))
        assert body.representation is Representation.BINARY
        assert body.representation.key == "file"
        assert "\n" not in body.value
        assert base64.b64decode(body.value, validate=True) == octets

    def test_empty_binary(self):
        body = normalize_body(b"", ct("application/pdf"))
        assert body.value == ""

    def test_unsupported_charset_falls_back(self, caplog):
        octets = "naïve".encode("utf-8")
        with caplog.at_level(logging.WARNING, logger="mail2es"):
            body = normalize_body(octets, ct("text/plain", charset="x-no-such-charset"))
        assert body.representation is Representation.TEXT
        assert body.value == "naïve"
        assert "x-no-such-charset" in caplog.text
