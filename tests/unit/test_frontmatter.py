"""Test transport decoding and front matter splitting."""

import base64

import pytest

from digital_catalog.catalog.frontmatter import (
    decode_transport,
    parse_chapter,
    split_front_matter,
)
from digital_catalog.core.errors import ContentDecodeError


def _b64(text: str) -> bytes:
    return base64.b64encode(text.encode("utf-8"))


class TestDecodeTransport:
    def test_decodes_base64_utf8(self):
        assert decode_transport(_b64("héllo")) == "héllo"

    def test_accepts_str_input(self):
        assert decode_transport(_b64("abc").decode("ascii")) == "abc"

    def test_invalid_base64_raises(self):
        with pytest.raises(ContentDecodeError):
            decode_transport(b"not base64!!")

    def test_invalid_utf8_raises(self):
        with pytest.raises(ContentDecodeError):
            decode_transport(base64.b64encode(b"\xff\xfe\xfa"))


class TestSplitFrontMatter:
    def test_metadata_and_body(self):
        meta, body = split_front_matter("---\ntitle: Setup\norder: 3\n---\n# Body\n")
        assert meta == {"title": "Setup", "order": 3}
        assert body == "# Body\n"

    def test_no_front_matter_returns_whole_text(self):
        meta, body = split_front_matter("# Just markdown\n")
        assert meta == {}
        assert body == "# Just markdown\n"

    def test_empty_front_matter(self):
        meta, body = split_front_matter("---\n---\nbody")
        assert meta == {}
        assert body == "body"

    def test_unclosed_delimiter_is_body(self):
        text = "---\ntitle: X\nno closing"
        meta, body = split_front_matter(text)
        assert meta == {}
        assert body == text

    def test_crlf_line_endings(self):
        meta, body = split_front_matter("---\r\ntitle: Win\r\n---\r\nbody\r\n")
        assert meta == {"title": "Win"}
        assert body == "body\r\n"

    def test_horizontal_rule_in_body_is_kept(self):
        meta, body = split_front_matter("---\ntitle: A\n---\nabove\n---\nbelow\n")
        assert meta == {"title": "A"}
        assert body == "above\n---\nbelow\n"

    def test_malformed_yaml_raises(self):
        with pytest.raises(ContentDecodeError, match="Malformed"):
            split_front_matter("---\ntitle: [unclosed\n---\nbody")

    def test_non_mapping_raises(self):
        with pytest.raises(ContentDecodeError, match="mapping"):
            split_front_matter("---\n- a\n- b\n---\nbody")


class TestParseChapter:
    def test_attaches_path_and_fields(self):
        parsed = parse_chapter(
            "chapter-2.md", _b64("---\ntitle: Auth\norder: 3\nseo: x\n---\ntext")
        )
        assert parsed.path == "chapter-2.md"
        assert parsed.title == "Auth"
        assert parsed.order == 3
        assert parsed.metadata["seo"] == "x"
        assert parsed.body == "text"

    def test_missing_title_and_order(self):
        parsed = parse_chapter("introduction.md", _b64("plain"))
        assert parsed.title is None
        assert parsed.order is None
        assert parsed.body == "plain"

    def test_non_numeric_order_ignored(self):
        parsed = parse_chapter("chapter-1.md", _b64("---\norder: first\n---\n"))
        assert parsed.order is None
