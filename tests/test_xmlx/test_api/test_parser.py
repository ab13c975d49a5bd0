"""Tests for the parsing API."""

import pytest

from xmlx.api import XMLNodeParser, parse, parse_file, parse_string, select
from xmlx.shared import (
    EmptyDocumentError,
    MalformedInputError,
    TruncatedInputError,
    XMLNodeConfig,
)
from xmlx.tree import Node

DOCUMENT = '<a><b x="1">hi</b><b x="2">yo</b><c><d>deep</d></c></a>'


class TestSimpleAPI:
    """Test the level 1 functions."""

    def test_parse_returns_root(self):
        """Test parsing without labels."""
        root = parse(DOCUMENT)
        assert root.name == "a"
        assert [node.name for node in root.nodes] == ["b", "b", "c"]

    def test_parse_with_labels(self):
        """Test the first label names the root."""
        assert parse(DOCUMENT, "a", "c", "d").data == "deep"
        assert parse(DOCUMENT, "a").name == "a"

    def test_parse_root_mismatch(self):
        """Test a first label other than the root name."""
        assert parse(DOCUMENT, "b") is None

    def test_parse_missing_path(self):
        """Test an unresolvable label path."""
        assert parse(DOCUMENT, "a", "z") is None

    def test_parse_bytes(self):
        """Test bytes input."""
        assert parse(b"<a><b>1</b></a>", "a", "b").data == "1"

    def test_whitespace_between_tags(self):
        """Test indentation never populates data."""
        root = parse("<a>\n  <b>x</b>\n</a>")
        assert root.data == ""
        assert root.get_sub_node_data("b") == "x"

    def test_content_after_root_is_ignored(self):
        """Test trailing content is never lexed into the result."""
        assert parse("<a><b>1</b></a><!-- trailing -->") == parse("<a><b>1</b></a>")

    def test_malformed_input(self):
        """Test mismatched tags."""
        with pytest.raises(MalformedInputError):
            parse("<a><b></a>")

    def test_broken_end_tag_is_not_truncation(self):
        """Test a malformed end tag followed by siblings is rejected."""
        with pytest.raises(MalformedInputError):
            parse("<root><item>1</item x><item>2</item></root>")

    def test_empty_input(self):
        """Test input without any element."""
        with pytest.raises(EmptyDocumentError):
            parse("")
        with pytest.raises(EmptyDocumentError):
            parse("   \n")

    def test_truncated_input_tolerated(self):
        """Test a partial tree is returned by default."""
        root = parse("<a><b>hi</b><c>")
        assert root.get_sub_node_data("b") == "hi"
        assert root.get_sub_node("c") is not None

    def test_truncated_input_strict(self):
        """Test the strict preset rejects truncation."""
        with pytest.raises(TruncatedInputError):
            parse("<a><b>hi</b><c>", config=XMLNodeConfig.strict())

    def test_parse_string_rejects_bytes(self):
        """Test parse_string input type."""
        with pytest.raises(TypeError, match="xml_string must be str"):
            parse_string(b"<a/>")  # type: ignore

    def test_parse_string(self):
        """Test string parsing with labels."""
        assert parse_string("<a><b>1</b></a>", "a", "b").data == "1"

    def test_parse_file(self, tmp_path):
        """Test file parsing honours the declared encoding."""
        path = tmp_path / "doc.xml"
        path.write_bytes(
            '<?xml version="1.0" encoding="ISO-8859-1"?><a><b>caf\xe9</b></a>'.encode("latin-1")
        )
        assert parse_file(path, "a", "b").data == "caf\xe9"
        assert parse_file(str(path)).name == "a"

    def test_parse_file_missing(self, tmp_path):
        """Test unreadable files."""
        with pytest.raises(OSError):
            parse_file(tmp_path / "missing.xml")


class TestSelect:
    """Test root-anchored label selection."""

    def test_select(self):
        """Test the root name must lead the path."""
        root = Node("a", nodes=[Node("b", data="1")])
        assert select(root, []) is root
        assert select(root, ["a"]) is root
        assert select(root, ["a", "b"]).data == "1"
        assert select(root, ["b"]) is None


class TestXMLNodeParser:
    """Test the configured parser."""

    def test_parse_with_result(self):
        """Test results carry metrics and diagnostics."""
        result = XMLNodeParser().parse_with_result(DOCUMENT)

        assert result.node.name == "a"
        assert result.element_count == 5
        assert result.metrics.max_depth == 3
        assert result.truncated is False
        assert not result.has_warnings()

    def test_truncation_reported_in_result(self):
        """Test truncated parses carry a warning."""
        result = XMLNodeParser().parse_with_result("<a><b>")
        assert result.truncated is True
        assert result.has_warnings()

    def test_correlation_id(self):
        """Test correlation IDs are generated or kept."""
        assert XMLNodeParser(correlation_id="req-7").correlation_id == "req-7"
        assert XMLNodeParser().correlation_id

        config = XMLNodeConfig().override(global__enable_correlation_tracking=False)
        assert XMLNodeParser(config).correlation_id is None

    def test_correlation_id_in_result(self):
        """Test results carry the parser's correlation ID."""
        result = XMLNodeParser(correlation_id="req-8").parse_with_result("<a/>")
        assert result.correlation_id == "req-8"

    def test_parse_path(self):
        """Test delimited path selection."""
        parser = XMLNodeParser()
        assert parser.parse_path(DOCUMENT, "a/c/d").data == "deep"
        assert parser.parse_path(DOCUMENT, "/a/c/").name == "c"
        assert parser.parse_path(DOCUMENT, "x/c") is None

    def test_parse_path_custom_delimiter(self):
        """Test the configured path delimiter."""
        config = XMLNodeConfig().override(query__path_delimiter=":")
        assert XMLNodeParser(config).parse_path(DOCUMENT, "a:c:d").data == "deep"

    def test_statistics(self):
        """Test counters across successful and failed parses."""
        parser = XMLNodeParser()
        parser.parse("<a/>")
        with pytest.raises(MalformedInputError):
            parser.parse("<a><b></a>")

        stats = parser.statistics
        assert stats["parse_count"] == 2
        assert stats["successful_parses"] == 1
        assert stats["failed_parses"] == 1
        assert stats["total_processing_time_ms"] >= 0

    def test_chunked_parse_matches_single_feed(self):
        """Test the feed chunk size does not change the tree."""
        config = XMLNodeConfig().override(source__chunk_size=2)
        assert XMLNodeParser(config).parse(DOCUMENT) == parse(DOCUMENT)
