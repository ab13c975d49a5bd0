"""Tests for token sources."""

import pytest

from xmlx.shared import EmptyDocumentError, MalformedInputError, SourceConfig
from xmlx.tokenization import (
    END_OF_INPUT,
    CharData,
    EndOfInput,
    EndTag,
    IterableTokenSource,
    LxmlTokenSource,
    StartTag,
    TokenType,
    local_name,
)


def collect(source):
    """Drain a source into a list, excluding the end marker."""
    return list(source)


class TestLocalName:
    """Test namespace stripping."""

    @pytest.mark.parametrize("name,expected", [
        ("a", "a"),
        ("{urn:x}a", "a"),
        ("{http://example.com/ns}item", "item"),
    ])
    def test_local_name(self, name, expected):
        """Test Clark notation is reduced to the local part."""
        assert local_name(name) == expected


class TestIterableTokenSource:
    """Test replaying pre-built token streams."""

    def test_exhaustion_reports_end_of_input(self):
        """Test end of input after the last token."""
        source = IterableTokenSource([StartTag("a")])
        assert source.next_token() == StartTag("a")
        assert source.next_token().type is TokenType.END_OF_INPUT
        assert source.next_token().type is TokenType.END_OF_INPUT

    def test_explicit_end_marker_stops_stream(self):
        """Test tokens after an EndOfInput item are never produced."""
        source = IterableTokenSource([StartTag("a"), END_OF_INPUT, StartTag("b")])
        assert collect(source) == [StartTag("a")]
        assert isinstance(source.next_token(), EndOfInput)

    def test_tokens_consumed_excludes_end_marker(self):
        """Test consumption counter."""
        source = IterableTokenSource([StartTag("a"), EndTag("a")])
        collect(source)
        source.next_token()
        assert source.tokens_consumed == 2


class TestLxmlTokenSource:
    """Test token production from XML text through lxml."""

    def test_basic_document(self):
        """Test start, data and end tokens in document order."""
        source = LxmlTokenSource('<a x="1"><b>hi</b></a>')
        assert collect(source) == [
            StartTag("a", {"x": "1"}),
            StartTag("b"),
            CharData("hi"),
            EndTag("b"),
            EndTag("a"),
        ]
        assert source.truncated is False

    def test_empty_element_produces_start_and_end(self):
        """Test self-closing tags."""
        assert collect(LxmlTokenSource("<a/>")) == [StartTag("a"), EndTag("a")]

    def test_entities_are_merged_into_one_run(self):
        """Test character references do not split character data."""
        tokens = collect(LxmlTokenSource("<a>x &amp; y &#65;</a>"))
        assert tokens[1] == CharData("x & y A")

    def test_cdata_is_character_data(self):
        """Test CDATA sections are delivered as text."""
        tokens = collect(LxmlTokenSource("<a><![CDATA[<raw> & ]]></a>"))
        assert tokens[1] == CharData("<raw> & ")

    def test_comment_ends_text_run(self):
        """Test comments split the surrounding text."""
        tokens = collect(LxmlTokenSource("<a>one<!-- note -->two</a>"))
        assert tokens == [
            StartTag("a"),
            CharData("one"),
            CharData("two"),
            EndTag("a"),
        ]

    def test_processing_instruction_is_skipped(self):
        """Test processing instructions produce no tokens."""
        tokens = collect(LxmlTokenSource('<?xml version="1.0"?><a><?pi x?></a>'))
        assert tokens == [StartTag("a"), EndTag("a")]

    def test_namespaces_reduced_to_local_names(self):
        """Test prefixed element and attribute names."""
        tokens = collect(LxmlTokenSource('<n:a xmlns:n="urn:x" n:id="7" k="v"/>'))
        assert tokens[0] == StartTag("a", {"id": "7", "k": "v"})
        assert tokens[1] == EndTag("a")

    def test_small_chunks_join_text(self):
        """Test text split across feed chunks arrives as one run."""
        source = LxmlTokenSource(
            "<a><b>hello world</b></a>", SourceConfig(chunk_size=3)
        )
        assert CharData("hello world") in collect(source)

    def test_bytes_use_declared_encoding(self):
        """Test bytes input honours the XML declaration."""
        document = '<?xml version="1.0" encoding="ISO-8859-1"?><a>caf\xe9</a>'
        tokens = collect(LxmlTokenSource(document.encode("latin-1")))
        assert tokens[1] == CharData("caf\xe9")

    def test_str_input_with_declaration(self):
        """Test str input carrying an encoding declaration."""
        tokens = collect(LxmlTokenSource('<?xml version="1.0" encoding="UTF-8"?><a>\xe9</a>'))
        assert tokens[1] == CharData("\xe9")

    def test_truncated_input_ends_stream(self):
        """Test input ending inside open elements is reported as truncation."""
        source = LxmlTokenSource("<a><b>hi</b><c>")
        assert collect(source) == [
            StartTag("a"),
            StartTag("b"),
            CharData("hi"),
            EndTag("b"),
            StartTag("c"),
        ]
        assert source.truncated is True

    def test_truncated_multiline_input(self):
        """Test truncation after indented content on several lines."""
        source = LxmlTokenSource("<a>\n  <b>hi</b>\n  <c>text")
        tokens = collect(source)
        assert tokens[-1] == CharData("text")
        assert source.truncated is True

    @pytest.mark.parametrize("document", [
        "<root><item>1</item x><item>2</item></root>",
        "<a><b>t</b junk>more</a>",
        "<a></a b><c/>",
        "<a>\n<b>1</b x>\n<b>2</b>\n</a>",
    ])
    def test_broken_end_tag_mid_document_is_malformed(self, document):
        """Test a broken tag followed by more content is never truncation."""
        source = LxmlTokenSource(document)
        with pytest.raises(MalformedInputError):
            collect(source)
        assert source.truncated is False

    def test_input_cut_inside_end_tag_is_malformed(self):
        """Test input ending within markup."""
        with pytest.raises(MalformedInputError):
            collect(LxmlTokenSource("<a></b"))

    def test_broken_end_tag_in_later_chunk_is_malformed(self):
        """Test chunked feeding does not hide a mid-document failure."""
        source = LxmlTokenSource(
            "<root><item>1</item x><item>2</item></root>", SourceConfig(chunk_size=4)
        )
        with pytest.raises(MalformedInputError):
            collect(source)

    def test_malformed_input_raises_after_buffered_tokens(self):
        """Test tokens before a lexer failure are still delivered."""
        source = LxmlTokenSource("<a><b></a>")
        tokens = []
        with pytest.raises(MalformedInputError) as exc_info:
            for token in source:
                tokens.append(token)

        assert tokens[:2] == [StartTag("a"), StartTag("b")]
        assert exc_info.value.line is not None
        assert exc_info.value.position["line"] == exc_info.value.line

    def test_blank_input_ends_immediately(self):
        """Test whitespace-only input has no tokens and no error."""
        source = LxmlTokenSource("  \n ")
        assert collect(source) == []
        assert source.truncated is False

    def test_text_without_root_is_rejected(self):
        """Test content that never opens an element."""
        with pytest.raises(MalformedInputError):
            collect(LxmlTokenSource("not xml"))

    def test_consumer_stopping_early_never_sees_trailing_errors(self):
        """Test lexing is driven by demand."""
        source = LxmlTokenSource("<a/>", SourceConfig(chunk_size=1))
        assert source.next_token() == StartTag("a")
        assert source.tokens_consumed == 1

    def test_unsupported_input_type(self):
        """Test only str and bytes are accepted."""
        with pytest.raises(TypeError, match="document must be str or bytes"):
            LxmlTokenSource(42)  # type: ignore

    def test_empty_document_error_is_malformed_input(self):
        """Test exception hierarchy used by callers catching lexer failures."""
        assert issubclass(EmptyDocumentError, MalformedInputError)
