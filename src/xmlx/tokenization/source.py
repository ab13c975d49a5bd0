"""Token sources feeding the tree builder.

A token source hands out one token at a time through ``next_token()`` and
reports the end of its input with ``EndOfInput``. ``LxmlTokenSource`` adapts
libxml2 (through an ``lxml.etree.XMLParser`` target) to that contract;
``IterableTokenSource`` replays tokens produced elsewhere.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Union

from lxml import etree

from xmlx.shared.config import SourceConfig
from xmlx.shared.errors import EmptyDocumentError, MalformedInputError
from xmlx.shared.logging import get_logger
from xmlx.tokenization.tokens import (
    END_OF_INPUT,
    CharData,
    EndOfInput,
    EndTag,
    StartTag,
    Token,
    TokenType,
)

DocumentType = Union[str, bytes]

# libxml2 reports running out of input inside an open element with one of
# these codes, depending on its version and where the input stopped. The
# same codes also flag broken tags mid-document, so the position is checked.
_TRUNCATION_ERROR_CODES = frozenset({
    etree.ErrorTypes.ERR_TAG_NOT_FINISHED,
    etree.ErrorTypes.ERR_DOCUMENT_END,
    etree.ErrorTypes.ERR_LTSLASH_REQUIRED,
    etree.ErrorTypes.ERR_GT_REQUIRED,
})


def local_name(name: str) -> str:
    """Strip a Clark-notation namespace (``{uri}local``) from a name."""
    if name.startswith("{"):
        return name.rsplit("}", 1)[-1]
    return name


class TokenSource(ABC):
    """Sequential producer of tokens for one parse."""

    def __init__(self) -> None:
        self.tokens_consumed = 0
        self.truncated = False

    @abstractmethod
    def _next(self) -> Token:
        """Produce the next token, or ``END_OF_INPUT`` once exhausted."""

    def next_token(self) -> Token:
        """Return the next token.

        Raises:
            MalformedInputError: The underlying input could not be lexed
        """
        token = self._next()
        if token.type is not TokenType.END_OF_INPUT:
            self.tokens_consumed += 1
        return token

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token.type is TokenType.END_OF_INPUT:
                return
            yield token


class IterableTokenSource(TokenSource):
    """Token source over an already tokenized stream.

    End-of-input is implied by exhaustion of the iterable; an explicit
    ``EndOfInput`` item ends the stream as well.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        super().__init__()
        self._tokens = iter(tokens)
        self._exhausted = False

    def _next(self) -> Token:
        if self._exhausted:
            return END_OF_INPUT
        token = next(self._tokens, END_OF_INPUT)
        if isinstance(token, EndOfInput):
            self._exhausted = True
        return token


class _TokenCollector:
    """Parser target that records lxml callbacks as tokens.

    Consecutive text callbacks belong to one run of character data and are
    joined; comments and processing instructions end a run without producing
    a token of their own.
    """

    def __init__(self) -> None:
        self.tokens: Deque[Token] = deque()
        self.depth = 0
        self._text: List[str] = []

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        self._flush_text()
        self.depth += 1
        attrs = {local_name(key): value for key, value in attrib.items()}
        self.tokens.append(StartTag(local_name(tag), attrs))

    def end(self, tag: str) -> None:
        self._flush_text()
        self.depth -= 1
        self.tokens.append(EndTag(local_name(tag)))

    def data(self, data: str) -> None:
        self._text.append(data)

    def comment(self, text: str) -> None:
        self._flush_text()

    def pi(self, target: str, data: Optional[str] = None) -> None:
        self._flush_text()

    def close(self) -> None:
        self._flush_text()

    def _flush_text(self) -> None:
        if self._text:
            self.tokens.append(CharData("".join(self._text)))
            self._text.clear()


class LxmlTokenSource(TokenSource):
    """Token source driving libxml2 incrementally through ``feed()``.

    The document is fed in chunks only as tokens are requested, so a consumer
    that stops after the root element closes never sees errors in trailing
    content. A lexer failure is raised only after every token produced before
    it has been handed out.
    """

    def __init__(
        self,
        document: DocumentType,
        config: Optional[SourceConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.config = config or SourceConfig()
        self.logger = get_logger(__name__, correlation_id, "lxml_token_source")

        if isinstance(document, str):
            # The declared encoding no longer describes str input.
            self._data = document.encode("utf-8")
            encoding: Optional[str] = "utf-8"
        elif isinstance(document, (bytes, bytearray)):
            self._data = bytes(document)
            encoding = None
        else:
            raise TypeError(
                f"document must be str or bytes, not {type(document).__name__}"
            )

        self._collector = _TokenCollector()
        self._parser = etree.XMLParser(
            target=self._collector,
            encoding=encoding,
            resolve_entities=self.config.resolve_entities,
            huge_tree=self.config.huge_tree,
            load_dtd=False,
            no_network=True,
        )
        self._offset = 0
        # Nothing to lex; the builder reports the missing root element.
        self._closed = not self._data.strip()
        self._pending_error: Optional[etree.XMLSyntaxError] = None
        self._failed_at_end = False

    def _next(self) -> Token:
        while not self._collector.tokens and not self._closed:
            self._advance()

        if self._collector.tokens:
            return self._collector.tokens.popleft()

        if self._pending_error is not None:
            self._raise_pending()

        return END_OF_INPUT

    def _advance(self) -> None:
        """Feed the next chunk, or close the parser once all input is fed."""
        try:
            if self._offset < len(self._data):
                end = self._offset + self.config.chunk_size
                chunk = self._data[self._offset:end]
                self._offset = end
                self._parser.feed(chunk)
            else:
                self._closed = True
                self._parser.close()
        except etree.XMLSyntaxError as e:
            self._closed = True
            self._pending_error = e
            self._failed_at_end = self._offset >= len(self._data)
            self._collector.close()

    def _raise_pending(self) -> None:
        """Translate the stored lexer failure, or accept it as truncation."""
        error = self._pending_error
        assert error is not None
        line, column = error.position if error.position else (None, None)

        if self._is_truncation(error):
            self._pending_error = None
            self.truncated = True
            self.logger.debug(
                "Input ended inside an open element",
                extra={"open_elements": self._collector.depth, "line": line},
            )
            return

        if error.code == etree.ErrorTypes.ERR_DOCUMENT_EMPTY:
            raise EmptyDocumentError(
                "Document contains no root element", line, column, error.code
            ) from error

        raise MalformedInputError(
            f"Malformed XML: {error.msg}", line, column, error.code
        ) from error

    def _is_truncation(self, error: etree.XMLSyntaxError) -> bool:
        """Check that the lexer failed only because the input ran out.

        The failure must come after all input was fed, inside an open element,
        with one of the premature-end codes. The input must also end outside
        of markup and nothing but whitespace may follow the failing position.
        """
        if not self._failed_at_end or self._collector.depth <= 0:
            return False
        if error.code not in _TRUNCATION_ERROR_CODES:
            return False

        text = self._data.decode("utf-8", errors="replace").rstrip()
        # Cut inside a tag, e.g. "<a></b"
        if "<" in text[text.rfind(">") + 1:]:
            return False

        if not error.position or not error.position[0]:
            return True
        line, column = error.position
        lines = text.split("\n")
        if line != len(lines):
            return line > len(lines)
        return not lines[-1][column:].strip()
