"""Tokenization layer for XML node tree construction.

Lexing itself is delegated to libxml2 through lxml; this package reduces its
callbacks to the four token kinds the tree builder consumes.

Key Components:
    TokenSource: Abstract sequential token producer
    LxmlTokenSource: Token source backed by an lxml parser target
    IterableTokenSource: Token source over a pre-built token sequence
    Token, StartTag, EndTag, CharData, EndOfInput: Token kinds
"""

from .tokens import (
    END_OF_INPUT,
    CharData,
    EndOfInput,
    EndTag,
    StartTag,
    Token,
    TokenType,
)
from .source import (
    IterableTokenSource,
    LxmlTokenSource,
    TokenSource,
    local_name,
)

__all__ = [
    "END_OF_INPUT",
    "CharData",
    "EndOfInput",
    "EndTag",
    "IterableTokenSource",
    "LxmlTokenSource",
    "StartTag",
    "Token",
    "TokenSource",
    "TokenType",
    "local_name",
]
