"""Abstract XML tokens consumed by the tree builder."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict


class TokenType(Enum):
    """Token kinds the tree builder understands."""

    START_TAG = auto()      # Opening tag with its attributes
    END_TAG = auto()        # Closing tag
    CHAR_DATA = auto()      # Character content between tags
    END_OF_INPUT = auto()   # Source exhausted, possibly before the root closed


class Token:
    """Base class for tokens. Concrete tokens fix ``type`` through their class."""

    @property
    def type(self) -> TokenType:
        raise NotImplementedError


@dataclass(frozen=True)
class StartTag(Token):
    """Start tag with local name and attributes."""

    name: str
    attrs: Dict[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Start tag name cannot be empty")

    @property
    def type(self) -> TokenType:
        return TokenType.START_TAG


@dataclass(frozen=True)
class EndTag(Token):
    """End tag with local name."""

    name: str

    @property
    def type(self) -> TokenType:
        return TokenType.END_TAG


@dataclass(frozen=True)
class CharData(Token):
    """A contiguous run of character data."""

    text: str

    @property
    def type(self) -> TokenType:
        return TokenType.CHAR_DATA

    @property
    def is_blank(self) -> bool:
        """Whitespace-only text, which never populates node data."""
        return not self.text.strip()


@dataclass(frozen=True)
class EndOfInput(Token):
    """Marker returned once the source is exhausted."""

    @property
    def type(self) -> TokenType:
        return TokenType.END_OF_INPUT


END_OF_INPUT = EndOfInput()
