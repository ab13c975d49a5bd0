"""Exception hierarchy for XML node tree construction.

Only tree construction raises. Every query over a built tree is total and
reports absence through ``None``, an empty string, or the invalid sentinel node.
"""

from typing import Optional


class XMLNodeError(Exception):
    """Base exception for all xmlx errors."""


class MalformedInputError(XMLNodeError):
    """Raised when the token source reports a genuine read or lex failure."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
        self.code = code

    @property
    def position(self) -> Optional[dict]:
        """Position of the failure as a ``{"line", "column"}`` mapping."""
        if self.line is None:
            return None
        return {"line": self.line, "column": self.column or 0}


class EmptyDocumentError(MalformedInputError):
    """Raised when the input ends before any root element was opened."""


class TruncatedInputError(MalformedInputError):
    """Raised for a truncated document when truncation is not tolerated."""
