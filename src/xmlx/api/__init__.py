"""Public parsing API for xmlx."""

from .parser import (
    XMLNodeParser,
    parse,
    parse_file,
    parse_string,
    select,
)

__all__ = [
    "XMLNodeParser",
    "parse",
    "parse_file",
    "parse_string",
    "select",
]
