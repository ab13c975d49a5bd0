"""xmlx: schema-less XML access through generic node trees.

Documents are parsed into ``Node`` trees which support first-match path
descent, predicate search among siblings, recursive search, splitting of
nested repeated elements and flattening into a single-level mapping.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - XMLNodeParser class
- Level 3: Custom token sources - NodeBuilder with any TokenSource
"""

__version__ = "0.1.0"
__author__ = "xmlx developers"

from .api import XMLNodeParser, parse, parse_file, parse_string, select
from .shared.config import XMLNodeConfig
from .shared.errors import (
    EmptyDocumentError,
    MalformedInputError,
    TruncatedInputError,
    XMLNodeError,
)
from .tree import BuildResult, Node, NodeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",
    "select",

    # Level 2: Configured parser
    "XMLNodeParser",
    "XMLNodeConfig",

    # Level 3: Tree construction
    "NodeBuilder",
    "BuildResult",
    "Node",

    # Errors
    "XMLNodeError",
    "MalformedInputError",
    "EmptyDocumentError",
    "TruncatedInputError",
]
