"""Parsing API from simple functions to a configured, reusable parser.

Level 1 functions (``parse``, ``parse_string``, ``parse_file``) return the
root node, or the node found at an optional label path below it. Level 2,
``XMLNodeParser``, holds a configuration and correlation ID across parses and
can return the full ``BuildResult``.
"""

import time
import uuid
from pathlib import Path
from typing import Optional, Sequence, Union

from xmlx.shared import XMLNodeConfig, XMLNodeError, get_logger
from xmlx.tokenization import LxmlTokenSource
from xmlx.tree import BuildResult, Node, NodeBuilder

InputType = Union[str, bytes]
PathType = Union[str, Path]

MS_PER_SECOND = 1000


def select(root: Node, labels: Sequence[str]) -> Optional[Node]:
    """Resolve a label path whose first label names the root itself.

    Args:
        root: Root node of a document
        labels: Root name followed by child names; empty selects the root

    Returns:
        The selected node, or None when the first label is not the root's
        name or a later label is missing
    """
    if not labels:
        return root
    if labels[0] != root.name:
        return None
    return root.get_sub_node(*labels[1:])


def parse(
    document: InputType,
    *labels: str,
    config: Optional[XMLNodeConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[Node]:
    """Parse a document and optionally select a node by label path.

    Args:
        document: XML content as str or bytes
        *labels: Optional path starting with the root element's name
        config: Optional configuration (defaults to ``XMLNodeConfig.default()``)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root node, the node at ``labels``, or None if the path does not
        resolve

    Raises:
        MalformedInputError: The document could not be lexed

    Examples:
        >>> root = parse('<a><b x="1">hi</b><b x="2">yo</b></a>')
        >>> root.get_sub_node("b").data
        'hi'
        >>> parse('<a><b>hi</b></a>', "a", "b").data
        'hi'
        >>> parse('<a><b>hi</b></a>', "z") is None
        True
    """
    return XMLNodeParser(config, correlation_id).parse(document, *labels)


def parse_string(
    xml_string: str,
    *labels: str,
    config: Optional[XMLNodeConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[Node]:
    """Parse XML held in a string. See ``parse``."""
    if not isinstance(xml_string, str):
        raise TypeError(f"xml_string must be str, not {type(xml_string).__name__}")
    return parse(xml_string, *labels, config=config, correlation_id=correlation_id)


def parse_file(
    file_path: PathType,
    *labels: str,
    config: Optional[XMLNodeConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[Node]:
    """Parse an XML file. The file is read as bytes so its declared encoding applies.

    Raises:
        OSError: The file cannot be read
        MalformedInputError: The file content could not be lexed
    """
    return XMLNodeParser(config, correlation_id).parse_file(file_path, *labels)


class XMLNodeParser:
    """Configured parser that can be reused across documents.

    Examples:
        >>> parser = XMLNodeParser(XMLNodeConfig.strict())
        >>> parser.parse_path('<a><b><c>1</c></b></a>', "a/b/c").data
        '1'
        >>> result = parser.parse_with_result('<a><b>1</b></a>')
        >>> result.element_count
        2
    """

    def __init__(
        self,
        config: Optional[XMLNodeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Configuration (defaults to ``XMLNodeConfig.default()``)
            correlation_id: Optional correlation ID; generated when omitted
                and correlation tracking is enabled
        """
        self.config = config or XMLNodeConfig.default()
        if correlation_id is None and self.config.global_.enable_correlation_tracking:
            correlation_id = uuid.uuid4().hex
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_node_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def parse_with_result(self, document: InputType) -> BuildResult:
        """Parse a document and return the tree with diagnostics and metrics.

        Raises:
            MalformedInputError: The document could not be lexed
        """
        start_time = time.time()
        self._parse_count += 1

        self.logger.debug(
            "Starting parse operation",
            extra={
                "input_type": type(document).__name__,
                "content_length": len(document),
                "parse_count": self._parse_count,
            }
        )

        source = LxmlTokenSource(document, self.config.source, self.correlation_id)
        builder = NodeBuilder(self.config.builder, self.correlation_id)
        try:
            result = builder.build(source)
        except XMLNodeError:
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND
            raise

        self._successful_parses += 1
        self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

        self.logger.info(
            "Parse operation completed",
            extra={
                "root": result.node.name if result.node else None,
                "element_count": result.element_count,
                "truncated": result.truncated,
            }
        )
        return result

    def parse(self, document: InputType, *labels: str) -> Optional[Node]:
        """Parse a document and select a node by label path. See ``parse``."""
        result = self.parse_with_result(document)
        return select(result.node, labels) if result.node else None

    def parse_path(self, document: InputType, path: str) -> Optional[Node]:
        """Parse a document and select a node by delimited path such as ``"a/b"``.

        The first segment names the root; empty segments are ignored.
        """
        delimiter = self.config.query.path_delimiter
        labels = [label for label in path.split(delimiter) if label]
        return self.parse(document, *labels)

    def parse_file(self, file_path: PathType, *labels: str) -> Optional[Node]:
        """Parse an XML file and select a node by label path."""
        path = Path(file_path)
        self.logger.debug("Reading XML file", extra={"file_path": str(path)})
        return self.parse(path.read_bytes(), *labels)

    @property
    def statistics(self) -> dict:
        """Counters accumulated over this parser's lifetime."""
        return {
            "parse_count": self._parse_count,
            "successful_parses": self._successful_parses,
            "failed_parses": self._parse_count - self._successful_parses,
            "total_processing_time_ms": self._total_processing_time,
        }
