"""Tree construction from token streams.

This module turns a flat stream of start-tag, end-tag and character-data
tokens into a ``Node`` tree, tolerating input that ends before the root
element closes.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from xmlx.shared import (
    BuilderConfig,
    BuildMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
    EmptyDocumentError,
    MalformedInputError,
    TruncatedInputError,
    get_logger,
)
from xmlx.tokenization import StartTag, TokenSource, TokenType
from xmlx.tree.node import Node


@dataclass
class BuildResult:
    """Result of building a tree, with diagnostics and metrics."""

    node: Optional[Node] = None
    truncated: bool = False
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: BuildMetrics = field(default_factory=BuildMetrics)
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Number of elements in the built tree."""
        return self.metrics.elements_built

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_warnings(self) -> bool:
        """Check if result contains any warning diagnostics."""
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the build."""
        return {
            "root": self.node.name if self.node else None,
            "truncated": self.truncated,
            "element_count": self.element_count,
            "max_depth": self.metrics.max_depth,
            "tokens_consumed": self.metrics.tokens_consumed,
            "processing_time_ms": self.metrics.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


class _Frame:
    """An element under construction and its same-name nesting balance."""

    __slots__ = ("node", "balance")

    def __init__(self, node: Node) -> None:
        self.node = node
        self.balance = 1


class NodeBuilder:
    """Builds ``Node`` trees from token sources.

    A start tag carrying the same name as the element under construction is
    counted as a deeper level of that element rather than opening a child;
    the element closes once as many matching end tags have been seen.
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Builder configuration (defaults to tolerant)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or BuilderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "node_builder")

        self._elements_built = 0
        self._max_depth = 0
        self._truncated = False

    def build(self, source: TokenSource) -> BuildResult:
        """Build the tree of the first root element in ``source``.

        Tokens before the first start tag are skipped.

        Args:
            source: Token source positioned at the start of a document

        Returns:
            BuildResult holding the root node and build statistics

        Raises:
            EmptyDocumentError: The source ended before any start tag
            TruncatedInputError: The source ended inside the root element and
                truncation is not tolerated
            MalformedInputError: The source failed to lex its input
        """
        started = time.time()
        result = BuildResult(correlation_id=self.correlation_id)

        start = self._first_start_tag(source)
        if start is None:
            raise EmptyDocumentError("Document contains no root element")

        self.logger.debug("Starting tree building", extra={"root": start.name})

        try:
            result.node = self.build_node(source, start)
        except MalformedInputError:
            self.logger.error(
                "Tree building failed",
                extra={
                    "root": start.name,
                    "tokens_consumed": source.tokens_consumed,
                    "elements_built": self._elements_built,
                }
            )
            raise

        result.truncated = self._truncated or source.truncated
        result.metrics = BuildMetrics(
            processing_time_ms=(time.time() - started) * 1000,
            tokens_consumed=source.tokens_consumed,
            elements_built=self._elements_built,
            max_depth=self._max_depth,
        )

        if result.truncated:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Input ended before the root element was closed",
                "node_builder",
                details={"root": start.name, "elements_built": self._elements_built},
            )

        self.logger.debug(
            "Tree building completed",
            extra={
                "element_count": result.element_count,
                "tokens_consumed": result.metrics.tokens_consumed,
                "truncated": result.truncated,
            }
        )
        return result

    def build_node(self, source: TokenSource, start: StartTag) -> Node:
        """Consume tokens up to the end tag matching ``start``.

        Args:
            source: Token source positioned just after ``start``
            start: The already consumed start tag of the element to build

        Returns:
            The element with its attributes, data and children. If the source
            ends first, the partially populated element is returned.
        """
        self._reset_state()

        root = self._new_node(start)
        stack = [_Frame(root)]
        self._enter(1)

        while stack:
            token = source.next_token()
            kind = token.type

            if kind is TokenType.END_OF_INPUT:
                self._handle_end_of_input(stack)
                break

            frame = stack[-1]

            if kind is TokenType.START_TAG:
                if token.name == frame.node.name:
                    frame.balance += 1
                    continue
                child = self._new_node(token)
                frame.node.nodes.append(child)
                stack.append(_Frame(child))
                self._enter(len(stack))

            elif kind is TokenType.CHAR_DATA:
                if not token.is_blank:
                    frame.node.data = token.text

            elif kind is TokenType.END_TAG:
                if token.name == frame.node.name:
                    frame.balance -= 1
                    if frame.balance == 0:
                        stack.pop()

        return root

    def _reset_state(self) -> None:
        """Reset internal state for new tree building operation."""
        self._elements_built = 0
        self._max_depth = 0
        self._truncated = False

    def _first_start_tag(self, source: TokenSource) -> Optional[StartTag]:
        for token in source:
            if token.type is TokenType.START_TAG:
                return token
        return None

    def _new_node(self, start: StartTag) -> Node:
        self._elements_built += 1
        return Node(name=start.name, attrs=dict(start.attrs))

    def _enter(self, depth: int) -> None:
        """Track nesting depth and enforce the configured limit."""
        if depth > self._max_depth:
            self._max_depth = depth
        if self.config.max_depth is not None and depth > self.config.max_depth:
            raise MalformedInputError(
                f"Element nesting exceeds max_depth ({self.config.max_depth})"
            )

    def _handle_end_of_input(self, stack: List[_Frame]) -> None:
        self._truncated = True
        open_elements = [frame.node.name for frame in stack]
        if not self.config.tolerate_truncation:
            raise TruncatedInputError(
                f"Input ended inside <{open_elements[-1]}> "
                f"({len(open_elements)} open elements)"
            )
        self.logger.warning(
            "Input ended before all elements were closed",
            extra={"open_elements": open_elements}
        )
