"""Node trees for schema-less XML access.

Key Components:
    Node: Generic element with path, predicate and recursive queries
    NodeBuilder: Builds Node trees from token sources
    BuildResult: Built tree with truncation flag, diagnostics and metrics
    split_node, flatten_node: Value-producing tree transformations
"""

from .node import Node
from .builder import BuildResult, NodeBuilder
from .transform import flatten_node, node_facts, split_node

__all__ = [
    "BuildResult",
    "Node",
    "NodeBuilder",
    "flatten_node",
    "node_facts",
    "split_node",
]
