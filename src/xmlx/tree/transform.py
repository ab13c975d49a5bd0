"""Value-producing transformations of node trees: splitting and flattening.

Neither function mutates its input. ``split_node`` returns deep copies and
``flatten_node`` returns a fresh dictionary.
"""

from collections import deque
from typing import Deque, Dict, List, Tuple

from xmlx.tree.node import DEFAULT_SPLIT_DELIMITER, Node

NAME_KEY = "#name"
DATA_KEY = "#data"
ATTR_PREFIX = "#attr."
NODES_PREFIX = "#nodes."


def split_node(
    node: Node, label: str, delimiter: str = DEFAULT_SPLIT_DELIMITER
) -> List[Node]:
    """Split nested repeated elements into one copy of ``node`` each.

    ``label`` names a chain of nested elements, e.g. ``"b.c"`` for every
    ``c`` under every ``b`` child of ``node``. Each leaf at the bottom of the
    chain produces a deep copy of ``node`` in which the ``b`` children are
    replaced by that single leaf, renamed to the last term (``c``).

    The leaves are the element children of the nodes matching the last term;
    a matching node without element children is a leaf itself, so
    ``<a><b><c>1</c></b><b><c>2</c></b></a>`` split on ``"b.c"`` gives two
    copies of ``a`` holding ``<c>1</c>`` and ``<c>2</c>`` respectively.

    Args:
        node: Node to split
        label: Delimited chain of element names
        delimiter: Separator between chain terms

    Returns:
        New nodes in document order of their leaves; ``[node]`` for an
        empty label and an empty list when the chain matches nothing
    """
    if not label:
        return [node]

    terms = label.split(delimiter)

    level = node.nodes
    for term in terms[:-1]:
        level = [child for parent in level if parent.name == term for child in parent.nodes]

    leaves: List[Node] = []
    for parent in level:
        if parent.name != terms[-1]:
            continue
        leaves.extend(parent.nodes if parent.nodes else [parent])

    kept = [child for child in node.nodes if child.name != terms[0]]

    pieces = []
    for leaf in leaves:
        replacement = leaf.clone()
        replacement.name = terms[-1]
        pieces.append(Node(
            name=node.name,
            attrs=dict(node.attrs),
            data=node.data,
            nodes=[child.clone() for child in kept] + [replacement],
            is_invalid=node.is_invalid,
        ))
    return pieces


def node_facts(node: Node) -> Dict[str, str]:
    """A node's own scalar facts: name, data and attributes."""
    facts: Dict[str, str] = {}
    if node.name:
        facts[NAME_KEY] = node.name
    if node.data:
        facts[DATA_KEY] = node.data
    for key, value in node.attrs.items():
        facts[ATTR_PREFIX + key] = value
    return facts


def flatten_node(node: Node) -> Dict[str, str]:
    """Flatten a tree into a single-level mapping with ancestry-encoded keys.

    The node's own facts use the bare keys ``#name``, ``#data`` and
    ``#attr.<name>``. Descendants are visited breadth first and their facts
    are keyed ``#nodes.<child>[.#nodes.<grandchild>...].<fact>``.

    Siblings sharing a name share their keys, so only the last one visited
    survives: ``<a><b>1</b><b>2</b></a>`` maps ``#nodes.b.#data`` to ``"2"``.
    """
    out = node_facts(node)

    queue: Deque[Tuple[str, Node]] = deque(
        (NODES_PREFIX + child.name, child) for child in node.nodes
    )
    while queue:
        prefix, current = queue.popleft()
        for key, value in node_facts(current).items():
            out[f"{prefix}.{key}"] = value
        for child in current.nodes:
            queue.append((f"{prefix}.{NODES_PREFIX}{child.name}", child))

    return out
