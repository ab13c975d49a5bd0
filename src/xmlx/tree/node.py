"""Generic XML node with path, predicate and recursive queries.

A ``Node`` is one element: its local name, attributes, own character data and
ordered children. Queries never mutate the tree and never raise for absence;
they return ``None`` (or ``""`` for the string convenience forms).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

DEFAULT_PATH_DELIMITER = "/"
DEFAULT_SPLIT_DELIMITER = "."


@dataclass
class Node:
    """A generic XML element.

    Attributes:
        name: Local tag name, empty only for the invalid sentinel
        attrs: Attribute local names mapped to their values
        data: The element's own character content, untrimmed
        nodes: Child elements in document order
        is_invalid: Marks the "not found" sentinel returned by
            ``find_node_recursively``
    """

    name: str
    attrs: Dict[str, str] = field(default_factory=dict)
    data: str = ""
    nodes: List["Node"] = field(default_factory=list)
    is_invalid: bool = False

    def __post_init__(self) -> None:
        """Validate node values."""
        if not self.name and not self.is_invalid:
            raise ValueError("Node name cannot be empty")

    @classmethod
    def invalid(cls) -> "Node":
        """Create the sentinel node standing for "not found"."""
        return cls(name="", is_invalid=True)

    def is_valid(self) -> bool:
        """Check that this node is not the "not found" sentinel."""
        return not self.is_invalid

    def text(self) -> str:
        """Get the node's own character data."""
        return self.data

    # Path navigation

    def get_sub_node(self, *labels: str) -> Optional["Node"]:
        """Descend through direct children by name.

        Each label selects the first child with that name; later siblings with
        the same name are not reachable this way. Empty labels are skipped and
        an empty path returns this node.

        Args:
            *labels: Path segments, one element name per level

        Returns:
            The node at the end of the path, or None if any segment is missing

        Examples:
            >>> root = parse('<a><b x="1">hi</b><b x="2">yo</b></a>')
            >>> root.get_sub_node("b").attrs
            {'x': '1'}
        """
        current = self
        for label in labels:
            if not label:
                continue
            for child in current.nodes:
                if child.name == label:
                    current = child
                    break
            else:
                return None
        return current

    def get_sub_node_x(
        self, path: str, delimiter: str = DEFAULT_PATH_DELIMITER
    ) -> Optional["Node"]:
        """Descend along a delimited path such as ``"b/c"``."""
        return self.get_sub_node(*path.split(delimiter))

    def get_sub_node_data(self, *labels: str) -> Optional[str]:
        """Get the data of the node at the end of a path.

        Returns:
            The node's data, or None when no labels are given or the path
            is not found. Empty labels are skipped, so ``("", "")`` selects
            this node.
        """
        if not labels:
            return None
        node = self.get_sub_node(*labels)
        return node.data if node is not None else None

    def get_sub_node_data_x(
        self, path: str, delimiter: str = DEFAULT_PATH_DELIMITER
    ) -> Optional[str]:
        """Delimited-path form of ``get_sub_node_data``."""
        return self.get_sub_node_data(*path.split(delimiter))

    def get_sub_node_string(self, *labels: str) -> str:
        """Get the data at the end of a path, or ``""`` on any failure.

        An empty string is returned both when the path cannot be resolved and
        when the node found has no data; use ``get_sub_node_data`` to tell
        those apart.
        """
        return self.get_sub_node_data(*labels) or ""

    def get_sub_node_string_x(
        self, path: str, delimiter: str = DEFAULT_PATH_DELIMITER
    ) -> str:
        """Delimited-path form of ``get_sub_node_string``."""
        return self.get_sub_node_data_x(path, delimiter) or ""

    # Predicate search among siblings

    def sub_nodes(self, label: str) -> List["Node"]:
        """Get the direct children named ``label`` in document order.

        An empty label selects every child. The returned list is new; the
        nodes in it are the tree's own.
        """
        if not label:
            return list(self.nodes)
        return [node for node in self.nodes if node.name == label]

    def get_sub_node_by(
        self, label: str, sub_label: str, value: str
    ) -> Optional["Node"]:
        """Find the first ``label`` child whose ``sub_label`` child has ``value``.

        Examples:
            >>> people.get_sub_node_by("person", "id", "42").get_sub_node_string("name")
            'Ada'
        """
        return self._first_matching(label, ((sub_label, value),))

    def get_sub_node_by2(
        self,
        label: str,
        sub_label1: str,
        value1: str,
        sub_label2: str,
        value2: str,
    ) -> Optional["Node"]:
        """Find the first ``label`` child satisfying two (sub-label, value) conditions."""
        return self._first_matching(label, ((sub_label1, value1), (sub_label2, value2)))

    def get_sub_node_data_by(
        self, label: str, sub_label1: str, value1: str, sub_label2: str
    ) -> Optional[str]:
        """Get ``sub_label2`` data from the first ``label`` child matching one condition.

        Candidates that match the condition but lack ``sub_label2`` are
        skipped.
        """
        return self._first_matching_data(label, ((sub_label1, value1),), sub_label2)

    def get_sub_node_string_by(
        self, label: str, sub_label1: str, value1: str, sub_label2: str
    ) -> str:
        """String form of ``get_sub_node_data_by``: ``""`` when nothing matches."""
        return self.get_sub_node_data_by(label, sub_label1, value1, sub_label2) or ""

    def get_sub_node_data_by2(
        self,
        label: str,
        sub_label1: str,
        value1: str,
        sub_label2: str,
        value2: str,
        sub_label3: str,
    ) -> Optional[str]:
        """Get ``sub_label3`` data from the first ``label`` child matching two conditions."""
        return self._first_matching_data(
            label, ((sub_label1, value1), (sub_label2, value2)), sub_label3
        )

    def get_sub_node_string_by2(
        self,
        label: str,
        sub_label1: str,
        value1: str,
        sub_label2: str,
        value2: str,
        sub_label3: str,
    ) -> str:
        """String form of ``get_sub_node_data_by2``."""
        return self.get_sub_node_data_by2(
            label, sub_label1, value1, sub_label2, value2, sub_label3
        ) or ""

    def get_sub_node_by_x(
        self, root_path: str, label: str, *label_value_pairs: str
    ) -> Optional["Node"]:
        """Search the ``label`` children of ``root_path`` with path predicates.

        Args:
            root_path: Slash-delimited path to the node whose children are searched
            label: Name of the candidate children
            *label_value_pairs: Alternating slash-delimited paths and expected
                values; every pair must hold. A trailing unpaired path is ignored.

        Returns:
            The first candidate satisfying all pairs, or None

        Examples:
            >>> root.get_sub_node_by_x("catalog/books", "book",
            ...                         "meta/isbn", "123", "lang", "en")
        """
        for candidate in self._candidates_under(root_path, label):
            if _matches_paths(candidate, label_value_pairs):
                return candidate
        return None

    def get_sub_node_data_by_x(
        self, root_path: str, label: str, sub_label: str, *label_value_pairs: str
    ) -> Optional[str]:
        """Get ``sub_label`` data of the first candidate found as in ``get_sub_node_by_x``.

        Only the first candidate satisfying the predicates is considered: if it
        lacks ``sub_label`` the result is None even when a later candidate has it.
        """
        node = self.get_sub_node_by_x(root_path, label, *label_value_pairs)
        if node is None:
            return None
        target = node.get_sub_node_x(sub_label)
        return target.data if target is not None else None

    def get_sub_node_string_by_x(
        self, root_path: str, label: str, sub_label: str, *label_value_pairs: str
    ) -> str:
        """String form of ``get_sub_node_data_by_x``."""
        return self.get_sub_node_data_by_x(
            root_path, label, sub_label, *label_value_pairs
        ) or ""

    def _candidates_under(self, root_path: str, label: str) -> List["Node"]:
        root = self.get_sub_node_x(root_path)
        if root is None:
            return []
        return root.sub_nodes(label)

    def _first_matching(
        self, label: str, conditions: Sequence[Tuple[str, str]]
    ) -> Optional["Node"]:
        for candidate in self.sub_nodes(label):
            if _matches_labels(candidate, conditions):
                return candidate
        return None

    def _first_matching_data(
        self, label: str, conditions: Sequence[Tuple[str, str]], sub_label: str
    ) -> Optional[str]:
        for candidate in self.sub_nodes(label):
            if not _matches_labels(candidate, conditions):
                continue
            target = candidate.get_sub_node(sub_label)
            if target is not None:
                return target.data
        return None

    # Recursive search

    def find_node(self, label: str) -> Optional["Node"]:
        """Find the first descendant named ``label``, depth first.

        Each child is checked before its own subtree is searched, and its
        subtree is searched before the next sibling. An empty label returns
        this node.
        """
        if not label:
            return self
        stack = list(reversed(self.nodes))
        while stack:
            node = stack.pop()
            if node.name == label:
                return node
            stack.extend(reversed(node.nodes))
        return None

    def find_node_recursively(self, label: str) -> "Node":
        """Like ``find_node`` but returns ``Node.invalid()`` instead of None."""
        found = self.find_node(label)
        return found if found is not None else Node.invalid()

    # Transformations

    def clone(self) -> "Node":
        """Create a fully independent deep copy of this node."""
        return Node(
            name=self.name,
            attrs=dict(self.attrs),
            data=self.data,
            nodes=[child.clone() for child in self.nodes],
            is_invalid=self.is_invalid,
        )

    def split(self, label: str, delimiter: str = DEFAULT_SPLIT_DELIMITER) -> List["Node"]:
        """Split nested repeated elements into copies of this node.

        See ``xmlx.tree.transform.split_node``.
        """
        from xmlx.tree.transform import split_node

        return split_node(self, label, delimiter)

    def map(self) -> Dict[str, str]:
        """Flatten this node into a single-level mapping.

        See ``xmlx.tree.transform.flatten_node``.
        """
        from xmlx.tree.transform import flatten_node

        return flatten_node(self)

    def iter_nodes(self) -> Iterable["Node"]:
        """Iterate over this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.nodes))

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        if self.is_invalid:
            return {"invalid": True}

        result: Dict[str, Any] = {"name": self.name}
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        if self.data:
            result["data"] = self.data
        if self.nodes:
            result["nodes"] = [child.to_dict() for child in self.nodes]
        return result


def _matches_labels(candidate: Node, conditions: Iterable[Tuple[str, str]]) -> bool:
    """All single-segment conditions resolve to nodes with the expected data."""
    for sub_label, value in conditions:
        node = candidate.get_sub_node(sub_label)
        if node is None or node.data != value:
            return False
    return True


def _matches_paths(candidate: Node, label_value_pairs: Sequence[str]) -> bool:
    """All (delimited path, value) pairs resolve to nodes with the expected data."""
    for i in range(len(label_value_pairs) // 2):
        node = candidate.get_sub_node_x(label_value_pairs[i * 2])
        if node is None or node.data != label_value_pairs[i * 2 + 1]:
            return False
    return True
