"""
Node Store
Flat, index-addressable storage for every node of a fixed-height tree.

Layout (heap order):
- Root at index 0
- Children of node i at 2i + 1 (left) and 2i + 2 (right)
- Parent of node i at (i - 1) // 2
- Leaves occupy the last 2^h slots, starting at 2^h - 1

A store of height h holds exactly 2^(h+1) - 1 slots and never resizes.
"""
from __future__ import annotations

from typing import Iterator

from arbor.schemas.errors import NodeOutOfRangeException


# Value held by every slot before it is written
EMPTY_DIGEST: bytes = b""


def node_count(height: int) -> int:
    """Total number of nodes in a perfect binary tree of the given height."""
    return (1 << (height + 1)) - 1


def leaf_offset(height: int) -> int:
    """Node index of leaf 0 (number of internal nodes)."""
    return (1 << height) - 1


def left_child_index(index: int) -> int:
    return 2 * index + 1


def right_child_index(index: int) -> int:
    return 2 * index + 2


def parent_index(index: int) -> int:
    """Parent of a non-root node."""
    return (index - 1) // 2


def sibling_index(index: int) -> int:
    """
    Sibling of a non-root node.

    Left children have odd indices, right children even ones.
    """
    return index + 1 if index % 2 == 1 else index - 1


def is_left_child(index: int) -> bool:
    return index % 2 == 1


class NodeStore:
    """
    Fixed-size digest buffer for a tree of height h.

    Example:
        >>> store = NodeStore(2)
        >>> len(store)
        7
        >>> store.leaf_node(0)
        3
    """

    __slots__ = ("_height", "_nodes")

    def __init__(self, height: int) -> None:
        if isinstance(height, bool) or not isinstance(height, int) or height <= 0:
            raise NodeOutOfRangeException(
                f"Node store height must be a positive integer, got {height!r}",
                details={"height": height},
            )
        self._height = height
        self._nodes: list[bytes] = [EMPTY_DIGEST] * node_count(height)

    @property
    def height(self) -> int:
        return self._height

    @property
    def leaf_count(self) -> int:
        return 1 << self._height

    @property
    def first_leaf(self) -> int:
        return leaf_offset(self._height)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._nodes)

    def _check(self, index: int) -> None:
        if index < 0 or index >= len(self._nodes):
            raise NodeOutOfRangeException(
                f"Node index {index} out of range for store of {len(self._nodes)} nodes",
                details={"index": index, "size": len(self._nodes)},
            )

    def get(self, index: int) -> bytes:
        self._check(index)
        return self._nodes[index]

    def set(self, index: int, digest: bytes) -> None:
        self._check(index)
        self._nodes[index] = digest

    __getitem__ = get
    __setitem__ = set

    def leaf_node(self, leaf: int) -> int:
        """Map a 0-based leaf position to its node index."""
        if leaf < 0 or leaf >= self.leaf_count:
            raise NodeOutOfRangeException(
                f"Leaf position {leaf} out of range for {self.leaf_count} leaves",
                details={"leaf": leaf, "leaf_count": self.leaf_count},
            )
        return self.first_leaf + leaf

    def leaves(self) -> list[bytes]:
        """Copy of the leaf level, left to right."""
        return self._nodes[self.first_leaf:]

    def copy(self) -> "NodeStore":
        clone = NodeStore(self._height)
        clone._nodes = list(self._nodes)
        return clone


__all__ = [
    "EMPTY_DIGEST",
    "NodeStore",
    "node_count",
    "leaf_offset",
    "left_child_index",
    "right_child_index",
    "parent_index",
    "sibling_index",
    "is_left_child",
]
