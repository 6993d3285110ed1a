"""
Merkle Tree Implementation
Fixed-height, array-backed Merkle tree with O(h) updates and inclusion proofs.

This module provides:
- TreeBuilder: hashes blocks into leaves and fills internal nodes bottom-up
- MerkleTree: root/leaf access, leaf update, insert, and proof generation

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(block)
2. Parent hashing: parent = H(left + right), no separator
3. Padding rule: unfilled leaves hold H(b"") (digest of an empty block)
4. Capacity is fixed at 2^h leaves; the tree never resizes
5. update(i, b) yields exactly the root a full rebuild would

Concurrency Notes:
- A tree is a single mutable structure with no internal locking
- Callers sharing a tree across threads must serialize writers
  (update/insert/build) against all other access
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from arbor.crypto.hashing import HashFunction, hash_concat, sha256
from arbor.merkle.merkle_proofs import InclusionProof, ProofStep, Side
from arbor.merkle.node_store import (
    NodeStore,
    is_left_child,
    left_child_index,
    parent_index,
    right_child_index,
    sibling_index,
)
from arbor.schemas.errors import (
    CapacityExceededException,
    IndexOutOfBoundsException,
    InvalidHeightException,
    UninitializedTreeException,
)


logger = logging.getLogger(__name__)


def padding_digest(hash_fn: HashFunction) -> bytes:
    """Digest used for leaves with no block: the hash of an empty block."""
    return hash_fn(b"")


def _as_bytes(block: bytes) -> bytes:
    if isinstance(block, (bytes, bytearray, memoryview)):
        return bytes(block)
    raise TypeError(f"Blocks must be bytes-like, got {type(block).__name__}")


def _check_height(height: int) -> None:
    if isinstance(height, bool) or not isinstance(height, int) or height < 1:
        raise InvalidHeightException(height)


class TreeBuilder:
    """
    Builds a fully populated NodeStore from a block sequence.

    Construction is all-or-nothing: every check and every hash runs
    against a fresh store, so a failure leaves no partial result.

    Example:
        >>> store = TreeBuilder(2, sha256).build([b"a", b"b", b"c"])
        >>> store.get(store.leaf_node(3)) == sha256(b"")
        True
    """

    def __init__(self, height: int, hash_fn: HashFunction) -> None:
        _check_height(height)
        self.height = height
        self.hash_fn = hash_fn

    @property
    def capacity(self) -> int:
        return 1 << self.height

    def hash_leaves(self, blocks: Sequence[bytes]) -> list[bytes]:
        """
        Hash blocks into a full leaf level, padding the tail.

        Raises:
            CapacityExceededException: If len(blocks) > 2^h
        """
        if len(blocks) > self.capacity:
            raise CapacityExceededException(len(blocks), self.capacity)

        leaves = [self.hash_fn(_as_bytes(block)) for block in blocks]
        if len(leaves) < self.capacity:
            pad = padding_digest(self.hash_fn)
            leaves.extend([pad] * (self.capacity - len(leaves)))
        return leaves

    def build(self, blocks: Iterable[bytes] = ()) -> NodeStore:
        """
        Build every node of the tree.

        Algorithm:
        1. Leaf slot i holds H(blocks[i]), or the padding digest past the end
        2. Internal nodes are visited from the highest index down to the
           root, so both children are always final before their parent

        Args:
            blocks: At most 2^h blocks, in leaf order

        Returns:
            A populated NodeStore

        Raises:
            CapacityExceededException: If more than 2^h blocks are supplied
        """
        blocks = list(blocks)
        leaves = self.hash_leaves(blocks)

        store = NodeStore(self.height)
        first_leaf = store.first_leaf
        for offset, digest in enumerate(leaves):
            store.set(first_leaf + offset, digest)

        for index in range(first_leaf - 1, -1, -1):
            store.set(
                index,
                hash_concat(
                    self.hash_fn,
                    store.get(left_child_index(index)),
                    store.get(right_child_index(index)),
                ),
            )

        logger.debug(
            "Built tree: height=%d blocks=%d capacity=%d",
            self.height, len(blocks), self.capacity,
        )
        return store


class MerkleTree:
    """
    Fixed-capacity Merkle tree over up to 2^h blocks.

    States: a tree starts Uninitialized and becomes Built after the first
    successful build(); update() and insert() keep it Built. Reads before
    the first build raise UninitializedTreeException.

    Example:
        >>> tree = MerkleTree.from_blocks(2, [b"a", b"b", b"c", b"d"], sha256)
        >>> proof = tree.proof(0)
        >>> verify_inclusion_proof(tree.root(), tree.leaf(0), 0, proof, sha256, height=2)
        True
    """

    def __init__(self, height: int, hash_fn: HashFunction = sha256) -> None:
        self._builder = TreeBuilder(height, hash_fn)
        self._store: NodeStore | None = None
        self._assigned: list[bool] = [False] * self._builder.capacity

    @classmethod
    def from_blocks(
        cls,
        height: int,
        blocks: Iterable[bytes],
        hash_fn: HashFunction = sha256,
    ) -> "MerkleTree":
        """Create and build a tree in one step."""
        tree = cls(height, hash_fn)
        tree.build(blocks)
        return tree

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def height(self) -> int:
        return self._builder.height

    @property
    def capacity(self) -> int:
        return self._builder.capacity

    @property
    def hash_fn(self) -> HashFunction:
        return self._builder.hash_fn

    @property
    def is_built(self) -> bool:
        return self._store is not None

    @property
    def filled(self) -> int:
        """Number of leaf slots that hold a caller-supplied block."""
        return sum(self._assigned)

    @property
    def padding_digest(self) -> bytes:
        return padding_digest(self.hash_fn)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _built_store(self, operation: str) -> NodeStore:
        if self._store is None:
            raise UninitializedTreeException(operation)
        return self._store

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < self.capacity:
            raise IndexOutOfBoundsException(index, self.capacity)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def build(self, blocks: Iterable[bytes] = ()) -> "MerkleTree":
        """
        (Re)build the whole tree from a block sequence.

        The previous state is replaced only after the new store is fully
        computed, so a failed build leaves the tree unchanged.

        Raises:
            CapacityExceededException: If more than 2^h blocks are supplied
        """
        blocks = list(blocks)
        store = self._builder.build(blocks)
        self._store = store
        self._assigned = [i < len(blocks) for i in range(self.capacity)]
        return self

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def root(self) -> bytes:
        """Root digest of the most recent build or update."""
        return self._built_store("root").get(0)

    def leaf(self, index: int) -> bytes:
        """Digest currently stored at leaf position index."""
        store = self._built_store("leaf")
        self._check_index(index)
        return store.get(store.leaf_node(index))

    def leaves(self) -> list[bytes]:
        """All leaf digests, padding included, left to right."""
        return self._built_store("leaves").leaves()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def update(self, index: int, block: bytes) -> bytes:
        """
        Replace the block at a leaf and recompute its path to the root.

        Uses h + 1 hash operations. Every new digest on the path is computed
        before any is written, so a failing hash function leaves the tree
        untouched.

        Args:
            index: Leaf position in [0, 2^h)
            block: New block bytes

        Returns:
            The new root digest

        Raises:
            UninitializedTreeException: If the tree has not been built
            IndexOutOfBoundsException: If index is out of range
        """
        store = self._built_store("update")
        self._check_index(index)

        node = store.leaf_node(index)
        current = self.hash_fn(_as_bytes(block))
        path: list[tuple[int, bytes]] = [(node, current)]

        while node > 0:
            sibling = store.get(sibling_index(node))
            if is_left_child(node):
                current = hash_concat(self.hash_fn, current, sibling)
            else:
                current = hash_concat(self.hash_fn, sibling, current)
            node = parent_index(node)
            path.append((node, current))

        for node, digest in path:
            store.set(node, digest)
        self._assigned[index] = True

        logger.debug("Updated leaf %d; new root %s", index, current.hex())
        return current

    def insert(self, block: bytes) -> int:
        """
        Place a block in the first leaf slot that has never held one.

        Args:
            block: Block bytes

        Returns:
            The leaf index the block was written to

        Raises:
            UninitializedTreeException: If the tree has not been built
            CapacityExceededException: If every leaf slot already holds a block
        """
        self._built_store("insert")
        try:
            index = self._assigned.index(False)
        except ValueError:
            raise CapacityExceededException(self.capacity + 1, self.capacity) from None
        self.update(index, block)
        return index

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def proof(self, index: int) -> InclusionProof:
        """
        Build an inclusion proof for the leaf at index.

        Walks from the leaf to the root, recording at each level the
        sibling's current digest and the side it sits on.

        Raises:
            UninitializedTreeException: If the tree has not been built
            IndexOutOfBoundsException: If index is out of range
        """
        store = self._built_store("proof")
        self._check_index(index)

        node = store.leaf_node(index)
        leaf_digest = store.get(node)
        steps: list[ProofStep] = []

        while node > 0:
            side = Side.RIGHT if is_left_child(node) else Side.LEFT
            steps.append(ProofStep(sibling=store.get(sibling_index(node)), side=side))
            node = parent_index(node)

        return InclusionProof(
            leaf_index=index,
            leaf_digest=leaf_digest,
            steps=tuple(steps),
            height=self.height,
        )

    def __len__(self) -> int:
        return self.capacity

    def __repr__(self) -> str:
        state = f"root={self._store.get(0).hex()[:16]}" if self._store is not None else "uninitialized"
        return f"MerkleTree(height={self.height}, filled={self.filled}/{self.capacity}, {state})"


__all__ = [
    "padding_digest",
    "TreeBuilder",
    "MerkleTree",
]
