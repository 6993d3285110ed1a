"""
Merkle Inclusion Proofs
Proof types, stateless verification, and class-based convenience wrappers.

This module provides:
- Side: which side of the path node a sibling occupies
- ProofStep / InclusionProof: leaf-to-root sibling path for one leaf
- verify_inclusion_proof: pure predicate, never raises on malformed input
- MerkleProver / MerkleVerifier: thin wrappers for a cleaner API

Combination Rule (must match the builder):
- sibling on the RIGHT: next = H(current + sibling)
- sibling on the LEFT:  next = H(sibling + current)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

from arbor.crypto.hashing import HashFunction, hash_concat
from arbor.schemas.errors import MerkleVerificationException

if TYPE_CHECKING:
    from arbor.merkle.merkle_tree import MerkleTree


logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Position of a sibling digest relative to the node on the proof path."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """
    One level of an inclusion proof.

    Attributes:
        sibling: Digest of the path node's sibling at this level
        side: Which side the sibling occupies
    """
    sibling: bytes
    side: Side


@dataclass(frozen=True)
class InclusionProof:
    """
    Inclusion proof for a single leaf of a fixed-height tree.

    Steps are ordered from the leaf level up to the level just below
    the root, so a well-formed proof has exactly `height` steps.

    Attributes:
        leaf_index: 0-based position of the leaf
        leaf_digest: Digest stored at the leaf when the proof was taken
        steps: Sibling path, bottom-up
        height: Height of the tree the proof was taken from
    """
    leaf_index: int
    leaf_digest: bytes
    steps: tuple[ProofStep, ...]
    height: int

    def __post_init__(self) -> None:
        """Normalize steps to a tuple."""
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def siblings(self) -> list[bytes]:
        """Sibling digests without side information, bottom-up."""
        return [step.sibling for step in self.steps]

    def __len__(self) -> int:
        return len(self.steps)


def compute_root_from_proof(
    leaf_digest: bytes,
    steps: Sequence[ProofStep],
    hash_fn: HashFunction,
) -> bytes:
    """
    Fold a sibling path over a leaf digest.

    Args:
        leaf_digest: Starting digest
        steps: Sibling path, bottom-up
        hash_fn: Hash function the tree was built with

    Returns:
        The root digest implied by the path
    """
    current = leaf_digest
    for step in steps:
        if step.side is Side.RIGHT:
            current = hash_concat(hash_fn, current, step.sibling)
        else:
            current = hash_concat(hash_fn, step.sibling, current)
    return current


def _is_digest(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def _reject(reason: str, **details: Any) -> bool:
    logger.debug("Rejecting inclusion proof: %s %s", reason, details)
    return False


def verify_inclusion_proof(
    root: bytes,
    leaf_digest: bytes,
    leaf_index: int | None,
    proof: InclusionProof,
    hash_fn: HashFunction,
    *,
    height: int,
) -> bool:
    """
    Verify that a leaf digest is committed to by a root.

    This is a pure predicate: malformed, mismatched, or tampered input
    yields False and never raises.

    The height must come from the same trusted source as the root, never
    from the proof. Parents are H(left + right) with no separator, so a
    proof one level short would otherwise accept the concatenation of two
    sibling leaves as a "block".

    Checks, in order:
    1. Types are well formed (digests are bytes, steps are ProofSteps)
    2. The proof's height and step count both equal height
    3. leaf_index, when supplied, equals the proof's leaf index
    4. The leaf digest equals the digest recorded in the proof
    5. Each step's side agrees with the leaf position's bit at that level
    6. Folding the path over the leaf reproduces root byte-for-byte

    Args:
        root: Known root digest
        leaf_digest: Claimed leaf digest
        leaf_index: Claimed leaf position (None to skip the cross-check)
        proof: Inclusion proof to check
        hash_fn: Hash function the tree was built with
        height: Height of the committed tree

    Returns:
        True if the proof is valid, False otherwise
    """
    if not isinstance(proof, InclusionProof):
        return _reject("not an InclusionProof", type=type(proof).__name__)
    if not _is_digest(root) or not _is_digest(leaf_digest):
        return _reject("root and leaf digest must be bytes")
    if isinstance(height, bool) or not isinstance(height, int) or height < 1:
        return _reject("invalid tree height", height=height)
    if proof.height != height:
        return _reject("proof height does not match tree", proof=proof.height, tree=height)
    if len(proof.steps) != height:
        return _reject("step count does not match height", steps=len(proof.steps), height=height)
    if leaf_index is not None and leaf_index != proof.leaf_index:
        return _reject("leaf index mismatch", claimed=leaf_index, proof=proof.leaf_index)
    if not isinstance(proof.leaf_index, int) or not 0 <= proof.leaf_index < (1 << height):
        return _reject("leaf index out of range", index=proof.leaf_index)
    if bytes(leaf_digest) != proof.leaf_digest:
        return _reject("leaf digest does not match proof")

    position = proof.leaf_index
    for level, step in enumerate(proof.steps):
        if not isinstance(step, ProofStep) or not _is_digest(step.sibling):
            return _reject("malformed step", level=level)
        expected_side = Side.RIGHT if position % 2 == 0 else Side.LEFT
        if step.side is not expected_side:
            return _reject("sibling side disagrees with leaf position", level=level)
        position //= 2

    try:
        computed = compute_root_from_proof(bytes(leaf_digest), proof.steps, hash_fn)
    except (TypeError, ValueError) as e:
        return _reject("hash function failed", error=str(e))

    if computed != bytes(root):
        return _reject("root mismatch")
    return True


class MerkleProver:
    """
    Convenience class for generating inclusion proofs.

    Example:
        >>> tree = MerkleTree.from_blocks(2, [b"a", b"b", b"c"], sha256)
        >>> proof = MerkleProver.prove(tree, 1)
        >>> proof.leaf_digest == tree.leaf(1)
        True
    """

    @staticmethod
    def prove(tree: "MerkleTree", index: int) -> InclusionProof:
        """Generate a proof for the leaf at index (see MerkleTree.proof)."""
        return tree.proof(index)

    @staticmethod
    def prove_all(tree: "MerkleTree") -> list[InclusionProof]:
        """Generate proofs for every leaf slot, padding included."""
        return [tree.proof(i) for i in range(tree.capacity)]


class MerkleVerifier:
    """
    Convenience class for verifying inclusion proofs.

    Example:
        >>> proof = MerkleProver.prove(tree, 1)
        >>> MerkleVerifier.verify(tree.root(), proof, sha256, height=tree.height)
        True
    """

    @staticmethod
    def verify(
        root: bytes,
        proof: InclusionProof,
        hash_fn: HashFunction,
        *,
        height: int,
    ) -> bool:
        """Verify a proof using the leaf digest and index it carries."""
        if not isinstance(proof, InclusionProof):
            return False
        return verify_inclusion_proof(
            root,
            proof.leaf_digest,
            proof.leaf_index,
            proof,
            hash_fn,
            height=height,
        )

    @staticmethod
    def verify_block(
        root: bytes,
        block: bytes,
        proof: InclusionProof,
        hash_fn: HashFunction,
        *,
        height: int,
    ) -> bool:
        """
        Verify that a raw block is committed to by root.

        The block is hashed with hash_fn to produce the leaf digest.

        Args:
            root: Known root digest
            block: Raw block bytes
            proof: Inclusion proof for the block's position
            hash_fn: Hash function the tree was built with
            height: Height of the committed tree

        Returns:
            True if the proof is valid, False otherwise
        """
        if not _is_digest(block) or not isinstance(proof, InclusionProof):
            return False
        try:
            leaf_digest = hash_fn(bytes(block))
        except (TypeError, ValueError) as e:
            return _reject("hash function failed", error=str(e))
        return verify_inclusion_proof(
            root,
            leaf_digest,
            proof.leaf_index,
            proof,
            hash_fn,
            height=height,
        )

    @staticmethod
    def require(
        root: bytes,
        proof: InclusionProof,
        hash_fn: HashFunction,
        *,
        height: int,
    ) -> None:
        """
        Verify a proof, raising instead of returning False.

        Raises:
            MerkleVerificationException: If the proof does not verify
        """
        if not MerkleVerifier.verify(root, proof, hash_fn, height=height):
            leaf_index = proof.leaf_index if isinstance(proof, InclusionProof) else None
            raise MerkleVerificationException(
                "Inclusion proof does not verify against root",
                leaf_index=leaf_index,
            )


__all__ = [
    "Side",
    "ProofStep",
    "InclusionProof",
    "compute_root_from_proof",
    "verify_inclusion_proof",
    "MerkleProver",
    "MerkleVerifier",
]
