"""
Merkle Tree and Commitments
Fixed-height tree construction, O(h) updates, and inclusion proofs.

This module provides:
- NodeStore: flat heap-ordered digest buffer
- TreeBuilder: block hashing and bottom-up propagation
- MerkleTree: root/leaf reads, update, insert, proof generation
- InclusionProof / verify_inclusion_proof: stateless verification

Commitment Rules:
1. Leaf hashing: H(block)
2. Parent hashing: H(left + right)
3. Padding: unfilled leaves hold H(b"")
4. Capacity: exactly 2^h leaves, fixed at construction

Usage:
    from arbor.crypto import sha256
    from arbor.merkle import MerkleTree, verify_inclusion_proof

    tree = MerkleTree.from_blocks(2, [b"a", b"b", b"c"], sha256)
    proof = tree.proof(1)
    assert verify_inclusion_proof(tree.root(), tree.leaf(1), 1, proof, sha256, height=2)
"""
from .node_store import (
    EMPTY_DIGEST,
    NodeStore,
    node_count,
    leaf_offset,
    left_child_index,
    right_child_index,
    parent_index,
    sibling_index,
    is_left_child,
)

from .merkle_proofs import (
    Side,
    ProofStep,
    InclusionProof,
    compute_root_from_proof,
    verify_inclusion_proof,
    MerkleProver,
    MerkleVerifier,
)

from .merkle_tree import (
    padding_digest,
    TreeBuilder,
    MerkleTree,
)


__all__ = [
    # Storage
    "EMPTY_DIGEST",
    "NodeStore",
    "node_count",
    "leaf_offset",
    "left_child_index",
    "right_child_index",
    "parent_index",
    "sibling_index",
    "is_left_child",
    # Proofs
    "Side",
    "ProofStep",
    "InclusionProof",
    "compute_root_from_proof",
    "verify_inclusion_proof",
    # Tree
    "padding_digest",
    "TreeBuilder",
    "MerkleTree",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
