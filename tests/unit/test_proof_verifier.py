"""
Proof Verifier Unit Tests
Tests for arbor/merkle/merkle_proofs.py

Covers:
1. Valid proofs verify for every index
2. Tamper detection - any flipped byte in a sibling or leaf fails
3. Malformed input returns False, never raises
4. Convenience wrappers (MerkleProver / MerkleVerifier)
"""
from dataclasses import replace

import pytest

from arbor.crypto.hashing import sha256, sha3_256
from arbor.merkle import (
    InclusionProof,
    MerkleProver,
    MerkleVerifier,
    ProofStep,
    Side,
    compute_root_from_proof,
    verify_inclusion_proof,
)
from arbor.schemas.errors import ErrorCodes, MerkleVerificationException

from fixtures import make_blocks, make_tree


def _flip(data: bytes, position: int) -> bytes:
    flipped = bytearray(data)
    flipped[position] ^= 0x01
    return bytes(flipped)


def _with_step(proof: InclusionProof, level: int, step: ProofStep) -> InclusionProof:
    steps = list(proof.steps)
    steps[level] = step
    return replace(proof, steps=tuple(steps))


class TestValidProofs:

    def test_verifies_every_index(self, tree):
        root = tree.root()
        for i in range(tree.capacity):
            assert verify_inclusion_proof(root, tree.leaf(i), i, tree.proof(i), sha256, height=3)

    def test_leaf_index_is_optional(self, tree):
        proof = tree.proof(6)

        assert verify_inclusion_proof(tree.root(), tree.leaf(6), None, proof, sha256, height=3)

    def test_height_matches_tree(self, tree):
        proof = tree.proof(2)

        assert verify_inclusion_proof(
            tree.root(), tree.leaf(2), 2, proof, sha256, height=3
        )

    def test_accepts_bytearray_digests(self, tree):
        proof = tree.proof(1)

        assert verify_inclusion_proof(
            bytearray(tree.root()), bytearray(tree.leaf(1)), 1, proof, sha256, height=3
        )

    def test_compute_root_from_proof(self, tree):
        proof = tree.proof(4)

        assert compute_root_from_proof(proof.leaf_digest, proof.steps, sha256) == tree.root()


class TestTamperDetection:

    def test_flipped_sibling_byte_fails(self, tree):
        proof = tree.proof(3)
        root = tree.root()

        for level, step in enumerate(proof.steps):
            for position in (0, 15, 31):
                tampered = _with_step(
                    proof, level, ProofStep(sibling=_flip(step.sibling, position), side=step.side)
                )
                assert not verify_inclusion_proof(root, proof.leaf_digest, 3, tampered, sha256, height=3)

    def test_flipped_leaf_byte_fails(self, tree):
        proof = tree.proof(3)
        root = tree.root()

        for position in range(32):
            bad_leaf = _flip(proof.leaf_digest, position)
            assert not verify_inclusion_proof(root, bad_leaf, 3, proof, sha256, height=3)
            assert not verify_inclusion_proof(
                root, bad_leaf, 3, replace(proof, leaf_digest=bad_leaf), sha256, height=3
            )

    def test_wrong_root_fails(self, tree):
        proof = tree.proof(0)

        assert not verify_inclusion_proof(_flip(tree.root(), 0), tree.leaf(0), 0, proof, sha256, height=3)

    def test_wrong_hash_function_fails(self, tree):
        proof = tree.proof(0)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, proof, sha3_256, height=3)

    def test_leaf_from_other_position_fails(self, tree):
        proof = tree.proof(0)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(1), 0, proof, sha256, height=3)

    def test_swapped_side_fails(self, tree):
        proof = tree.proof(0)
        step = proof.steps[0]
        tampered = _with_step(proof, 0, ProofStep(sibling=step.sibling, side=Side.LEFT))

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, tampered, sha256, height=3)

    def test_relabelled_index_fails(self, tree):
        """A valid path cannot be passed off as another position."""
        proof = tree.proof(1)
        relabelled = replace(proof, leaf_index=3)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(1), 3, relabelled, sha256, height=3)

    def test_stale_proof_fails_after_update(self, tree):
        stale = tree.proof(0)
        tree.update(5, b"changed")

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, stale, sha256, height=3)
        assert verify_inclusion_proof(tree.root(), tree.leaf(0), 0, tree.proof(0), sha256, height=3)


class TestShortenedProofForgery:
    """
    Parents are H(left + right), so leaf0 ++ leaf1 hashes to a real internal
    node. A proof one level short must not pass it off as a block.
    """

    @pytest.fixture
    def forged(self, tree):
        block = tree.leaf(0) + tree.leaf(1)
        real = tree.proof(0)
        proof = InclusionProof(
            leaf_index=0,
            leaf_digest=sha256(block),
            steps=real.steps[1:],
            height=2,
        )
        return block, proof

    def test_forged_block_rejected_at_tree_height(self, tree, forged):
        block, proof = forged

        assert not MerkleVerifier.verify_block(tree.root(), block, proof, sha256, height=tree.height)
        assert not MerkleVerifier.verify(tree.root(), proof, sha256, height=tree.height)

    def test_forged_block_folds_to_real_root(self, tree, forged):
        """The path itself is sound, only the height gives it away."""
        block, proof = forged

        assert compute_root_from_proof(sha256(block), proof.steps, sha256) == tree.root()

    def test_proof_requires_height(self, tree):
        with pytest.raises(TypeError):
            InclusionProof(leaf_index=0, leaf_digest=tree.leaf(0), steps=())


class TestMalformedInput:
    """Verification is a pure predicate: bad input is False, not an exception."""

    def test_truncated_proof(self, tree):
        proof = tree.proof(2)
        truncated = replace(proof, steps=proof.steps[:-1])

        assert not verify_inclusion_proof(tree.root(), tree.leaf(2), 2, truncated, sha256, height=3)

    def test_extra_step(self, tree):
        proof = tree.proof(2)
        extended = InclusionProof(
            leaf_index=2,
            leaf_digest=proof.leaf_digest,
            steps=proof.steps + (ProofStep(sibling=sha256(b"x"), side=Side.RIGHT),),
            height=3,
        )

        assert not verify_inclusion_proof(tree.root(), tree.leaf(2), 2, extended, sha256, height=3)

    @pytest.mark.parametrize("height", [2, 4])
    def test_height_disagrees_with_tree(self, tree, height):
        proof = tree.proof(2)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(2), 2, proof, sha256, height=height)

    @pytest.mark.parametrize("height", [0, -1, True, "3", None])
    def test_invalid_height_argument(self, tree, height):
        proof = tree.proof(2)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(2), 2, proof, sha256, height=height)

    def test_index_mismatch(self, tree):
        proof = tree.proof(2)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(2), 5, proof, sha256, height=3)

    def test_empty_proof(self, tree):
        empty = InclusionProof(leaf_index=0, leaf_digest=tree.leaf(0), steps=(), height=0)

        assert not verify_inclusion_proof(tree.leaf(0), tree.leaf(0), 0, empty, sha256, height=3)

    @pytest.mark.parametrize("bad_proof", [None, "proof", 42, [("a", "right")], {}])
    def test_not_a_proof(self, tree, bad_proof):
        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, bad_proof, sha256, height=3)

    @pytest.mark.parametrize("bad_digest", [None, "0xabc", 12345])
    def test_non_bytes_digests(self, tree, bad_digest):
        proof = tree.proof(0)

        assert not verify_inclusion_proof(bad_digest, tree.leaf(0), 0, proof, sha256, height=3)
        assert not verify_inclusion_proof(tree.root(), bad_digest, 0, proof, sha256, height=3)

    def test_non_step_entries(self, tree):
        proof = tree.proof(0)
        broken = replace(proof, steps=(("not", "a step"),) + proof.steps[1:])

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, broken, sha256, height=3)

    def test_non_bytes_sibling(self, tree):
        proof = tree.proof(0)
        broken = _with_step(proof, 0, ProofStep(sibling="deadbeef", side=Side.RIGHT))

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, broken, sha256, height=3)

    def test_string_side(self, tree):
        proof = tree.proof(0)
        broken = _with_step(proof, 0, ProofStep(sibling=proof.steps[0].sibling, side="up"))

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, broken, sha256, height=3)

    def test_out_of_range_index_in_proof(self, tree):
        proof = replace(tree.proof(0), leaf_index=8)

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), None, proof, sha256, height=3)

    def test_hash_function_errors_return_false(self, tree):
        def broken_hash(data):
            raise ValueError("unsupported")

        assert not verify_inclusion_proof(tree.root(), tree.leaf(0), 0, tree.proof(0), broken_hash, height=3)


class TestConvenienceClasses:

    def test_prover_prove(self, tree):
        proof = MerkleProver.prove(tree, 2)

        assert proof.leaf_digest == tree.leaf(2)
        assert MerkleVerifier.verify(tree.root(), proof, sha256, height=3)

    def test_prover_prove_all(self, partial_tree):
        proofs = MerkleProver.prove_all(partial_tree)

        assert [p.leaf_index for p in proofs] == list(range(8))
        assert all(MerkleVerifier.verify(partial_tree.root(), p, sha256, height=3) for p in proofs)

    def test_verifier_verify_rejects_non_proof(self, tree):
        assert not MerkleVerifier.verify(tree.root(), None, sha256, height=3)

    def test_verify_block(self, blocks, tree):
        proof = tree.proof(4)

        assert MerkleVerifier.verify_block(tree.root(), blocks[4], proof, sha256, height=3)
        assert not MerkleVerifier.verify_block(tree.root(), blocks[5], proof, sha256, height=3)
        assert not MerkleVerifier.verify_block(tree.root(), "text", proof, sha256, height=3)

    def test_verify_block_wrong_height(self, blocks, tree):
        proof = tree.proof(4)

        assert not MerkleVerifier.verify_block(tree.root(), blocks[4], proof, sha256, height=2)
        assert not MerkleVerifier.verify_block(tree.root(), blocks[4], proof, sha256, height=4)

    def test_require_passes_silently(self, tree):
        MerkleVerifier.require(tree.root(), tree.proof(1), sha256, height=3)

    def test_require_raises_on_failure(self, tree):
        other = make_tree(3, make_blocks(8, prefix="other"))

        with pytest.raises(MerkleVerificationException) as exc_info:
            MerkleVerifier.require(other.root(), tree.proof(1), sha256, height=3)

        assert exc_info.value.code == ErrorCodes.MERKLE_PROOF_INVALID
        assert exc_info.value.details["leaf_index"] == 1
