"""
Schemas
File: proof.py

Purpose: Wire records for inclusion proofs and tree summaries.
Digests are carried as 0x-prefixed hex strings so documents are
JSON-safe and byte-exact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from arbor.crypto.hashing import from_hex, hash_algorithm_name, to_hex
from arbor.merkle.merkle_proofs import InclusionProof, ProofStep, Side

from .errors import ProofFormatException
from .versioning import SCHEMA_VERSION, SchemaVersion

if TYPE_CHECKING:
    from arbor.merkle.merkle_tree import MerkleTree


HEX_DIGEST_PATTERN = r"^0x([0-9a-fA-F]{2})*$"


class ProofStepRecord(BaseModel):
    """One sibling on the proof path."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sibling: str = Field(..., description="Sibling digest (0x hex)", pattern=HEX_DIGEST_PATTERN)
    side: Literal["left", "right"] = Field(..., description="Side the sibling occupies")


class InclusionProofRecord(BaseModel):
    """
    Serializable inclusion proof.

    The root is optional: a proof document may travel separately from
    the commitment it is checked against.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: SchemaVersion = Field(default=SCHEMA_VERSION)
    hash_algorithm: str | None = Field(
        default=None,
        description="Registered hash algorithm name; None for custom hash functions",
    )
    height: int = Field(..., ge=1, description="Height of the source tree")
    leaf_index: int = Field(..., ge=0, description="0-based leaf position")
    leaf_digest: str = Field(..., pattern=HEX_DIGEST_PATTERN)
    steps: list[ProofStepRecord] = Field(default_factory=list)
    root: str | None = Field(default=None, pattern=HEX_DIGEST_PATTERN)

    @model_validator(mode="after")
    def validate_shape(self) -> "InclusionProofRecord":
        """Step count must equal height and the index must fit the tree."""
        if len(self.steps) != self.height:
            raise ValueError(
                f"Proof has {len(self.steps)} steps but height {self.height}"
            )
        if self.leaf_index >= (1 << self.height):
            raise ValueError(
                f"Leaf index {self.leaf_index} out of range for height {self.height}"
            )
        return self

    @classmethod
    def from_proof(
        cls,
        proof: InclusionProof,
        root: bytes | None = None,
        hash_algorithm: str | None = None,
    ) -> "InclusionProofRecord":
        """Encode an InclusionProof (and optionally its root)."""
        return cls(
            hash_algorithm=hash_algorithm,
            height=proof.height,
            leaf_index=proof.leaf_index,
            leaf_digest=to_hex(proof.leaf_digest),
            steps=[
                ProofStepRecord(sibling=to_hex(step.sibling), side=step.side.value)
                for step in proof.steps
            ],
            root=to_hex(root) if root is not None else None,
        )

    @classmethod
    def from_tree(cls, tree: "MerkleTree", index: int) -> "InclusionProofRecord":
        """Take a proof from a built tree, including its root and algorithm name."""
        return cls.from_proof(
            tree.proof(index),
            root=tree.root(),
            hash_algorithm=hash_algorithm_name(tree.hash_fn),
        )

    @classmethod
    def loads(cls, data: str | bytes) -> "InclusionProofRecord":
        """
        Parse a JSON proof document.

        Raises:
            ProofFormatException: If the document is not a valid proof record
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise ProofFormatException(
                "Invalid inclusion proof document",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    def to_proof(self) -> InclusionProof:
        """Decode back to an InclusionProof."""
        return InclusionProof(
            leaf_index=self.leaf_index,
            leaf_digest=from_hex(self.leaf_digest),
            steps=tuple(
                ProofStep(sibling=from_hex(step.sibling), side=Side(step.side))
                for step in self.steps
            ),
            height=self.height,
        )

    def root_bytes(self) -> bytes | None:
        return from_hex(self.root) if self.root is not None else None


class TreeSummary(BaseModel):
    """Snapshot of a built tree for display or export."""

    model_config = ConfigDict(extra="forbid")

    schema_version: SchemaVersion = Field(default=SCHEMA_VERSION)
    hash_algorithm: str | None = Field(default=None)
    height: int = Field(..., ge=1)
    capacity: int = Field(..., ge=2)
    filled: int = Field(..., ge=0)
    root: str = Field(..., pattern=HEX_DIGEST_PATTERN)
    leaves: list[str] = Field(default_factory=list)

    @classmethod
    def from_tree(cls, tree: "MerkleTree", include_leaves: bool = True) -> "TreeSummary":
        return cls(
            hash_algorithm=hash_algorithm_name(tree.hash_fn),
            height=tree.height,
            capacity=tree.capacity,
            filled=tree.filled,
            root=to_hex(tree.root()),
            leaves=[to_hex(leaf) for leaf in tree.leaves()] if include_leaves else [],
        )


__all__ = [
    "HEX_DIGEST_PATTERN",
    "ProofStepRecord",
    "InclusionProofRecord",
    "TreeSummary",
]
