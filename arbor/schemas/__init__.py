"""
Schemas and error taxonomy.

Wire records for proofs live in arbor.schemas.proof and are imported
from there directly (they depend on arbor.crypto, which depends on
this package's errors).
"""

from .errors import (
    ErrorCodes,
    ArborError,
    ArborException,
    InvalidHeightException,
    CapacityExceededException,
    IndexOutOfBoundsException,
    NodeOutOfRangeException,
    UninitializedTreeException,
    UnknownHashAlgorithmException,
    ProofFormatException,
    MerkleVerificationException,
)
from .versioning import (
    SCHEMA_VERSION,
    SchemaVersion,
)

__all__ = [
    "ErrorCodes",
    "ArborError",
    "ArborException",
    "InvalidHeightException",
    "CapacityExceededException",
    "IndexOutOfBoundsException",
    "NodeOutOfRangeException",
    "UninitializedTreeException",
    "UnknownHashAlgorithmException",
    "ProofFormatException",
    "MerkleVerificationException",
    "SCHEMA_VERSION",
    "SchemaVersion",
]
