"""
Core cryptographic utilities.

Provides the pluggable hash function boundary used by the Merkle tree.
"""
from .hashing import (
    HashFunction,
    HASH_FUNCTIONS,
    DEFAULT_HASH_ALGORITHM,
    sha256,
    sha512,
    sha3_256,
    blake2b,
    blake2s,
    get_hash_function,
    hash_algorithm_name,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "HashFunction",
    "HASH_FUNCTIONS",
    "DEFAULT_HASH_ALGORITHM",
    "sha256",
    "sha512",
    "sha3_256",
    "blake2b",
    "blake2s",
    "get_hash_function",
    "hash_algorithm_name",
    "hash_concat",
    "to_hex",
    "from_hex",
]
