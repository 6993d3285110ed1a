"""
Hashing Utilities
Pluggable hash functions and byte helpers for Merkle commitments.

This module provides:
- HashFunction: the callable protocol every tree hashes through
- Stock hashlib-backed hash functions, resolvable by name
- hash_concat: the single parent-combination rule (left ++ right)
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- Hash functions are treated as opaque: bytes in, fixed-size digest out
- Concatenation order is always left bytes immediately followed by right
  bytes, with no separator or domain prefix
"""
from __future__ import annotations

import hashlib
from typing import Callable, Protocol

from arbor.schemas.errors import UnknownHashAlgorithmException


class HashFunction(Protocol):
    """Any callable mapping a byte sequence to a fixed-size digest."""

    def __call__(self, data: bytes) -> bytes: ...


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha512(data: bytes) -> bytes:
    """Compute SHA-512 hash of raw bytes (64-byte digest)."""
    return hashlib.sha512(data).digest()


def sha3_256(data: bytes) -> bytes:
    """Compute SHA3-256 hash of raw bytes (32-byte digest)."""
    return hashlib.sha3_256(data).digest()


def blake2b(data: bytes) -> bytes:
    """Compute BLAKE2b hash of raw bytes (64-byte digest)."""
    return hashlib.blake2b(data).digest()


def blake2s(data: bytes) -> bytes:
    """Compute BLAKE2s hash of raw bytes (32-byte digest)."""
    return hashlib.blake2s(data).digest()


HASH_FUNCTIONS: dict[str, Callable[[bytes], bytes]] = {
    "sha256": sha256,
    "sha512": sha512,
    "sha3_256": sha3_256,
    "blake2b": blake2b,
    "blake2s": blake2s,
}

DEFAULT_HASH_ALGORITHM = "sha256"


def get_hash_function(name: str) -> HashFunction:
    """
    Resolve a stock hash function by algorithm name.

    Names are case-insensitive and accept "-" in place of "_"
    (e.g. "SHA3-256").

    Args:
        name: Algorithm name

    Returns:
        The hash function

    Raises:
        UnknownHashAlgorithmException: If no function is registered for name
    """
    key = name.strip().lower().replace("-", "_")
    try:
        return HASH_FUNCTIONS[key]
    except KeyError:
        raise UnknownHashAlgorithmException(name, sorted(HASH_FUNCTIONS)) from None


def hash_algorithm_name(hash_fn: HashFunction) -> str | None:
    """Return the registered name of a stock hash function, or None if custom."""
    for name, fn in HASH_FUNCTIONS.items():
        if fn is hash_fn:
            return name
    return None


def hash_concat(hash_fn: HashFunction, left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two child digests.

    This is the parent rule for every internal node:
    parent = hash_fn(left + right)

    Args:
        hash_fn: Hash function shared by the whole tree
        left: Left child digest
        right: Right child digest

    Returns:
        Parent digest
    """
    return hash_fn(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
