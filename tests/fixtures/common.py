"""
Common test fixtures shared by all modules.

Provides:
- stub_hash: short fixed-width test hash (SHA-256 cut to 8 bytes)
- CountingHash: wraps a hash function and counts invocations
- FailingHash: raises on a trigger input, for all-or-nothing checks
- Block and tree factories
"""

from typing import Callable, Optional, Sequence

from arbor.crypto.hashing import sha256
from arbor.merkle import MerkleTree


STUB_DIGEST_SIZE = 8


def stub_hash(data: bytes) -> bytes:
    """First 8 bytes of SHA-256; readable in failures, still input-sensitive."""
    return sha256(data)[:STUB_DIGEST_SIZE]


class CountingHash:
    """Hash function wrapper that records how often it was called."""

    def __init__(self, inner: Callable[[bytes], bytes] = sha256) -> None:
        self.inner = inner
        self.calls = 0

    def __call__(self, data: bytes) -> bytes:
        self.calls += 1
        return self.inner(data)

    def reset(self) -> None:
        self.calls = 0


class FailingHash:
    """Hash function that raises ValueError when it sees the trigger bytes."""

    def __init__(self, trigger: bytes = b"boom", inner: Callable[[bytes], bytes] = sha256) -> None:
        self.trigger = trigger
        self.inner = inner

    def __call__(self, data: bytes) -> bytes:
        if data == self.trigger:
            raise ValueError("hash function refused input")
        return self.inner(data)


def make_blocks(count: int, prefix: str = "block") -> list[bytes]:
    """Create distinct blocks: b"block0", b"block1", ..."""
    return [f"{prefix}{i}".encode() for i in range(count)]


def make_tree(
    height: int = 3,
    blocks: Optional[Sequence[bytes]] = None,
    hash_fn: Callable[[bytes], bytes] = sha256,
) -> MerkleTree:
    """Build a tree; defaults to a full tree of distinct blocks."""
    if blocks is None:
        blocks = make_blocks(1 << height)
    return MerkleTree.from_blocks(height, blocks, hash_fn)
