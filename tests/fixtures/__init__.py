"""
Test fixtures package for Arbor tests.

Usage:
    from fixtures import make_tree, stub_hash

    def test_something():
        tree = make_tree(height=2, blocks=[b"a", b"b"])
"""

from .common import (
    STUB_DIGEST_SIZE,
    stub_hash,
    CountingHash,
    FailingHash,
    make_blocks,
    make_tree,
)

__all__ = [
    "STUB_DIGEST_SIZE",
    "stub_hash",
    "CountingHash",
    "FailingHash",
    "make_blocks",
    "make_tree",
]
