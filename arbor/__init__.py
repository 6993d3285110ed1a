"""
Arbor - fixed-height Merkle trees.

Commit to an ordered block sequence with a single root digest and prove
any one block's membership without revealing the rest.
"""

__version__ = "0.1.0"
