"""
Arbor CLI

Command-line interface for building Merkle trees over files,
issuing inclusion proofs, and verifying them offline.

Usage:
    python -m arbor_cli build a.txt b.txt c.txt --height 2
    python -m arbor_cli prove a.txt b.txt c.txt --index 1 --out proof.json
    python -m arbor_cli verify proof.json --block b.txt
    python -m arbor_cli config --show
"""

__version__ = "0.1.0"
