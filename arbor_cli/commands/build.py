"""
CLI Build Command

Build a Merkle tree over a list of files (one block per file, in
argument order) and print its root.

Usage:
    arbor build a.txt b.txt c.txt [--height N] [--hash ALG] [--json] [--no-leaves]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path
from typing import Sequence

from arbor.config import RuntimeConfig
from arbor.crypto.hashing import get_hash_function
from arbor.merkle import MerkleTree
from arbor.schemas.proof import TreeSummary


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_blocks(paths: Sequence[str]) -> list[bytes]:
    """Read each file's raw bytes as one block."""
    blocks = []
    for path in paths:
        logger.debug(f"Reading block from {path}")
        blocks.append(Path(path).read_bytes())
    return blocks


def fit_height(block_count: int, minimum: int) -> int:
    """Smallest height >= minimum whose capacity holds block_count leaves."""
    height = max(minimum, 1)
    while (1 << height) < block_count:
        height += 1
    return height


def tree_from_args(args: Namespace) -> MerkleTree:
    """
    Build a tree from the block files and tree options on args.

    An explicit --height is used as-is (and may fail with
    CapacityExceededException); otherwise the configured default height
    is raised just enough to fit every block.
    """
    config: RuntimeConfig = getattr(args, "cli_config", None) or RuntimeConfig()
    algorithm = args.hash or config.hash_algorithm
    hash_fn = get_hash_function(algorithm)

    blocks = load_blocks(args.files)
    if args.height is not None:
        height = args.height
    else:
        height = fit_height(len(blocks), config.default_height)
        if height != config.default_height:
            logger.info(f"Raised height to {height} to fit {len(blocks)} blocks")

    logger.info(f"Building tree: height={height} blocks={len(blocks)} hash={algorithm}")
    return MerkleTree.from_blocks(height, blocks, hash_fn)


def wants_json(args: Namespace) -> bool:
    """--json flag, or output_format=json in config."""
    config = getattr(args, "cli_config", None)
    return bool(getattr(args, "json", False)) or (config is not None and config.output_format == "json")


def print_summary(summary: TreeSummary, output_json: bool) -> None:
    if output_json:
        print(json.dumps(summary.model_dump(), indent=2))
        return

    print(f"Root:      {summary.root}")
    print(f"Height:    {summary.height}")
    print(f"Capacity:  {summary.capacity}")
    print(f"Filled:    {summary.filled}")
    print(f"Hash:      {summary.hash_algorithm}")
    if summary.leaves:
        print("Leaves:")
        for i, leaf in enumerate(summary.leaves):
            marker = "" if i < summary.filled else "  (padding)"
            print(f"  [{i}] {leaf}{marker}")


def build_cmd(args: Namespace) -> int:
    """Handle build command."""
    tree = tree_from_args(args)
    summary = TreeSummary.from_tree(tree, include_leaves=not args.no_leaves)
    print_summary(summary, wants_json(args))
    return EXIT_SUCCESS
