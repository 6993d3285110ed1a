"""
CLI Prove Command

Build a tree over a list of files and emit an inclusion proof for one
of them as a JSON document (InclusionProofRecord).

Usage:
    arbor prove a.txt b.txt c.txt --index 1 [--height N] [--hash ALG] [--out PATH]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from pathlib import Path

from arbor.schemas.proof import InclusionProofRecord
from arbor_cli.commands.build import tree_from_args


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    tree = tree_from_args(args)

    logger.info(f"Generating proof for leaf {args.index}")
    record = InclusionProofRecord.from_tree(tree, args.index)
    document = record.model_dump_json(indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(document + "\n")
        logger.info(f"Wrote proof to {out_path}")
        print(f"Proof for leaf {args.index} written to {out_path}")
        print(f"Root: {record.root}")
    else:
        print(document)

    return EXIT_SUCCESS
