"""
CLI Verify Command

Verify an inclusion proof document offline against a root.

The root comes from --root, or from the proof document itself. With
--block, the block file is hashed and must be the proven leaf.

The tree height is trusted input like the root: --height is required
whenever --block or --root is given. Without either, the document is
only checked for internal consistency against its own height.

Usage:
    arbor verify proof.json [--root 0x... --height N] [--block FILE --height N] [--hash ALG] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from arbor.config import RuntimeConfig
from arbor.crypto.hashing import from_hex, get_hash_function, to_hex
from arbor.merkle import MerkleVerifier
from arbor.schemas.errors import ArborException
from arbor.schemas.proof import InclusionProofRecord
from arbor_cli.commands.build import wants_json


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    root: str = ""
    leaf_index: int = 0
    height: int = 0
    hash_algorithm: str = ""
    block_checked: bool = False
    ok: bool = False
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def _fail(summary: VerifySummary, output_json: bool, error: ArborException | str) -> int:
    if isinstance(error, ArborException):
        summary.errors.append(error.to_error_model().model_dump())
        message = error.message
    else:
        summary.errors.append({"message": error})
        message = error

    if output_json:
        print(json.dumps(summary.to_dict(), indent=2, default=str))
    else:
        print(f"Error: {message}", file=sys.stderr)
    return EXIT_RUNTIME_ERROR


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    config: RuntimeConfig = getattr(args, "cli_config", None) or RuntimeConfig()
    output_json = wants_json(args)
    summary = VerifySummary(proof_path=str(args.proof_path))

    logger.info(f"Loading proof: {args.proof_path}")
    try:
        record = InclusionProofRecord.loads(Path(args.proof_path).read_bytes())
    except ArborException as e:
        return _fail(summary, output_json, e)

    algorithm = args.hash or record.hash_algorithm or config.hash_algorithm
    try:
        hash_fn = get_hash_function(algorithm)
    except ArborException as e:
        return _fail(summary, output_json, e)

    if args.root:
        try:
            root = from_hex(args.root)
        except ValueError as e:
            return _fail(summary, output_json, str(e))
    else:
        root = record.root_bytes()
    if root is None:
        return _fail(summary, output_json, "No root given and proof document carries none")

    if args.height is None and (args.block or args.root):
        return _fail(summary, output_json, "--height is required with --block or --root")
    height = args.height if args.height is not None else record.height

    proof = record.to_proof()
    summary.root = to_hex(root)
    summary.leaf_index = proof.leaf_index
    summary.height = height
    summary.hash_algorithm = algorithm

    if args.block:
        block = Path(args.block).read_bytes()
        summary.block_checked = True
        summary.ok = MerkleVerifier.verify_block(root, block, proof, hash_fn, height=height)
    else:
        summary.ok = MerkleVerifier.verify(root, proof, hash_fn, height=height)

    if output_json:
        print(json.dumps(summary.to_dict(), indent=2, default=str))
    else:
        status = "VALID" if summary.ok else "INVALID"
        print(f"Proof:  {summary.proof_path}")
        print(f"Leaf:   {summary.leaf_index} (height {summary.height})")
        print(f"Root:   {summary.root}")
        print(f"Result: {status}")

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
