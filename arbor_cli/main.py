"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m arbor_cli build FILE... [--height N] [--hash ALG] [--json]
    python -m arbor_cli prove FILE... --index I [--height N] [--out PATH]
    python -m arbor_cli verify PROOF [--root 0x...] [--block FILE] [--height N] [--json]
    python -m arbor_cli config --init

Environment Variables:
    ARBOR_HASH_ALGORITHM     Hash algorithm (default: sha256)
    ARBOR_DEFAULT_HEIGHT     Default tree height (default: 4)
    ARBOR_LOG_LEVEL          Log level (default: INFO)
    ARBOR_LOG_FILE           Optional log file
    ARBOR_OUTPUT_FORMAT      human or json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from arbor.config import get_default_config_template, load_config
from arbor.crypto.hashing import HASH_FUNCTIONS
from arbor.schemas.errors import ArborException
from arbor_cli import __version__
from arbor_cli.commands import build, prove, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_tree_options(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "files",
        nargs="+",
        help="Block files, one leaf per file, in leaf order",
    )
    subparser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Tree height (default: configured height, raised to fit the blocks)",
    )
    subparser.add_argument(
        "--hash",
        type=str,
        default=None,
        choices=sorted(HASH_FUNCTIONS),
        help="Hash algorithm (default: from config)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="arbor",
        description="Arbor CLI - Build fixed-height Merkle trees, issue and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./arbor.json or ~/.config/arbor/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree over files and print its root",
        description="Hash each file as one block and print the root and leaves.",
    )
    _add_tree_options(build_parser)
    build_parser.add_argument(
        "--no-leaves",
        action="store_true",
        default=False,
        help="Omit leaf digests from the output",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof for one file",
        description="Build a tree over files and write an inclusion proof document for one leaf.",
    )
    _add_tree_options(prove_parser)
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        required=True,
        help="0-based leaf index to prove",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof document here instead of stdout",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof offline",
        description="Check a proof document against a root, optionally binding it to a block file.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to proof JSON document",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected root (0x hex); defaults to the root inside the proof document",
    )
    verify_parser.add_argument(
        "--block",
        type=str,
        default=None,
        help="Block file that must hash to the proven leaf",
    )
    verify_parser.add_argument(
        "--hash",
        type=str,
        default=None,
        choices=sorted(HASH_FUNCTIONS),
        help="Hash algorithm (default: from proof document, then config)",
    )
    verify_parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Height of the committed tree (required with --block or --root)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="arbor.json",
        help="Path for config file (default: arbor.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (ARBOR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: arbor config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (ArborException, OSError) as e:
        logging.getLogger(__name__).debug(traceback.format_exc())
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
