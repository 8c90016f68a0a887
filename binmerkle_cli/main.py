"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m binmerkle_cli build <leaves> [--hex] [--hashed] [--depth N] [--json]
    python -m binmerkle_cli prove <leaves> <index> [--out PATH] [--json]
    python -m binmerkle_cli verify <proof> --leaves PATH|--root HEX [--json]
    python -m binmerkle_cli config --init|--show

Environment Variables:
    BINMERKLE_DEPTH             Tree depth (default: 16)
    BINMERKLE_HASH_ALGORITHM    hashlib algorithm (default: sha256)
    BINMERKLE_HASH_SIZE         Digest size for blake2/shake algorithms
    BINMERKLE_ALREADY_HASHED    Treat leaves as digests (default: false)
    BINMERKLE_LOG_LEVEL         Log level (default: INFO)
    BINMERKLE_LOG_FILE          Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from binmerkle.schemas.errors import MerkleException
from binmerkle_cli import __version__
from binmerkle_cli.commands import build, prove, verify
from binmerkle_cli.config import DEFAULT_CONFIG_NAME, get_default_config_template, load_config


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


def _add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that builds a tree."""
    parser.add_argument(
        "--depth", "-d",
        type=int,
        default=None,
        help="Tree depth (overrides config)",
    )
    parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        help="hashlib algorithm name, e.g. sha256, blake2b (overrides config)",
    )
    parser.add_argument(
        "--hash-size",
        type=int,
        default=None,
        help="Digest size in bytes for blake2/shake algorithms",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Leaves file holds hex-encoded values, one per line",
    )
    parser.add_argument(
        "--hashed",
        action="store_true",
        default=False,
        help="Leaves are already digests (implies --hex)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="binmerkle",
        description="Build fixed-depth Merkle trees and create or verify membership proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/binmerkle/config.yaml)",
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
        help="Build a tree and print its root",
        description="Build a tree from a leaves file (one leaf per line).",
    )
    build_parser.add_argument("leaves", type=str, help="Path to the leaves file")
    _add_tree_arguments(build_parser)
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create a membership proof for one leaf",
        description="Build a tree from a leaves file and emit the proof for a leaf index.",
    )
    prove_parser.add_argument("leaves", type=str, help="Path to the leaves file")
    prove_parser.add_argument("index", type=int, help="Leaf index to prove")
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this path instead of stdout",
    )
    _add_tree_arguments(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a membership proof file",
        description="Verify a proof against a rebuilt tree (--leaves) or a trusted root (--root).",
    )
    verify_parser.add_argument("proof", type=str, help="Path to the proof JSON file")
    source = verify_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--leaves", "-l",
        type=str,
        default=None,
        help="Rebuild the tree from this leaves file and verify against it",
    )
    source.add_argument(
        "--root", "-r",
        type=str,
        default=None,
        help="Trusted root digest (hex) to verify against",
    )
    _add_tree_arguments(verify_parser)
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
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
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
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (BINMERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: binmerkle config [--init|--show]")
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

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, MerkleException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleException as e:
        if args.log_level == "DEBUG":
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
