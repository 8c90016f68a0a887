"""
CLI Prove Command

Build a tree from a leaves file and emit the membership proof for one leaf.

Usage:
    binmerkle prove leaves.txt 2 [--out proof.json] [--hex] [--depth N]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from binmerkle.schemas.errors import MerkleException
from binmerkle_cli.commands.build import build_from_file, print_error
from binmerkle_cli.inputs import resolve_tree_config


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    leaves_path = Path(args.leaves)
    tree_config = resolve_tree_config(args, args.cli_config)

    if not leaves_path.exists():
        print(f"Error: Leaves file not found: {leaves_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree = build_from_file(leaves_path, tree_config, args.hex)
        proof = tree.membership_proof(args.index)
    except MerkleException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR
    except ValueError as e:
        print(f"Error reading leaves: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    payload = proof.model_dump_json(indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote proof for leaf %d to %s", args.index, out_path)
        if not args.json:
            print(f"Wrote proof to {out_path}")
    else:
        print(payload)

    return EXIT_SUCCESS
