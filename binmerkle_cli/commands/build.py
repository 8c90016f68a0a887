"""
CLI Build Command

Build a tree from a leaves file and print its root.

Usage:
    binmerkle build leaves.txt [--hex] [--hashed] [--depth N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from binmerkle.config.runtime import TreeConfig
from binmerkle.merkle.tree import MerkleTree
from binmerkle.schemas.errors import MerkleException
from binmerkle_cli.inputs import read_leaves, resolve_tree_config


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    leaves_path: str = ""
    root: str = ""
    depth: int = 0
    hash_algorithm: str = ""
    hash_size: int = 0
    leaf_count: int = 0
    leaf_capacity: int = 0
    node_capacity: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_from_file(leaves_path: Path, tree_config: TreeConfig, hex_values: bool) -> MerkleTree:
    """Read leaves and build the tree they describe."""
    leaves = read_leaves(leaves_path, hex_values=hex_values or tree_config.already_hashed)
    logger.info("Read %d leaves from %s", len(leaves), leaves_path)
    builder = tree_config.new_builder()
    return builder.build(leaves, already_hashed=tree_config.already_hashed)


def print_error(err: MerkleException, output_json: bool) -> None:
    """Report a library error on stderr (or stdout as JSON)."""
    if output_json:
        print(err.to_error_model().model_dump_json(indent=2))
    else:
        print(f"Error [{err.code}]: {err.message}", file=sys.stderr)


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

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
    except MerkleException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR
    except ValueError as e:
        print(f"Error reading leaves: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = BuildSummary(
        leaves_path=str(leaves_path),
        root="0x" + tree.root_hex(),
        depth=tree.depth,
        hash_algorithm=tree_config.hash_algorithm,
        hash_size=tree.hash_size,
        leaf_count=tree.leaf_count,
        leaf_capacity=tree.leaf_capacity,
        node_capacity=tree.node_capacity,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"root: {summary.root}")
        print(f"depth: {summary.depth}")
        print(f"leaves: {summary.leaf_count}/{summary.leaf_capacity}")

    return EXIT_SUCCESS
