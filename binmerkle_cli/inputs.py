"""
CLI Inputs

Reads leaf files and resolves the tree configuration for a command from
the loaded config plus command-line overrides.
"""

from __future__ import annotations

import copy
from argparse import Namespace
from pathlib import Path

from binmerkle.config.runtime import RuntimeConfig, TreeConfig
from binmerkle.crypto.hashing import from_hex


def read_leaves(path: Path, hex_values: bool = False) -> list[bytes]:
    """
    Read one leaf per line.

    Lines are taken as UTF-8 text unless hex_values is set, in which case
    each line is decoded as hex (0x prefix optional). A trailing newline at
    the end of the file does not produce an empty leaf.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a line is not valid hex in hex mode
    """
    text = path.read_text(encoding="utf-8")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    lines = [line.rstrip("\r") for line in lines]

    if not hex_values:
        return [line.encode("utf-8") for line in lines]

    leaves = []
    for lineno, line in enumerate(lines, start=1):
        try:
            leaves.append(from_hex(line.strip()))
        except ValueError as e:
            raise ValueError(f"{path}:{lineno}: {e}") from e
    return leaves


def resolve_tree_config(args: Namespace, config: RuntimeConfig) -> TreeConfig:
    """Apply --depth/--algorithm/--hash-size/--hashed over the loaded config."""
    tree = copy.copy(config.tree)
    if getattr(args, "depth", None) is not None:
        tree.depth = args.depth
    if getattr(args, "algorithm", None) is not None:
        tree.hash_algorithm = args.algorithm
        # A new algorithm starts from its own natural size unless one is given
        tree.hash_size = None
    if getattr(args, "hash_size", None) is not None:
        tree.hash_size = args.hash_size
    if getattr(args, "hashed", False):
        tree.already_hashed = True
    return tree
