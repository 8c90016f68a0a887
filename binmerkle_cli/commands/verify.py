"""
CLI Verify Command

Verify a membership proof file.

With --leaves the tree is rebuilt and the proof is checked against the
rebuilt tree's root. With --root the proof is checked against that root
alone. The root recorded inside the proof file is never trusted.

Usage:
    binmerkle verify proof.json --leaves leaves.txt [--hex] [--json]
    binmerkle verify proof.json --root 0x... [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from binmerkle.crypto.hashing import from_hex, new_hasher
from binmerkle.merkle.proofs import MembershipProof
from binmerkle.schemas.errors import MerkleException
from binmerkle_cli.commands.build import build_from_file, print_error
from binmerkle_cli.inputs import resolve_tree_config


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    leaf_index: int = 0
    root: str = ""
    mode: str = ""  # "tree" or "root"
    ok: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_proof(path: Path) -> MembershipProof:
    """Load and validate a proof JSON file."""
    return MembershipProof.model_validate_json(path.read_text(encoding="utf-8"))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 valid, 1 error, 2 proof does not verify)
    """
    proof_path = Path(args.proof)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proof = load_proof(proof_path)
    except ValidationError as e:
        print(f"Error: Invalid proof file: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not args.leaves and not args.root:
        print("Error: verify needs a trusted root (--root) or the leaves (--leaves)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    trusted_root = None
    if args.root:
        try:
            trusted_root = from_hex(args.root)
        except ValueError as e:
            print(f"Error: Invalid --root: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    summary = VerifySummary(proof_path=str(proof_path), leaf_index=proof.leaf_index)

    try:
        if args.leaves:
            tree_config = resolve_tree_config(args, args.cli_config)
            if args.depth is None:
                tree_config.depth = proof.depth
            if args.algorithm is None and proof.algorithm:
                tree_config.hash_algorithm = proof.algorithm
                if args.hash_size is None:
                    tree_config.hash_size = proof.hash_size
            tree = build_from_file(Path(args.leaves), tree_config, args.hex)
            summary.mode = "tree"
            summary.root = "0x" + tree.root_hex()
            summary.ok = (
                tree.verify_membership_proof(proof.leaf_index, proof.proof_bytes())
                and tree.leaf(proof.leaf_index).digest == from_hex(proof.leaf)
            )
        else:
            hasher = None
            if args.algorithm is not None:
                hasher = new_hasher(args.algorithm, args.hash_size or proof.hash_size)
            summary.mode = "root"
            summary.root = "0x" + trusted_root.hex()
            summary.ok = proof.verify(trusted_root, hasher)
    except MerkleException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR
    except (OSError, ValueError) as e:
        print(f"Error reading leaves: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info("Proof for leaf %d: %s", proof.leaf_index, "valid" if summary.ok else "invalid")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"leaf_index: {summary.leaf_index}")
        print(f"root: {summary.root}")
        print(f"ok: {str(summary.ok).lower()}")

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
