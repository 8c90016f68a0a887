"""
Common test fixtures shared by all modules.

Provides factory functions and known-answer constants for:
- Hashers
- Leaf values
- Built trees

The known-answer tree is depth 3, SHA-256, with three 8-byte leaves
(00.., 01.., 02..) and five padding slots.
"""

from typing import Optional

from binmerkle.crypto.hashing import Hasher, new_hasher
from binmerkle.merkle.builder import TreeBuilder
from binmerkle.merkle.shape import compute_shape
from binmerkle.merkle.tree import MerkleTree


# =============================================================================
# Known Answers
# =============================================================================

KNOWN_LEAVES = [bytes([i]) * 8 for i in range(3)]

KNOWN_ROOT_HEX = "f7a08c267a5f438acae772d3bd3c5721188cf4eec29f544d2621d049ec24b4c5"

# sha256(b"\x00" * 32): the padding leaf digest for 32-byte trees
EMPTY_LEAF_SHA256_HEX = "66687aadf862bd776c8fc18b8e9f8e20089714856ee233b3902a591d0d5f2925"

KNOWN_PROOF_INDEX_2_HEX = (
    "66687aadf862bd776c8fc18b8e9f8e20089714856ee233b3902a591d0d5f2925"
    "54117bad1f06fb064c25d24002bb68de5835a800d7ad60f679b222a6810c290f"
    "1223349a40d2ee10bd1bebb5889ef8018c8bc13359ed94b387810af96c6e4268"
)


# =============================================================================
# Factories
# =============================================================================

def make_hasher(algorithm: str = "sha256", digest_size: Optional[int] = None) -> Hasher:
    """Create a fresh hasher."""
    return new_hasher(algorithm, digest_size)


def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    """Create count distinct UTF-8 leaf values."""
    return [f"{prefix}{i}".encode("utf-8") for i in range(count)]


def make_tree(
    leaves: Optional[list[bytes]] = None,
    depth: int = 3,
    hasher: Optional[Hasher] = None,
    already_hashed: bool = False,
) -> MerkleTree:
    """Build a tree; defaults to the known-answer tree."""
    if leaves is None:
        leaves = list(KNOWN_LEAVES)
    if hasher is None:
        hasher = make_hasher()
    builder = TreeBuilder(compute_shape(depth, hasher.digest_size), hasher)
    return builder.build(leaves, already_hashed=already_hashed)
