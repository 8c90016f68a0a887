"""
Tree Builder
Deterministic bottom-up construction of fixed-depth Merkle trees.

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = hash(value), or value verbatim when pre-hashed
2. Parent hashing: parent = hash(left || right), left = even index, right = odd
3. Padding: unused leaf slots all hold hash(b"\\x00" * hash_size)
4. Levels are built strictly from the leaf level up to the root

Determinism Notes:
- Leaf order is preserved; nothing is sorted
- The caller's leaf sequence is never modified
- A failed build returns nothing; there is no partial tree
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from binmerkle.crypto.hashing import Hasher, hash_once, hash_pair, new_hasher
from binmerkle.merkle.node import Node
from binmerkle.merkle.shape import DEPTH_MAX, TreeShape, compute_shape
from binmerkle.merkle.tree import MerkleTree
from binmerkle.schemas.errors import (
    HashSizeMismatchException,
    LeafSizeMismatchException,
    TooManyLeavesException,
)


logger = logging.getLogger(__name__)


def empty_leaf_digest(hasher: Hasher, hash_size: int) -> bytes:
    """Digest used for every padding leaf: hash of hash_size zero bytes."""
    return hash_once(hasher, bytes(hash_size))


class TreeBuilder:
    """
    Builds MerkleTree instances of one shape with one hasher.

    The builder owns its hasher for the duration of each build; do not
    share a builder across threads without external locking.

    Example:
        >>> builder = TreeBuilder(compute_shape(3, 32), new_hasher("sha256"))
        >>> tree = builder.build([b"a", b"b", b"c"])
        >>> len(tree.levels[3])
        8
    """

    def __init__(self, shape: TreeShape, hasher: Hasher) -> None:
        if hasher.digest_size != shape.hash_size:
            raise HashSizeMismatchException(shape.hash_size, hasher.digest_size)
        self.shape = shape
        self.hasher = hasher

    def _leaf_digests(self, leaves: Sequence[bytes], already_hashed: bool) -> list[bytes]:
        if already_hashed:
            digests = []
            for i, leaf in enumerate(leaves):
                if len(leaf) != self.shape.hash_size:
                    raise LeafSizeMismatchException(i, len(leaf), self.shape.hash_size)
                digests.append(bytes(leaf))
            return digests
        return [hash_once(self.hasher, leaf) for leaf in leaves]

    def _build_next_level(self, level: Sequence[Node]) -> list[Node]:
        """Pair adjacent nodes (even=left, odd=right) into their parents."""
        parents: list[Node] = []
        for i in range(0, len(level), 2):
            left = level[i]
            right = level[i + 1]
            parents.append(Node(hash_pair(self.hasher, left.digest, right.digest), left, right))
        return parents

    def build(self, leaves: Sequence[bytes], already_hashed: bool = False) -> MerkleTree:
        """
        Build a tree from leaf values.

        Args:
            leaves: Up to leaf_capacity byte strings, in tree order
            already_hashed: Use the values verbatim as leaf digests; each
                            must then be exactly hash_size bytes

        Returns:
            The built MerkleTree

        Raises:
            TooManyLeavesException: More leaves than leaf slots
            LeafSizeMismatchException: A pre-hashed leaf has the wrong length
            HashPrimitiveException: The digest primitive failed
        """
        shape = self.shape
        if len(leaves) > shape.leaf_capacity:
            raise TooManyLeavesException(len(leaves), shape.leaf_capacity)

        digests = self._leaf_digests(leaves, already_hashed)
        padding = shape.leaf_capacity - len(digests)
        if padding:
            digests.extend([empty_leaf_digest(self.hasher, shape.hash_size)] * padding)

        logger.debug(
            "Building tree depth=%d hash_size=%d leaves=%d padding=%d",
            shape.depth, shape.hash_size, len(leaves), padding,
        )

        levels: list[list[Node]] = [[] for _ in range(shape.depth + 1)]
        levels[shape.depth] = [Node(digest) for digest in digests]

        for d in range(shape.depth, 0, -1):
            levels[d - 1] = self._build_next_level(levels[d])

        tree = MerkleTree(shape, levels, self.hasher, leaf_count=len(leaves))
        logger.debug("Built tree root=%s", tree.root_hex())
        return tree


def build_tree(
    leaves: Sequence[bytes],
    depth: int = DEPTH_MAX,
    hasher: Optional[Hasher] = None,
    already_hashed: bool = False,
) -> MerkleTree:
    """
    Build a tree in one call.

    Args:
        leaves: Leaf values in tree order
        depth: Tree depth (default DEPTH_MAX)
        hasher: Digest primitive (default a new SHA-256 hasher)
        already_hashed: Whether leaves are already digests

    Returns:
        The built MerkleTree
    """
    if hasher is None:
        hasher = new_hasher()
    shape = compute_shape(depth, hasher.digest_size)
    return TreeBuilder(shape, hasher).build(leaves, already_hashed=already_hashed)


__all__ = [
    "TreeBuilder",
    "build_tree",
    "empty_leaf_digest",
]
