"""
Tree Shape
Maps (depth, hash size) to leaf and node capacities.

A tree of depth d is a full binary tree with 2^d leaf slots and
2^(d+1) - 1 nodes in total. Depth and hash size are bounded so that a
shape is always cheap to allocate and every digest fits the supported
hash primitives.
"""
from __future__ import annotations

from dataclasses import dataclass

from binmerkle.schemas.errors import (
    DepthTooLargeException,
    DepthTooSmallException,
    HashSizeTooLargeException,
    HashSizeTooSmallException,
)


DEPTH_MIN = 1
DEPTH_MAX = 16
HASH_SIZE_MIN = 1  # bytes
HASH_SIZE_MAX = 64  # bytes


@dataclass(frozen=True)
class TreeShape:
    """
    Validated dimensions of a fixed-depth tree.

    Attributes:
        depth: Number of levels below the root
        hash_size: Digest length in bytes
        leaf_capacity: Number of leaf slots, 2^depth
        node_capacity: Total node count, 2 * leaf_capacity - 1
    """
    depth: int
    hash_size: int
    leaf_capacity: int
    node_capacity: int

    @property
    def proof_size(self) -> int:
        """Byte length of a membership proof: one sibling digest per level."""
        return self.depth * self.hash_size


def compute_shape(depth: int, hash_size: int) -> TreeShape:
    """
    Validate depth and hash size and derive the tree capacities.

    Args:
        depth: Tree depth, DEPTH_MIN..DEPTH_MAX
        hash_size: Digest length in bytes, HASH_SIZE_MIN..HASH_SIZE_MAX

    Returns:
        TreeShape with leaf_capacity = 2^depth and
        node_capacity = 2^depth + 2^(depth-1) + ... + 1

    Raises:
        DepthTooSmallException, DepthTooLargeException,
        HashSizeTooSmallException, HashSizeTooLargeException
    """
    if depth < DEPTH_MIN:
        raise DepthTooSmallException(depth, DEPTH_MIN)
    if depth > DEPTH_MAX:
        raise DepthTooLargeException(depth, DEPTH_MAX)
    if hash_size < HASH_SIZE_MIN:
        raise HashSizeTooSmallException(hash_size, HASH_SIZE_MIN)
    if hash_size > HASH_SIZE_MAX:
        raise HashSizeTooLargeException(hash_size, HASH_SIZE_MAX)

    leaf_capacity = 1 << depth

    node_capacity = 0
    width = leaf_capacity
    while width >= 1:
        node_capacity += width
        width //= 2

    return TreeShape(
        depth=depth,
        hash_size=hash_size,
        leaf_capacity=leaf_capacity,
        node_capacity=node_capacity,
    )


__all__ = [
    "DEPTH_MIN",
    "DEPTH_MAX",
    "HASH_SIZE_MIN",
    "HASH_SIZE_MAX",
    "TreeShape",
    "compute_shape",
]
