"""Tree node: a digest plus the two children it was hashed from."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from binmerkle.crypto.hashing import to_hex


@dataclass(frozen=True, eq=False)
class Node:
    """
    Immutable tree node.

    Leaves carry no children. An internal node's digest is
    hash(left.digest || right.digest).
    """
    digest: bytes
    left: Optional["Node"] = None
    right: Optional["Node"] = None

    def __post_init__(self) -> None:
        if not isinstance(self.digest, bytes):
            object.__setattr__(self, "digest", bytes(self.digest))
        if (self.left is None) != (self.right is None):
            raise ValueError("A node must have either both children or none")

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    def hex(self) -> str:
        """Lowercase hex of the digest, no prefix."""
        return self.digest.hex()

    def __str__(self) -> str:
        return to_hex(self.digest)


__all__ = ["Node"]
