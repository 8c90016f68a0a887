"""
Merkle Tree
Immutable fixed-depth tree with membership proof creation and verification.

Level 0 holds the root, level `depth` holds the leaf slots (real leaves
followed by padding leaves). Trees are produced by TreeBuilder and never
mutated afterwards, so a built tree can be read from any number of
threads. Verification hashes with a private fork of the build hasher.

Proof Rules (Hard Contracts):
1. Proof = sibling digests concatenated bottom-to-top, depth * hash_size bytes
2. Sibling at each level is index XOR 1, then index //= 2
3. Replay: even index -> hash(current || sibling), odd -> hash(sibling || current)
4. Malformed input (index, proof length) raises; a wrong proof returns False
"""
from __future__ import annotations

import logging
from typing import Sequence

from binmerkle.crypto.hashing import Hasher
from binmerkle.merkle.node import Node
from binmerkle.merkle.proofs import MembershipProof, fold_proof
from binmerkle.merkle.shape import TreeShape
from binmerkle.schemas.errors import (
    InvalidProofSizeException,
    LeafIndexOutOfRangeException,
)


logger = logging.getLogger(__name__)


class MerkleTree:
    """
    A built, read-only Merkle tree.

    Attributes:
        shape: The validated tree dimensions
        levels: Node levels, index 0 = root level, index depth = leaf level
        nodes: Every node, leaves first then each shallower level
        leaf_count: Number of caller-supplied (non-padding) leaves
    """

    def __init__(
        self,
        shape: TreeShape,
        levels: Sequence[Sequence[Node]],
        hasher: Hasher,
        leaf_count: int,
    ) -> None:
        if len(levels) != shape.depth + 1:
            raise ValueError(f"Expected {shape.depth + 1} levels, got {len(levels)}")
        for d, level in enumerate(levels):
            if len(level) != 1 << d:
                raise ValueError(f"Level {d} must hold {1 << d} nodes, got {len(level)}")

        self._shape = shape
        self._levels: tuple[tuple[Node, ...], ...] = tuple(tuple(level) for level in levels)
        self._nodes: tuple[Node, ...] = tuple(
            node for level in reversed(self._levels) for node in level
        )
        self._hasher = hasher.fork()
        self._leaf_count = leaf_count

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def shape(self) -> TreeShape:
        return self._shape

    @property
    def depth(self) -> int:
        return self._shape.depth

    @property
    def hash_size(self) -> int:
        return self._shape.hash_size

    @property
    def leaf_capacity(self) -> int:
        return self._shape.leaf_capacity

    @property
    def node_capacity(self) -> int:
        return self._shape.node_capacity

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    @property
    def levels(self) -> tuple[tuple[Node, ...], ...]:
        return self._levels

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def root(self) -> Node:
        return self._levels[0][0]

    def root_hex(self) -> str:
        return self.root.hex()

    def leaf(self, index: int) -> Node:
        """Return the leaf node at index (padding slots included)."""
        self._check_index(index)
        return self._levels[self.depth][index]

    def __len__(self) -> int:
        return self.leaf_capacity

    def __repr__(self) -> str:
        return (
            f"MerkleTree(depth={self.depth}, hash_size={self.hash_size}, "
            f"leaf_count={self.leaf_count}, root={self.root_hex()})"
        )

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.leaf_capacity:
            logger.debug("Leaf index %d outside [0, %d)", index, self.leaf_capacity)
            raise LeafIndexOutOfRangeException(index, self.leaf_capacity)

    def create_membership_proof(self, index: int) -> bytes:
        """
        Create the membership proof for the leaf at index.

        Args:
            index: Leaf position, 0 <= index < leaf_capacity

        Returns:
            depth sibling digests concatenated bottom-to-top

        Raises:
            LeafIndexOutOfRangeException: If index is outside the leaf level
        """
        self._check_index(index)

        siblings: list[bytes] = []
        for d in range(self.depth, 0, -1):
            siblings.append(self._levels[d][index ^ 1].digest)
            index //= 2

        return b"".join(siblings)

    def verify_membership_proof(self, index: int, proof: bytes) -> bool:
        """
        Verify a membership proof for the leaf at index of this tree.

        The leaf digest is read from the tree itself; the proof is replayed
        from it and the result compared to the stored root.

        Args:
            index: Leaf position, 0 <= index < leaf_capacity
            proof: Flat sibling buffer of depth * hash_size bytes

        Returns:
            True if the proof reproduces the root, False otherwise

        Raises:
            LeafIndexOutOfRangeException: If index is outside the leaf level
            InvalidProofSizeException: If proof has the wrong length
        """
        self._check_index(index)
        if len(proof) != self._shape.proof_size:
            logger.debug(
                "Proof is %d bytes, expected %d", len(proof), self._shape.proof_size
            )
            raise InvalidProofSizeException(len(proof), self._shape.proof_size)

        leaf = self._levels[self.depth][index].digest
        computed = fold_proof(self._hasher.fork(), leaf, index, bytes(proof), self.hash_size)

        if computed != self.root.digest:
            logger.debug("Proof for leaf %d does not reproduce root", index)
            return False
        return True

    def membership_proof(self, index: int) -> MembershipProof:
        """Create a self-describing proof record for the leaf at index."""
        proof = self.create_membership_proof(index)
        return MembershipProof.from_proof_bytes(
            leaf_index=index,
            leaf=self._levels[self.depth][index].digest,
            root=self.root.digest,
            proof=proof,
            hash_size=self.hash_size,
            algorithm=getattr(self._hasher, "name", None),
        )


__all__ = ["MerkleTree"]
