"""
Membership Proofs
Proof wire format helpers and root-only verification.

A membership proof is the flat concatenation of one sibling digest per
level, ordered from the leaf's immediate sibling up to the child of the
root (bottom-to-top). Its length is exactly depth * hash_size bytes.

This module provides:
- split_proof: cut a proof buffer into sibling digests
- fold_proof: replay the pairwise hashing from a leaf to a root
- verify_proof_against_root: check a claimed leaf against a bare root
- MembershipProof: a self-describing, JSON-serializable proof record
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from binmerkle.crypto.hashing import Hasher, from_hex, hash_pair, new_hasher
from binmerkle.merkle.shape import compute_shape
from binmerkle.schemas.errors import (
    ConfigurationException,
    InvalidProofSizeException,
    LeafIndexOutOfRangeException,
)


logger = logging.getLogger(__name__)


HEX_DIGEST_PATTERN = re.compile(r"^0x(?:[0-9a-f]{2})+$")


def validate_hex_digest(value: str, field_name: str) -> str:
    """Validate a lowercase, 0x-prefixed hex digest."""
    if not HEX_DIGEST_PATTERN.match(value):
        raise ValueError(
            f"{field_name} must be a lowercase 0x-prefixed hex string, got: {value[:18]}"
        )
    return value


def split_proof(proof: bytes, hash_size: int) -> list[bytes]:
    """
    Split a flat proof buffer into its sibling digests (bottom-to-top).

    Raises:
        InvalidProofSizeException: If the buffer is not a multiple of hash_size
    """
    remainder = len(proof) % hash_size
    if remainder:
        raise InvalidProofSizeException(len(proof), len(proof) - remainder)
    return [proof[i:i + hash_size] for i in range(0, len(proof), hash_size)]


def fold_proof(
    hasher: Hasher,
    leaf: bytes,
    leaf_index: int,
    proof: bytes,
    hash_size: int,
) -> bytes:
    """
    Recompute a root from a leaf digest and its sibling path.

    At each level the running digest is the left input when the current
    index is even and the right input when it is odd.

    Inputs are assumed to be validated by the caller.
    """
    current = leaf
    index = leaf_index
    for offset in range(0, len(proof), hash_size):
        sibling = proof[offset:offset + hash_size]
        if index % 2 == 0:
            current = hash_pair(hasher, current, sibling)
        else:
            current = hash_pair(hasher, sibling, current)
        index //= 2
    return current


def verify_proof_against_root(
    hasher: Hasher,
    leaf: bytes,
    leaf_index: int,
    proof: bytes,
    root: bytes,
    depth: int,
) -> bool:
    """
    Verify that a leaf digest sits at leaf_index under root.

    Unlike MerkleTree.verify_membership_proof, the leaf digest is an
    explicit input, so no tree is needed on the verifying side.

    Args:
        hasher: Digest primitive matching the one the tree was built with
        leaf: Claimed leaf digest
        leaf_index: Claimed position of the leaf
        proof: Flat sibling buffer, depth * hasher.digest_size bytes
        root: Trusted root digest
        depth: Depth of the tree the root belongs to

    Returns:
        True if replaying the proof reproduces root, False otherwise

    Raises:
        Shape exceptions for an invalid depth or digest size,
        LeafIndexOutOfRangeException, InvalidProofSizeException
    """
    shape = compute_shape(depth, hasher.digest_size)

    if leaf_index < 0 or leaf_index >= shape.leaf_capacity:
        raise LeafIndexOutOfRangeException(leaf_index, shape.leaf_capacity)
    if len(proof) != shape.proof_size:
        raise InvalidProofSizeException(len(proof), shape.proof_size)

    computed = fold_proof(hasher, leaf, leaf_index, proof, shape.hash_size)
    if computed != root:
        logger.debug("Proof for leaf %d does not reproduce root", leaf_index)
        return False
    return True


class MembershipProof(BaseModel):
    """
    Self-describing membership proof.

    Digests are stored as 0x-prefixed lowercase hex; siblings run from the
    leaf level up to the level just below the root.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_index: int = Field(..., ge=0, description="Position of the leaf in the bottom level")
    leaf: str = Field(..., description="Leaf digest (0x hex)")
    root: str = Field(..., description="Root digest the proof resolves to (0x hex)")
    siblings: list[str] = Field(..., min_length=1, description="Sibling digests, bottom-to-top")
    hash_size: int = Field(..., ge=1, description="Digest length in bytes")
    algorithm: Optional[str] = Field(
        default=None,
        description="hashlib algorithm name the tree was built with, if known",
    )

    @field_validator("leaf")
    @classmethod
    def validate_leaf(cls, v: str) -> str:
        return validate_hex_digest(v, "leaf")

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return validate_hex_digest(v, "root")

    @field_validator("siblings")
    @classmethod
    def validate_siblings(cls, v: list[str]) -> list[str]:
        return [validate_hex_digest(s, f"siblings[{i}]") for i, s in enumerate(v)]

    @model_validator(mode="after")
    def validate_digest_lengths(self) -> "MembershipProof":
        expected = 2 + 2 * self.hash_size
        for name, value in [("leaf", self.leaf), ("root", self.root)] + [
            (f"siblings[{i}]", s) for i, s in enumerate(self.siblings)
        ]:
            if len(value) != expected:
                raise ValueError(
                    f"{name} must encode {self.hash_size} bytes, got {(len(value) - 2) // 2}"
                )
        return self

    @property
    def depth(self) -> int:
        return len(self.siblings)

    def proof_bytes(self) -> bytes:
        """The flat wire form: concatenated sibling digests."""
        return b"".join(from_hex(s) for s in self.siblings)

    @classmethod
    def from_proof_bytes(
        cls,
        leaf_index: int,
        leaf: bytes,
        root: bytes,
        proof: bytes,
        hash_size: int,
        algorithm: Optional[str] = None,
    ) -> "MembershipProof":
        """Build a record from raw digests and a flat proof buffer."""
        return cls(
            leaf_index=leaf_index,
            leaf="0x" + leaf.hex(),
            root="0x" + root.hex(),
            siblings=["0x" + s.hex() for s in split_proof(proof, hash_size)],
            hash_size=hash_size,
            algorithm=algorithm,
        )

    def verify(self, root: bytes | str, hasher: Optional[Hasher] = None) -> bool:
        """
        Verify this proof against a trusted root.

        The root recorded in the proof is not used: whoever wrote the
        record also chose it, so the caller must supply the root from a
        source it trusts.

        Args:
            root: Trusted root digest, raw bytes or hex (0x prefix optional)
            hasher: Digest primitive to use; defaults to a new hasher for
                    the recorded algorithm

        Raises:
            ConfigurationException: No hasher was given and the record
                                    names no algorithm
        """
        if hasher is None:
            if not self.algorithm:
                raise ConfigurationException(
                    "Proof records no hash algorithm; pass a hasher to verify it",
                    details={"hash_size": self.hash_size},
                )
            hasher = new_hasher(self.algorithm, self.hash_size)
        if isinstance(root, str):
            root = from_hex(root)
        return verify_proof_against_root(
            hasher,
            from_hex(self.leaf),
            self.leaf_index,
            self.proof_bytes(),
            root,
            self.depth,
        )


__all__ = [
    "MembershipProof",
    "split_proof",
    "fold_proof",
    "verify_proof_against_root",
]
