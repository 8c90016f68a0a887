"""
Merkle Tree and Commitments
Fixed-depth Merkle tree construction + proof generation/verification.

This module provides:
- TreeShape / compute_shape: validated depth and hash size
- Node: immutable digest node
- TreeBuilder / build_tree: bottom-up construction with padding
- MerkleTree: root access, membership proof creation and verification
- MembershipProof / verify_proof_against_root: root-only verification

Canonical Commitment Rules:
1. Leaf hashing: hash(value), or value verbatim if pre-hashed
2. Parent hashing: hash(left || right)
3. Padding: every unused leaf slot holds hash(b"\\x00" * hash_size)
4. Proof: depth sibling digests, bottom-to-top, depth * hash_size bytes

Usage:
    from binmerkle.merkle import build_tree

    tree = build_tree([b"a", b"b", b"c"], depth=3)
    proof = tree.create_membership_proof(2)
    assert tree.verify_membership_proof(2, proof)
"""
from .shape import (
    DEPTH_MIN,
    DEPTH_MAX,
    HASH_SIZE_MIN,
    HASH_SIZE_MAX,
    TreeShape,
    compute_shape,
)
from .node import Node
from .proofs import (
    MembershipProof,
    split_proof,
    fold_proof,
    verify_proof_against_root,
)
from .tree import MerkleTree
from .builder import (
    TreeBuilder,
    build_tree,
    empty_leaf_digest,
)


__all__ = [
    # Shape
    "DEPTH_MIN",
    "DEPTH_MAX",
    "HASH_SIZE_MIN",
    "HASH_SIZE_MAX",
    "TreeShape",
    "compute_shape",
    # Core types
    "Node",
    "MerkleTree",
    "MembershipProof",
    # Construction
    "TreeBuilder",
    "build_tree",
    "empty_leaf_digest",
    # Proofs
    "split_proof",
    "fold_proof",
    "verify_proof_against_root",
]
