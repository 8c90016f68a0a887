"""
binmerkle - fixed-depth binary Merkle trees with membership proofs.

Usage:
    from binmerkle import build_tree

    tree = build_tree([b"a", b"b", b"c"], depth=3)
    proof = tree.create_membership_proof(1)
    assert tree.verify_membership_proof(1, proof)
"""

from binmerkle.merkle import (
    MembershipProof,
    MerkleTree,
    Node,
    TreeBuilder,
    TreeShape,
    build_tree,
    compute_shape,
    verify_proof_against_root,
)

__version__ = "0.1.0"

__all__ = [
    "MembershipProof",
    "MerkleTree",
    "Node",
    "TreeBuilder",
    "TreeShape",
    "build_tree",
    "compute_shape",
    "verify_proof_against_root",
]
