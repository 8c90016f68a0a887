"""
Test fixtures package for binmerkle tests.

This package provides factory functions and known-answer constants.
- common.py: hashers, leaves, trees, known digests

Usage:
    from fixtures import make_tree, KNOWN_ROOT_HEX

    def test_something():
        tree = make_tree()
        assert tree.root_hex() == KNOWN_ROOT_HEX
"""

from .common import (
    EMPTY_LEAF_SHA256_HEX,
    KNOWN_LEAVES,
    KNOWN_PROOF_INDEX_2_HEX,
    KNOWN_ROOT_HEX,
    make_hasher,
    make_leaves,
    make_tree,
)

__all__ = [
    "EMPTY_LEAF_SHA256_HEX",
    "KNOWN_LEAVES",
    "KNOWN_PROOF_INDEX_2_HEX",
    "KNOWN_ROOT_HEX",
    "make_hasher",
    "make_leaves",
    "make_tree",
]
