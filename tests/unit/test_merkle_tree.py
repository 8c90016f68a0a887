"""
Merkle Tree Unit Tests
Tests for binmerkle/merkle/builder.py and binmerkle/merkle/tree.py

Required tests:
1. Known answer - depth 3 SHA-256 root and proof for leaf 2
2. Padding - unused slots hold hash(zero bytes), deterministically
3. Structure - level sizes, parent digests, flat node list
4. Proof round trip - every index of partially and fully filled trees
5. Tamper detection - flipped bits and wrong indexes return False
6. Malformed input - out-of-range index and bad proof size raise
"""
import hashlib

import pytest

from binmerkle.crypto.hashing import hash_pair, new_hasher
from binmerkle.merkle.builder import TreeBuilder, build_tree, empty_leaf_digest
from binmerkle.merkle.node import Node
from binmerkle.merkle.shape import compute_shape
from binmerkle.schemas.errors import (
    HashPrimitiveException,
    HashSizeMismatchException,
    InvalidProofSizeException,
    LeafIndexOutOfRangeException,
    LeafSizeMismatchException,
    TooManyLeavesException,
)

from fixtures.common import (
    EMPTY_LEAF_SHA256_HEX,
    KNOWN_LEAVES,
    KNOWN_PROOF_INDEX_2_HEX,
    KNOWN_ROOT_HEX,
    make_hasher,
    make_leaves,
    make_tree,
)


def sha(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


class FailingHasher:
    """SHA-256 hasher whose digest primitive fails on the Nth absorb."""

    def __init__(self, fail_on: int):
        self.fail_on = fail_on
        self.calls = 0
        self._inner = new_hasher("sha256")
        self.digest_size = self._inner.digest_size

    def reset(self):
        self._inner.reset()

    def absorb(self, data):
        self.calls += 1
        if self.calls == self.fail_on:
            raise HashPrimitiveException("simulated primitive failure", algorithm="sha256")
        self._inner.absorb(data)

    def finalize(self):
        return self._inner.finalize()

    def fork(self):
        return FailingHasher(self.fail_on)


class TestKnownAnswer:
    """Depth 3, SHA-256, three 8-byte leaves."""

    def test_root(self, known_tree):
        assert known_tree.root_hex() == KNOWN_ROOT_HEX

    def test_proof_for_index_2(self, known_tree):
        proof = known_tree.create_membership_proof(2)

        assert len(proof) == 96
        assert proof.hex() == KNOWN_PROOF_INDEX_2_HEX

    def test_known_proof_verifies(self, known_tree):
        proof = bytes.fromhex(KNOWN_PROOF_INDEX_2_HEX)

        assert known_tree.verify_membership_proof(2, proof) is True

    def test_build_tree_helper_matches(self):
        """One-call builder produces the same tree."""
        tree = build_tree(list(KNOWN_LEAVES), depth=3)

        assert tree.root_hex() == KNOWN_ROOT_HEX


class TestPadding:
    """Tests for padding leaf behavior."""

    def test_empty_leaf_digest(self, sha256_hasher):
        assert empty_leaf_digest(sha256_hasher, 32).hex() == EMPTY_LEAF_SHA256_HEX

    def test_padding_slots_share_digest(self, known_tree):
        """Every padding slot holds hash(32 zero bytes)."""
        leaf_level = known_tree.levels[3]

        for node in leaf_level[3:]:
            assert node.hex() == EMPTY_LEAF_SHA256_HEX

    def test_padding_applies_to_pre_hashed_trees(self):
        leaves = [sha(b"a"), sha(b"b")]
        tree = make_tree(leaves, depth=2, already_hashed=True)

        assert tree.levels[2][2].hex() == EMPTY_LEAF_SHA256_HEX
        assert tree.levels[2][3].hex() == EMPTY_LEAF_SHA256_HEX

    def test_root_independent_of_hasher_reuse(self):
        """A reused hasher and a fresh one give the same root."""
        leaves = make_leaves(5)
        shared = make_hasher()
        builder = TreeBuilder(compute_shape(4, 32), shared)

        builder.build(make_leaves(9, prefix="other"))
        reused_root = builder.build(leaves).root.digest
        fresh_root = make_tree(leaves, depth=4).root.digest

        assert reused_root == fresh_root

    def test_empty_tree_is_all_padding(self):
        """No leaves: every slot is padding, root is still defined."""
        tree = make_tree([], depth=2)
        pad = bytes.fromhex(EMPTY_LEAF_SHA256_HEX)
        level1 = sha(pad + pad)

        assert tree.leaf_count == 0
        assert tree.root.digest == sha(level1 + level1)

    def test_leaf_count_changes_root(self):
        """Adding a leaf changes the root even though capacity is fixed."""
        assert make_tree(make_leaves(3)).root.digest != make_tree(make_leaves(4)).root.digest


class TestStructure:
    """Tests for the shape of a built tree."""

    def test_level_sizes(self, known_tree):
        assert [len(level) for level in known_tree.levels] == [1, 2, 4, 8]

    def test_node_list_size(self, known_tree):
        assert len(known_tree.nodes) == known_tree.node_capacity == 15

    def test_nodes_start_with_leaves_and_end_with_root(self, known_tree):
        assert known_tree.nodes[:8] == known_tree.levels[3]
        assert known_tree.nodes[-1] is known_tree.root

    def test_leaf_digests_are_hashed_values(self, known_tree):
        for i, value in enumerate(KNOWN_LEAVES):
            assert known_tree.leaf(i).digest == sha(value)

    def test_parent_is_hash_of_children(self, known_tree):
        """Every internal node = hash(left || right), left is even-indexed."""
        for d in range(known_tree.depth):
            for i, parent in enumerate(known_tree.levels[d]):
                left = known_tree.levels[d + 1][2 * i]
                right = known_tree.levels[d + 1][2 * i + 1]
                assert parent.left is left
                assert parent.right is right
                assert parent.digest == sha(left.digest + right.digest)

    def test_leaves_have_no_children(self, known_tree):
        assert all(node.is_leaf for node in known_tree.levels[3])
        assert not known_tree.root.is_leaf

    def test_accessors(self, known_tree):
        assert known_tree.depth == 3
        assert known_tree.hash_size == 32
        assert known_tree.leaf_capacity == len(known_tree) == 8
        assert known_tree.leaf_count == 3

    def test_levels_are_immutable(self, known_tree):
        with pytest.raises(TypeError):
            known_tree.levels[0] = ()

    def test_caller_leaves_not_modified(self):
        leaves = make_leaves(3)
        snapshot = list(leaves)

        make_tree(leaves)

        assert leaves == snapshot

    def test_leaf_order_matters(self):
        leaves = make_leaves(4)

        assert make_tree(leaves).root.digest != make_tree(list(reversed(leaves))).root.digest


class TestBuilderErrors:
    """Tests for build failures."""

    def test_too_many_leaves(self):
        with pytest.raises(TooManyLeavesException) as exc_info:
            make_tree(make_leaves(5), depth=2)

        assert exc_info.value.details == {"leaf_count": 5, "leaf_capacity": 4}

    def test_full_tree_accepted(self):
        tree = make_tree(make_leaves(4), depth=2)

        assert tree.leaf_count == tree.leaf_capacity == 4

    def test_pre_hashed_leaf_wrong_length(self):
        leaves = [sha(b"a"), b"short"]

        with pytest.raises(LeafSizeMismatchException) as exc_info:
            make_tree(leaves, depth=2, already_hashed=True)

        assert exc_info.value.details["leaf_index"] == 1
        assert exc_info.value.details["size"] == 5

    def test_pre_hashed_leaves_used_verbatim(self):
        leaves = [sha(b"a"), sha(b"b")]
        tree = make_tree(leaves, depth=1, already_hashed=True)

        assert tree.root.digest == sha(leaves[0] + leaves[1])

    def test_hasher_size_must_match_shape(self):
        with pytest.raises(HashSizeMismatchException):
            TreeBuilder(compute_shape(3, 16), make_hasher("sha256"))

    def test_primitive_failure_aborts_build(self):
        hasher = FailingHasher(fail_on=3)
        builder = TreeBuilder(compute_shape(3, 32), hasher)
        tree = None

        with pytest.raises(HashPrimitiveException):
            tree = builder.build(make_leaves(5))

        assert tree is None
        assert hasher.calls == 3

    def test_primitive_failure_while_pairing(self):
        # 4 leaves and 1 padding digest are absorbed before the first parent
        hasher = FailingHasher(fail_on=6)

        with pytest.raises(HashPrimitiveException):
            TreeBuilder(compute_shape(3, 32), hasher).build(make_leaves(4))

    def test_non_bytes_leaf_aborts_build(self):
        with pytest.raises(HashPrimitiveException) as exc_info:
            make_tree([b"a", "b", b"c"], depth=2)

        assert exc_info.value.code == "HASH_PRIMITIVE_ERROR"


class TestProofCreation:
    """Tests for create_membership_proof."""

    def test_proof_is_bottom_to_top_siblings(self, known_tree):
        proof = known_tree.create_membership_proof(5)

        assert proof[0:32] == known_tree.levels[3][4].digest
        assert proof[32:64] == known_tree.levels[2][3].digest
        assert proof[64:96] == known_tree.levels[1][0].digest

    @pytest.mark.parametrize("index", [-1, 8, 100])
    def test_index_out_of_range(self, known_tree, index):
        with pytest.raises(LeafIndexOutOfRangeException):
            known_tree.create_membership_proof(index)

    def test_padding_leaf_has_a_proof(self, known_tree):
        proof = known_tree.create_membership_proof(7)

        assert known_tree.verify_membership_proof(7, proof)


class TestProofVerification:
    """Tests for verify_membership_proof."""

    @pytest.mark.parametrize("leaf_count", [1, 3, 8])
    def test_round_trip_every_index(self, leaf_count):
        tree = make_tree(make_leaves(leaf_count), depth=3)

        for i in range(tree.leaf_capacity):
            proof = tree.create_membership_proof(i)
            assert tree.verify_membership_proof(i, proof), f"Proof failed for index {i}"

    def test_round_trip_blake2b_short_digests(self):
        hasher = new_hasher("blake2b", 8)
        tree = make_tree(make_leaves(5), depth=4, hasher=hasher)

        for i in range(tree.leaf_capacity):
            proof = tree.create_membership_proof(i)
            assert len(proof) == 4 * 8
            assert tree.verify_membership_proof(i, proof)

    def test_flipped_bit_fails(self, known_tree):
        proof = bytearray(known_tree.create_membership_proof(2))
        proof[40] ^= 0x01

        assert known_tree.verify_membership_proof(2, bytes(proof)) is False

    @pytest.mark.parametrize("wrong_index", [0, 3])
    def test_wrong_index_fails(self, known_tree, wrong_index):
        proof = known_tree.create_membership_proof(2)

        assert known_tree.verify_membership_proof(wrong_index, proof) is False

    def test_swapped_order_fails(self, known_tree):
        """Siblings must be replayed bottom-to-top."""
        proof = known_tree.create_membership_proof(2)
        reordered = proof[64:96] + proof[32:64] + proof[0:32]

        assert known_tree.verify_membership_proof(2, reordered) is False

    def test_proof_from_other_tree_fails(self, known_tree):
        other = make_tree(make_leaves(3), depth=3)

        assert known_tree.verify_membership_proof(2, other.create_membership_proof(2)) is False

    @pytest.mark.parametrize("index", [-1, 8])
    def test_index_out_of_range(self, known_tree, index):
        with pytest.raises(LeafIndexOutOfRangeException):
            known_tree.verify_membership_proof(index, bytes(96))

    def test_short_proof_raises(self, known_tree):
        with pytest.raises(InvalidProofSizeException) as exc_info:
            known_tree.verify_membership_proof(0, bytes(64))

        assert exc_info.value.details == {"size": 64, "expected": 96}

    def test_one_byte_short_raises(self, known_tree):
        with pytest.raises(InvalidProofSizeException):
            known_tree.verify_membership_proof(0, bytes(95))

    def test_index_checked_before_size(self, known_tree):
        with pytest.raises(LeafIndexOutOfRangeException):
            known_tree.verify_membership_proof(8, b"")

    def test_manual_replay(self, known_tree, sha256_hasher):
        """Verification is the documented left/right fold."""
        proof = known_tree.create_membership_proof(6)
        s0, s1, s2 = proof[0:32], proof[32:64], proof[64:96]
        leaf = known_tree.leaf(6).digest

        h = hash_pair(sha256_hasher, leaf, s0)   # 6 even
        h = hash_pair(sha256_hasher, s1, h)      # 3 odd
        h = hash_pair(sha256_hasher, s2, h)      # 1 odd

        assert h == known_tree.root.digest


class TestNode:
    """Tests for Node."""

    def test_hex_and_str(self):
        node = Node(bytes.fromhex("00ff"))

        assert node.hex() == "00ff"
        assert str(node) == "0x00ff"

    def test_bytearray_digest_is_frozen_to_bytes(self):
        node = Node(bytearray(b"\x01\x02"))

        assert isinstance(node.digest, bytes)

    def test_half_internal_node_rejected(self):
        with pytest.raises(ValueError):
            Node(b"\x00", left=Node(b"\x01"))
