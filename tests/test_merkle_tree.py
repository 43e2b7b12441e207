"""
Tests for bulk order Merkle trees.
"""

import pytest
from eth_utils import keccak

from bulksig.eip712.order_hash import EMPTY_ORDER_HASH
from bulksig.merkle.tree import (
    BulkOrderProof,
    BulkOrderTree,
    compute_root,
    hash_pair,
    hash_sorted_pair,
    recompute_root,
    tree_height,
    verify_proof,
)
from bulksig.protocol.errors import InvalidTreeHeightError


def _leaves(count):
    return [keccak(f"leaf{i}".encode()) for i in range(count)]


class TestHashPair:
    """Tests for the pair hash."""

    def test_concatenates_without_sorting(self):
        """Test pair hash is keccak of left ‖ right."""
        left, right = b"\xff" * 32, b"\x00" * 32
        assert hash_pair(left, right) == keccak(left + right)

    def test_order_matters(self):
        """Test swapping operands changes the hash."""
        left, right = b"\xff" * 32, b"\x00" * 32
        assert hash_pair(left, right) != hash_pair(right, left)

    def test_sorted_pair_is_symmetric(self):
        """Test the sorted strategy ignores operand order."""
        a, b = b"\xff" * 32, b"\x00" * 32
        assert hash_sorted_pair(a, b) == hash_sorted_pair(b, a) == keccak(b + a)

    def test_rejects_short_nodes(self):
        """Test nodes must be 32 bytes."""
        with pytest.raises(ValueError):
            hash_pair(b"\x00" * 31, b"\x00" * 32)


class TestTreeHeight:
    """Tests for tree height derivation."""

    @pytest.mark.parametrize(
        "count,height",
        [(1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4), (2**24, 24)],
    )
    def test_height(self, count, height):
        """Test height is max(1, ceil(log2(count)))."""
        assert tree_height(count) == height

    def test_empty_rejected(self):
        """Test zero leaves is an error."""
        with pytest.raises(ValueError):
            tree_height(0)

    def test_too_many_leaves(self):
        """Test more than 2**24 leaves exceeds the maximum height."""
        with pytest.raises(InvalidTreeHeightError):
            tree_height(2**24 + 1)


class TestBulkOrderTree:
    """Tests for BulkOrderTree."""

    def test_single_leaf_padded_to_two(self):
        """Test one leaf gives a height-1 tree with the empty order as sibling."""
        leaf = _leaves(1)[0]
        tree = BulkOrderTree([leaf])

        assert tree.height == 1
        assert tree.leaf_count == 1
        assert tree.leaves == [leaf, EMPTY_ORDER_HASH]
        assert tree.root == hash_pair(leaf, EMPTY_ORDER_HASH)

    def test_three_leaves_padded_to_four(self):
        """Test three leaves give a height-2 tree with one filler."""
        a, b, c = _leaves(3)
        tree = BulkOrderTree([a, b, c])

        assert tree.height == 2
        assert tree.leaves[3] == EMPTY_ORDER_HASH
        assert tree.root == hash_pair(hash_pair(a, b), hash_pair(c, EMPTY_ORDER_HASH))

    def test_power_of_two_not_padded(self):
        """Test an exact power of two keeps its height."""
        leaves = _leaves(4)
        tree = BulkOrderTree(leaves)

        assert tree.height == 2
        assert tree.leaves == leaves

    def test_root_matches_nested_array_hash(self):
        """Test the root equals the EIP-712 hash of the nested [2][2] array."""
        a, b, c, d = _leaves(4)
        nested = keccak(keccak(a + b) + keccak(c + d))

        assert BulkOrderTree([a, b, c, d]).root == nested

    def test_custom_filler(self):
        """Test an explicit filler leaf is used for padding."""
        filler = b"\x11" * 32
        tree = BulkOrderTree(_leaves(3), filler=filler)

        assert tree.leaves[3] == filler

    def test_sorted_strategy_gives_different_root(self):
        """Test sorted pair hashing is incompatible with the default."""
        leaves = [b"\xff" * 32, b"\x00" * 32]

        unsorted_root = BulkOrderTree(leaves).root
        sorted_root = BulkOrderTree(leaves, sort_pairs=True).root

        assert unsorted_root != sorted_root

    def test_deterministic_root(self):
        """Test that same leaves produce same root."""
        leaves = _leaves(5)
        assert BulkOrderTree(leaves).root == BulkOrderTree(list(leaves)).root

    def test_compute_root_matches_tree(self):
        """Test compute_root matches tree root."""
        leaves = _leaves(6)
        assert compute_root(leaves) == BulkOrderTree(leaves).root

    def test_rejects_bad_leaf(self):
        """Test leaves must be 32 bytes."""
        with pytest.raises(ValueError):
            BulkOrderTree([b"short"])

    def test_empty_tree_rejected(self):
        """Test building a tree with no leaves fails."""
        with pytest.raises(ValueError):
            BulkOrderTree([])


class TestProofs:
    """Tests for proof generation and root reconstruction."""

    @pytest.mark.parametrize("count", range(1, 10))
    def test_every_proof_recomputes_root(self, count):
        """Test every real leaf's proof rebuilds the root."""
        leaves = _leaves(count)
        tree = BulkOrderTree(leaves)

        for i, leaf in enumerate(leaves):
            proof = tree.get_proof(i)
            assert proof.height == tree.height
            assert recompute_root(leaf, i, proof.proof) == tree.root

    def test_filler_leaf_proof(self):
        """Test padding leaves also have valid proofs."""
        tree = BulkOrderTree(_leaves(3))
        proof = tree.get_proof(3)

        assert verify_proof(EMPTY_ORDER_HASH, 3, proof.proof, tree.root)

    def test_single_order_proof_is_filler(self):
        """Test the only sibling of a lone order is the empty order hash."""
        tree = BulkOrderTree(_leaves(1))
        assert tree.get_proof(0).proof == (EMPTY_ORDER_HASH,)

    def test_wrong_index_gives_other_root(self):
        """Test a wrong index fails by non-equality."""
        leaves = _leaves(4)
        tree = BulkOrderTree(leaves)
        proof = tree.get_proof(0)

        assert recompute_root(leaves[0], 1, proof.proof) != tree.root

    def test_index_bits_above_height_ignored(self):
        """Test index bits beyond the proof length do not affect the root."""
        leaves = _leaves(2)
        tree = BulkOrderTree(leaves)
        proof = tree.get_proof(0)

        assert recompute_root(leaves[0], 0b100, proof.proof) == tree.root

    def test_tampered_proof_fails(self):
        """Test flipping a proof byte changes the root."""
        leaves = _leaves(4)
        tree = BulkOrderTree(leaves)
        proof = list(tree.get_proof(2).proof)
        proof[1] = bytes([proof[1][0] ^ 0x01]) + proof[1][1:]

        assert not verify_proof(leaves[2], 2, proof, tree.root)

    def test_invalid_index(self):
        """Test proof for an index outside the padded tree fails."""
        tree = BulkOrderTree(_leaves(3))
        with pytest.raises(ValueError):
            tree.get_proof(4)

    def test_recompute_rejects_oversized_proof(self):
        """Test more than 24 proof elements is an invalid height."""
        with pytest.raises(InvalidTreeHeightError):
            recompute_root(b"\x00" * 32, 0, [b"\x00" * 32] * 25)

    def test_recompute_rejects_wide_index(self):
        """Test indexes must fit in 3 bytes."""
        with pytest.raises(ValueError):
            recompute_root(b"\x00" * 32, 2**24, [b"\x00" * 32])

    def test_proof_serialization_roundtrip(self):
        """Test proof to_dict/from_dict."""
        proof = BulkOrderTree(_leaves(5)).get_proof(4)
        assert BulkOrderProof.from_dict(proof.to_dict()) == proof
