"""
Tests for BulkOrderSigner.
"""

import pytest

from bulksig.eip712.order_hash import EMPTY_ORDER_HASH, hash_order_components
from bulksig.merkle.tree import recompute_root
from bulksig.signing.bulk import BulkOrderSigner
from bulksig.signing.ecdsa import recover_signer
from bulksig.signing.packing import unpack_bulk_signature


@pytest.fixture
def bulk_signer(signer, context):
    return BulkOrderSigner(signer, context, "Seaport", "1.5")


class TestSignOrders:
    """Tests for BulkOrderSigner.sign_orders."""

    def test_leaves_are_order_hashes(self, bulk_signer, orders):
        """Test leaves follow input order and are padded with the empty order."""
        signed = bulk_signer.sign_orders(orders)

        assert signed.order_hashes == tuple(hash_order_components(o) for o in orders)
        assert signed.tree.leaves[:5] == list(signed.order_hashes)
        assert signed.tree.leaves[5:] == [EMPTY_ORDER_HASH] * 3

    def test_signature_recovers_signer(self, bulk_signer, orders):
        """Test the base signature is over the bulk digest."""
        signed = bulk_signer.sign_orders(orders)
        assert recover_signer(signed.digest, signed.signature) == bulk_signer.address

    def test_packed_signature_per_order(self, bulk_signer, orders):
        """Test each packed signature carries its own index and proof."""
        signed = bulk_signer.sign_orders(orders)

        assert len(signed.packed_signatures) == len(orders)
        for i, packed in enumerate(signed.packed_signatures):
            unpacked = unpack_bulk_signature(packed)
            assert unpacked.signature == signed.signature
            assert unpacked.index == i
            assert recompute_root(signed.order_hashes[i], i, unpacked.proof) == signed.root

    def test_deterministic(self, bulk_signer, orders):
        """Test signing the same orders twice gives identical output."""
        first = bulk_signer.sign_orders(orders)
        second = bulk_signer.sign_orders(orders)

        assert first.root == second.root
        assert first.packed_signatures == second.packed_signatures

    def test_order_of_input_matters(self, bulk_signer, orders):
        """Test reordering orders changes the root."""
        assert bulk_signer.sign_orders(orders).root != bulk_signer.sign_orders(orders[::-1]).root

    def test_empty_rejected(self, bulk_signer):
        """Test an empty batch cannot be signed."""
        with pytest.raises(ValueError):
            bulk_signer.sign_orders([])

    def test_envelope_for_uses_order_counter(self, signer, bulk_signer):
        """Test envelopes carry the counter of the indexed order."""
        from conftest import build_order

        orders = [build_order(signer.address, salt=1, counter=3), build_order(signer.address, salt=2)]
        signed = bulk_signer.sign_orders(orders)
        envelope = signed.envelope_for(0)

        assert envelope.counter == 3
        assert envelope.parameters.to_components(3) == orders[0]
        assert envelope.packed_signature == signed.packed_signatures[0]


class TestSignOrder:
    """Tests for single-order signing."""

    def test_plain_signature(self, bulk_signer, order):
        """Test a plain signature is over the order digest."""
        signature = bulk_signer.sign_order(order)
        assert recover_signer(bulk_signer.order_digest(order), signature) == bulk_signer.address

    def test_domain_separator_bound_to_context(self, signer, context):
        """Test different domain versions give different separators."""
        a = BulkOrderSigner(signer, context, "Seaport", "1.5")
        b = BulkOrderSigner(signer, context, "Seaport", "1.6")
        assert a.domain_separator != b.domain_separator
