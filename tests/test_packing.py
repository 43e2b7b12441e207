"""
Tests for the packed bulk signature wire format and the envelope.
"""

import pytest

from bulksig.protocol.errors import (
    InvalidTreeHeightError,
    MalformedEnvelopeError,
    MalformedProofError,
)
from bulksig.signing.envelope import BulkSignatureEnvelope
from bulksig.signing.packing import (
    PackedBulkSignature,
    is_valid_bulk_signature_size,
    pack_bulk_signature,
    unpack_bulk_signature,
)


SIG65 = bytes(range(64)) + b"\x1b"
SIG64 = bytes(range(64))


def _proof(height):
    return tuple(bytes([i]) * 32 for i in range(1, height + 1))


class TestPack:
    """Tests for pack_bulk_signature."""

    def test_layout(self):
        """Test exact concatenation of signature, index and proof."""
        proof = _proof(2)
        packed = pack_bulk_signature(SIG65, 0x010203, proof)

        assert packed[:65] == SIG65
        assert packed[65:68] == b"\x01\x02\x03"
        assert packed[68:100] == proof[0]
        assert packed[100:] == proof[1]

    def test_lengths(self):
        """Test total length is 64|65 + 3 + 32N."""
        assert len(pack_bulk_signature(SIG65, 0, _proof(1))) == 100
        assert len(pack_bulk_signature(SIG65, 0, _proof(2))) == 132
        assert len(pack_bulk_signature(SIG64, 0, _proof(1))) == 99

    def test_rejects_bad_signature_length(self):
        """Test base signatures must be 64 or 65 bytes."""
        with pytest.raises(MalformedProofError):
            pack_bulk_signature(b"\x00" * 63, 0, _proof(1))

    def test_rejects_wide_index(self):
        """Test the index must fit in 3 bytes."""
        with pytest.raises(MalformedProofError):
            pack_bulk_signature(SIG65, 2**24, _proof(1))

    def test_rejects_bad_proof_element(self):
        """Test proof elements must be 32 bytes."""
        with pytest.raises(MalformedProofError):
            pack_bulk_signature(SIG65, 0, (b"\x00" * 31,))

    @pytest.mark.parametrize("height", [0, 25])
    def test_rejects_bad_height(self, height):
        """Test proof length must be in [1, 24]."""
        with pytest.raises(InvalidTreeHeightError):
            pack_bulk_signature(SIG65, 0, _proof(height))


class TestUnpack:
    """Tests for unpack_bulk_signature."""

    @pytest.mark.parametrize("signature", [SIG64, SIG65])
    @pytest.mark.parametrize("height", [1, 2, 7, 24])
    @pytest.mark.parametrize("index", [0, 1, 2**23, 2**24 - 1])
    def test_roundtrip(self, signature, height, index):
        """Test unpack(pack(sig, idx, proof)) == (sig, idx, proof)."""
        proof = _proof(height)
        unpacked = unpack_bulk_signature(pack_bulk_signature(signature, index, proof))

        assert unpacked == PackedBulkSignature(signature=signature, index=index, proof=proof)
        assert unpacked.height == height

    def test_dataclass_pack_unpack(self):
        """Test PackedBulkSignature.pack/unpack."""
        packed = PackedBulkSignature(signature=SIG65, index=3, proof=_proof(2))
        assert PackedBulkSignature.unpack(packed.pack()) == packed

    @pytest.mark.parametrize("length", [0, 64, 65])
    def test_plain_lengths_rejected(self, length):
        """Test blobs of 65 bytes or less are not bulk signatures."""
        with pytest.raises(MalformedProofError):
            unpack_bulk_signature(b"\x00" * length)

    def test_66_bytes_malformed(self):
        """Test 66 bytes fits neither signature length."""
        with pytest.raises(MalformedProofError):
            unpack_bulk_signature(b"\x00" * 66)

    @pytest.mark.parametrize("length", [67, 68])
    def test_zero_proof_elements_rejected(self, length):
        """Test the minimum bulk height is 1: no-proof signatures are rejected."""
        with pytest.raises(InvalidTreeHeightError):
            unpack_bulk_signature(b"\x00" * length)

    def test_partial_proof_element(self):
        """Test a trailing partial word is malformed."""
        blob = pack_bulk_signature(SIG65, 0, _proof(1)) + b"\x00" * 5
        with pytest.raises(MalformedProofError):
            unpack_bulk_signature(blob)

    def test_too_many_proof_elements(self):
        """Test more than 24 proof elements is an invalid height."""
        blob = SIG65 + b"\x00\x00\x00" + b"\x00" * 32 * 25
        with pytest.raises(InvalidTreeHeightError):
            unpack_bulk_signature(blob)

    def test_signature_length_from_parity(self):
        """Test odd totals carry compact signatures and even totals full ones."""
        assert len(unpack_bulk_signature(b"\x00" * 99).signature) == 64
        assert len(unpack_bulk_signature(b"\x00" * 100).signature) == 65


class TestValidSize:
    """Tests for is_valid_bulk_signature_size."""

    @pytest.mark.parametrize("length", [99, 100, 131, 132, 64 + 3 + 32 * 24, 65 + 3 + 32 * 24])
    def test_valid(self, length):
        assert is_valid_bulk_signature_size(length)

    @pytest.mark.parametrize("length", [65, 66, 67, 68, 101, 65 + 3 + 32 * 25])
    def test_invalid(self, length):
        assert not is_valid_bulk_signature_size(length)


class TestEnvelope:
    """Tests for BulkSignatureEnvelope ABI encoding."""

    def test_roundtrip(self, order):
        """Test encode/decode preserves all fields."""
        envelope = BulkSignatureEnvelope(
            packed_signature=pack_bulk_signature(SIG65, 1, _proof(2)),
            parameters=order.to_parameters(),
            counter=9,
        )
        decoded = BulkSignatureEnvelope.decode(envelope.encode())

        assert decoded == envelope
        assert decoded.parameters.to_components(9) == order.with_counter(9)

    def test_garbage_rejected(self):
        """Test non-ABI bytes raise MalformedEnvelopeError."""
        with pytest.raises(MalformedEnvelopeError):
            BulkSignatureEnvelope.decode(b"\x01" * 66)

    def test_unknown_item_type_rejected(self, order):
        """Test an item type outside the enum is a malformed envelope."""
        from eth_abi import encode
        from bulksig.signing.envelope import ENVELOPE_ABI

        params = list(order.to_parameters().to_abi())
        params[2] = [(9,) + params[2][0][1:]]
        data = encode(ENVELOPE_ABI, [SIG65, tuple(params), 0])

        with pytest.raises(MalformedEnvelopeError):
            BulkSignatureEnvelope.decode(data)
