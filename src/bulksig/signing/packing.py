"""
Packed bulk signature wire format.

    signature (64 | 65 bytes) ‖ index (3 bytes, big-endian) ‖ proof (N × 32 bytes)

The format carries no length prefixes. The base signature length is implied by
the total length: ``64 + 3 + 32N`` is odd and ``65 + 3 + 32N`` is even, so the
two families never overlap. Proof length is the tree height, 1 ≤ N ≤ 24.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

from bulksig.eip712.typehash import MAX_TREE_HEIGHT, MIN_TREE_HEIGHT
from bulksig.merkle.tree import MAX_LEAF_INDEX
from bulksig.protocol.errors import InvalidTreeHeightError, MalformedProofError


COMPACT_SIGNATURE_LENGTH = 64
SIGNATURE_LENGTH = 65
INDEX_LENGTH = 3
PROOF_ELEMENT_LENGTH = 32

# Anything up to a full 65-byte signature is verified as a plain signature.
MAX_PLAIN_SIGNATURE_LENGTH = SIGNATURE_LENGTH


@dataclass(frozen=True)
class PackedBulkSignature:
    """
    A base signature together with the inclusion proof of one order.

    Attributes:
        signature: 64-byte compact or 65-byte ``r ‖ s ‖ v`` signature over the bulk digest
        index: Leaf index of the order in the bulk tree
        proof: Sibling hashes from leaf level to root
    """
    signature: bytes
    index: int
    proof: Tuple[bytes, ...] = field(default_factory=tuple)

    @property
    def height(self) -> int:
        return len(self.proof)

    def pack(self) -> bytes:
        return pack_bulk_signature(self.signature, self.index, self.proof)

    @classmethod
    def unpack(cls, blob: bytes) -> "PackedBulkSignature":
        return unpack_bulk_signature(blob)


def _signature_length_for(total_length: int) -> int:
    for sig_length in (COMPACT_SIGNATURE_LENGTH, SIGNATURE_LENGTH):
        remainder = total_length - sig_length - INDEX_LENGTH
        if remainder >= 0 and remainder % PROOF_ELEMENT_LENGTH == 0:
            return sig_length
    raise MalformedProofError(
        f"Packed bulk signature length {total_length} is not "
        f"64|65 + 3 + 32*N"
    )


def is_valid_bulk_signature_size(length: int) -> bool:
    """Whether ``length`` is a possible packed bulk signature size."""
    for sig_length in (COMPACT_SIGNATURE_LENGTH, SIGNATURE_LENGTH):
        remainder = length - sig_length - INDEX_LENGTH
        if remainder > 0 and remainder % PROOF_ELEMENT_LENGTH == 0:
            height = remainder // PROOF_ELEMENT_LENGTH
            if MIN_TREE_HEIGHT <= height <= MAX_TREE_HEIGHT:
                return True
    return False


def pack_bulk_signature(signature: bytes, index: int, proof: Sequence[bytes]) -> bytes:
    """
    Concatenate a base signature, leaf index and proof into the wire format.

    Raises:
        MalformedProofError: If the signature, index or a proof element has the wrong size
        InvalidTreeHeightError: If the proof length is outside [1, 24]
    """
    if len(signature) not in (COMPACT_SIGNATURE_LENGTH, SIGNATURE_LENGTH):
        raise MalformedProofError(f"Base signature must be 64 or 65 bytes, got {len(signature)}")
    if index < 0 or index > MAX_LEAF_INDEX:
        raise MalformedProofError(f"Leaf index does not fit in 3 bytes: {index}")
    if not MIN_TREE_HEIGHT <= len(proof) <= MAX_TREE_HEIGHT:
        raise InvalidTreeHeightError(len(proof))
    for node in proof:
        if len(node) != PROOF_ELEMENT_LENGTH:
            raise MalformedProofError(f"Proof elements must be 32 bytes, got {len(node)}")

    return bytes(signature) + index.to_bytes(INDEX_LENGTH, "big") + b"".join(bytes(n) for n in proof)


def unpack_bulk_signature(blob: bytes) -> PackedBulkSignature:
    """
    Split a packed bulk signature into signature, index and proof.

    Raises:
        MalformedProofError: If the blob is too short for the bulk format or its
            length is not 64|65 + 3 + 32*N
        InvalidTreeHeightError: If N is outside [1, 24]
    """
    blob = bytes(blob)
    if len(blob) <= MAX_PLAIN_SIGNATURE_LENGTH:
        raise MalformedProofError(
            f"Packed bulk signature must be longer than {MAX_PLAIN_SIGNATURE_LENGTH} bytes"
        )

    sig_length = _signature_length_for(len(blob))
    height = (len(blob) - sig_length - INDEX_LENGTH) // PROOF_ELEMENT_LENGTH
    if not MIN_TREE_HEIGHT <= height <= MAX_TREE_HEIGHT:
        raise InvalidTreeHeightError(height)

    index_start = sig_length
    proof_start = index_start + INDEX_LENGTH
    index = int.from_bytes(blob[index_start:proof_start], "big")
    proof = tuple(
        blob[offset:offset + PROOF_ELEMENT_LENGTH]
        for offset in range(proof_start, len(blob), PROOF_ELEMENT_LENGTH)
    )

    return PackedBulkSignature(signature=blob[:sig_length], index=index, proof=proof)
