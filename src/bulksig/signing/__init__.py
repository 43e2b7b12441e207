"""
Signing, signer recovery and the packed bulk signature wire format.
"""

from bulksig.signing.ecdsa import (
    EcdsaSigner,
    recover_signer,
    recover_signer_strict,
    public_key_to_address,
    to_compact_signature,
    from_compact_signature,
)

from bulksig.signing.packing import (
    PackedBulkSignature,
    pack_bulk_signature,
    unpack_bulk_signature,
    is_valid_bulk_signature_size,
)

from bulksig.signing.envelope import BulkSignatureEnvelope

from bulksig.signing.bulk import BulkOrderSigner, SignedBulkOrder

__all__ = [
    # ECDSA
    "EcdsaSigner",
    "recover_signer",
    "recover_signer_strict",
    "public_key_to_address",
    "to_compact_signature",
    "from_compact_signature",
    # Wire format
    "PackedBulkSignature",
    "pack_bulk_signature",
    "unpack_bulk_signature",
    "is_valid_bulk_signature_size",
    "BulkSignatureEnvelope",
    # Bulk signing
    "BulkOrderSigner",
    "SignedBulkOrder",
]
