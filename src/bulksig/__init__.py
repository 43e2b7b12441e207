"""
bulksig: bulk order signatures

Build, sign, pack and verify signatures over Merkle trees of orders:

A. HASHING:
   1. Order hashing - EIP-712 struct hashes of order components
   2. Bulk typehashes - one type descriptor per tree height (1..24)
   3. Domain digests - domain separator and final signing digest

B. TREES AND WIRE FORMAT:
   1. Bulk order trees - unsorted keccak pairs, empty-order padding
   2. Packed signatures - signature ‖ 3-byte index ‖ proof

C. SIGNING AND VERIFICATION:
   1. Bulk order signer - one signature for many orders
   2. Verifier - ERC-1271 style magic value answers
"""

from bulksig.protocol import (
    ErrorCode,
    ItemType,
    OrderType,
    SignatureKind,
    BulkSignatureError,
    MalformedProofError,
    InvalidTreeHeightError,
    OrderHashMismatchError,
    RecoveryFailureError,
    MalformedEnvelopeError,
    InvalidOrderParametersError,
    OfferItem,
    ConsiderationItem,
    OrderComponents,
    OrderParameters,
    ChainContext,
)

from bulksig.eip712 import (
    EMPTY_ORDER_HASH,
    hash_order_components,
    hash_order_parameters,
    typehash_for_height,
    domain_separator,
    final_digest,
    bulk_struct_hash,
)

from bulksig.merkle import (
    BulkOrderTree,
    BulkOrderProof,
    hash_pair,
    recompute_root,
)

from bulksig.signing import (
    EcdsaSigner,
    recover_signer,
    PackedBulkSignature,
    pack_bulk_signature,
    unpack_bulk_signature,
    BulkSignatureEnvelope,
    BulkOrderSigner,
    SignedBulkOrder,
)

from bulksig.verifier import (
    ERC1271_MAGIC_VALUE,
    ERC1271_INVALID,
    AuthorizationPolicy,
    SingleSignerPolicy,
    AllowListPolicy,
    VerificationResult,
    BulkSignatureVerifier,
)

__all__ = [
    # Protocol
    "ErrorCode",
    "ItemType",
    "OrderType",
    "SignatureKind",
    "BulkSignatureError",
    "MalformedProofError",
    "InvalidTreeHeightError",
    "OrderHashMismatchError",
    "RecoveryFailureError",
    "MalformedEnvelopeError",
    "InvalidOrderParametersError",
    "OfferItem",
    "ConsiderationItem",
    "OrderComponents",
    "OrderParameters",
    "ChainContext",
    # Hashing
    "EMPTY_ORDER_HASH",
    "hash_order_components",
    "hash_order_parameters",
    "typehash_for_height",
    "domain_separator",
    "final_digest",
    "bulk_struct_hash",
    # Trees
    "BulkOrderTree",
    "BulkOrderProof",
    "hash_pair",
    "recompute_root",
    # Signing
    "EcdsaSigner",
    "recover_signer",
    "PackedBulkSignature",
    "pack_bulk_signature",
    "unpack_bulk_signature",
    "BulkSignatureEnvelope",
    "BulkOrderSigner",
    "SignedBulkOrder",
    # Verification
    "ERC1271_MAGIC_VALUE",
    "ERC1271_INVALID",
    "AuthorizationPolicy",
    "SingleSignerPolicy",
    "AllowListPolicy",
    "VerificationResult",
    "BulkSignatureVerifier",
]

__version__ = "1.0.0"
