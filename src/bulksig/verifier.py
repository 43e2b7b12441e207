"""
Bulk Signature Verification

Validates a (message, signature) pair in the ERC-1271 style: the answer is a
4-byte magic value, never a revert for an unauthorized or mismatched signature.

Dispatch is by signature length:
- ``len(signature) <= 65``: plain signature over ``message``
- ``len(signature) > 65``: ABI envelope of (packed bulk signature, order
  parameters, counter)

Bulk path:
1. Decode the envelope
2. Rebuild the order hash from parameters + counter
3. Require ``digest(domainSeparator, orderHash) == message``
4. Unpack signature, index and proof
5. Rebuild the tree root from the order hash
6. Select the bulk typehash by proof length
7. Recover the signer of ``digest(domainSeparator, keccak(typehash ‖ root))``

CRITICAL INVARIANTS:
1. The order hash is always rebuilt from caller data and checked against the
   message; a valid bulk signature cannot be reused for unrelated order data
2. Structural errors (malformed proof, bad height, bad envelope) raise
3. Mismatches, recovery failures and unauthorized signers return the
   rejection value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Protocol

from bulksig.eip712.domain import bulk_struct_hash, domain_separator_for, final_digest
from bulksig.eip712.order_hash import hash_order_parameters
from bulksig.merkle.tree import recompute_root
from bulksig.protocol.enums import ErrorCode, SignatureKind
from bulksig.protocol.errors import OrderHashMismatchError
from bulksig.protocol.models import ChainContext, normalize_address
from bulksig.signing.ecdsa import recover_signer
from bulksig.signing.envelope import BulkSignatureEnvelope
from bulksig.signing.packing import (
    MAX_PLAIN_SIGNATURE_LENGTH,
    PackedBulkSignature,
    unpack_bulk_signature,
)
from bulksig.utils.logging import get_logger

logger = get_logger(__name__)


ERC1271_MAGIC_VALUE = bytes.fromhex("1626ba7e")
ERC1271_INVALID = bytes.fromhex("ffffffff")


# ===========================================================================
# Authorization Policy
# ===========================================================================


class AuthorizationPolicy(Protocol):
    """
    Decides whether a recovered signer may act for the verifying account.

    Implementations MUST be side-effect free.
    """

    def is_authorized_signer(self, signer: str) -> bool:
        """Return True if ``signer`` (checksummed address) is authorized."""
        ...


class SingleSignerPolicy:
    """Authorizes exactly one address."""

    def __init__(self, signer: str):
        self._signer = normalize_address(signer)

    def is_authorized_signer(self, signer: str) -> bool:
        return normalize_address(signer) == self._signer


class AllowListPolicy:
    """Authorizes any address in a fixed set."""

    def __init__(self, signers: Iterable[str]):
        self._signers = frozenset(normalize_address(s) for s in signers)

    def is_authorized_signer(self, signer: str) -> bool:
        return normalize_address(signer) in self._signers

    @property
    def signers(self) -> frozenset:
        return self._signers


# ===========================================================================
# Verification Result
# ===========================================================================


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of verifying one (message, signature) pair.

    Attributes:
        kind: Branch the signature was dispatched to
        valid: Whether an authorized signer was recovered
        signer: Recovered signer, None if recovery failed
        digest: Digest the signer was recovered from
        order_hash: Rebuilt order hash (bulk only)
        root: Rebuilt tree root (bulk only)
        height: Tree height (bulk only)
        error: Reason for rejection
    """
    kind: SignatureKind
    valid: bool
    signer: Optional[str] = None
    digest: Optional[bytes] = None
    order_hash: Optional[bytes] = None
    root: Optional[bytes] = None
    height: Optional[int] = None
    error: Optional[ErrorCode] = None

    @property
    def magic_value(self) -> bytes:
        return ERC1271_MAGIC_VALUE if self.valid else ERC1271_INVALID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "valid": self.valid,
            "signer": self.signer,
            "digest": "0x" + self.digest.hex() if self.digest else None,
            "orderHash": "0x" + self.order_hash.hex() if self.order_hash else None,
            "root": "0x" + self.root.hex() if self.root else None,
            "height": self.height,
            "error": self.error.value if self.error else None,
        }


@dataclass(frozen=True)
class BulkDigest:
    """Intermediate values of the bulk path."""
    digest: bytes
    order_hash: bytes
    root: bytes
    packed: PackedBulkSignature


# ===========================================================================
# Verifier
# ===========================================================================


class BulkSignatureVerifier:
    """
    Verifier for plain and bulk order signatures.

    Holds no mutable state: the domain separator is derived from the chain
    context once at construction and every call is a pure function of its input.
    """

    def __init__(
        self,
        policy: AuthorizationPolicy,
        context: Optional[ChainContext] = None,
        domain_name: Optional[str] = None,
        domain_version: Optional[str] = None,
    ):
        self._policy = policy
        self._context = context or ChainContext.from_settings()
        self._domain_separator = domain_separator_for(self._context, domain_name, domain_version)

    @property
    def context(self) -> ChainContext:
        return self._context

    @property
    def domain_separator(self) -> bytes:
        return self._domain_separator

    def is_valid_signature(self, message: bytes, signature: bytes) -> bytes:
        """
        ERC-1271 entry point.

        Returns:
            ERC1271_MAGIC_VALUE if an authorized signer signed ``message``,
            ERC1271_INVALID otherwise

        Raises:
            MalformedEnvelopeError: If a bulk envelope cannot be decoded
            InvalidOrderParametersError: If the envelope's parameters are inconsistent
            MalformedProofError: If the packed signature cannot be split
            InvalidTreeHeightError: If the proof length is outside [1, 24]
        """
        return self.verify(message, signature).magic_value

    def verify(self, message: bytes, signature: bytes) -> VerificationResult:
        """
        Verify a signature and return the full result.

        Raises the same structural errors as ``is_valid_signature``.
        """
        message = bytes(message)
        if len(message) != 32:
            raise ValueError("message must be a 32-byte digest")

        signature = bytes(signature)
        if len(signature) > MAX_PLAIN_SIGNATURE_LENGTH:
            logger.debug("Dispatching %d-byte signature to bulk branch", len(signature))
            return self._verify_bulk(message, signature)

        logger.debug("Dispatching %d-byte signature to plain branch", len(signature))
        return self._authorize(SignatureKind.PLAIN, message, signature)

    def bulk_digest(self, message: bytes, envelope: BulkSignatureEnvelope) -> BulkDigest:
        """
        Run the bulk path up to (not including) signer recovery.

        Raises:
            OrderHashMismatchError: If the envelope's order does not hash to ``message``
            MalformedProofError: If the packed signature cannot be split
            InvalidTreeHeightError: If the proof length is outside [1, 24]
        """
        order_hash = hash_order_parameters(envelope.parameters, envelope.counter)
        order_digest = final_digest(self._domain_separator, order_hash)
        if order_digest != message:
            raise OrderHashMismatchError(expected=message, actual=order_digest)

        packed = unpack_bulk_signature(envelope.packed_signature)
        root = recompute_root(order_hash, packed.index, packed.proof)
        digest = final_digest(self._domain_separator, bulk_struct_hash(packed.height, root))

        return BulkDigest(digest=digest, order_hash=order_hash, root=root, packed=packed)

    def _verify_bulk(self, message: bytes, signature: bytes) -> VerificationResult:
        envelope = BulkSignatureEnvelope.decode(signature)

        try:
            bulk = self.bulk_digest(message, envelope)
        except OrderHashMismatchError as e:
            logger.info("Rejecting bulk signature: %s", e)
            return VerificationResult(kind=SignatureKind.BULK, valid=False, error=e.code)

        result = self._authorize(SignatureKind.BULK, bulk.digest, bulk.packed.signature)
        return VerificationResult(
            kind=SignatureKind.BULK,
            valid=result.valid,
            signer=result.signer,
            digest=bulk.digest,
            order_hash=bulk.order_hash,
            root=bulk.root,
            height=bulk.packed.height,
            error=result.error,
        )

    def _authorize(self, kind: SignatureKind, digest: bytes, signature: bytes) -> VerificationResult:
        signer = recover_signer(digest, signature)
        if signer is None:
            logger.info("Rejecting %s signature: no signer recovered", kind.value)
            return VerificationResult(
                kind=kind,
                valid=False,
                digest=digest,
                error=ErrorCode.RECOVERY_FAILURE,
            )

        if not self._policy.is_authorized_signer(signer):
            logger.info("Rejecting %s signature: signer %s not authorized", kind.value, signer)
            return VerificationResult(
                kind=kind,
                valid=False,
                signer=signer,
                digest=digest,
                error=ErrorCode.UNAUTHORIZED_SIGNER,
            )

        return VerificationResult(kind=kind, valid=True, signer=signer, digest=digest)
