"""
secp256k1 ECDSA signing and signer recovery.

REQUIREMENTS:
- Signatures are recoverable: 65-byte ``r ‖ s ‖ v`` or 64-byte EIP-2098 compact
  ``r ‖ (yParity << 255 | s)``
- ``s`` must be in the lower half of the curve order (no malleable signatures)
- Recovery never raises for bad input on the verification path; it yields no signer

KEY MANAGEMENT ASSUMPTIONS:
- Private keys are provided at initialization (raw bytes or PEM file)
- ``generate()`` is for tests only
"""

from __future__ import annotations

from typing import Optional

from coincurve import PrivateKey, PublicKey
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from eth_utils import keccak, to_checksum_address

from bulksig.protocol.errors import RecoveryFailureError
from bulksig.protocol.models import ZERO_ADDRESS
from bulksig.utils.logging import get_logger

logger = get_logger(__name__)


SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2

_S_MASK = (1 << 255) - 1


# ===========================================================================
# Encoding helpers
# ===========================================================================


def public_key_to_address(public_key: bytes) -> str:
    """
    Derive the account address from a 65-byte uncompressed public key.
    """
    if len(public_key) != 65 or public_key[0] != 0x04:
        raise ValueError("Expected a 65-byte uncompressed secp256k1 public key")
    return to_checksum_address(keccak(public_key[1:])[-20:])


def to_compact_signature(signature: bytes) -> bytes:
    """Convert a 65-byte ``r ‖ s ‖ v`` signature to EIP-2098 compact form."""
    if len(signature) != 65:
        raise ValueError(f"Expected 65-byte signature, got {len(signature)}")
    v = signature[64]
    parity = v - 27 if v >= 27 else v
    if parity not in (0, 1):
        raise ValueError(f"Invalid signature v value: {v}")
    s = int.from_bytes(signature[32:64], "big")
    vs = (parity << 255) | s
    return signature[:32] + vs.to_bytes(32, "big")


def from_compact_signature(signature: bytes) -> bytes:
    """Expand an EIP-2098 compact signature to 65-byte ``r ‖ s ‖ v`` (v in {27, 28})."""
    if len(signature) != 64:
        raise ValueError(f"Expected 64-byte compact signature, got {len(signature)}")
    vs = int.from_bytes(signature[32:], "big")
    s = vs & _S_MASK
    v = (vs >> 255) + 27
    return signature[:32] + s.to_bytes(32, "big") + bytes([v])


def _split_signature(signature: bytes):
    if len(signature) == 65:
        r = int.from_bytes(signature[:32], "big")
        s = int.from_bytes(signature[32:64], "big")
        v = signature[64]
        if v in (27, 28):
            v -= 27
        if v not in (0, 1):
            raise RecoveryFailureError(f"Invalid signature v value: {signature[64]}")
        return r, s, v
    if len(signature) == 64:
        r = int.from_bytes(signature[:32], "big")
        vs = int.from_bytes(signature[32:], "big")
        return r, vs & _S_MASK, vs >> 255
    raise RecoveryFailureError(f"Invalid signature length: {len(signature)}")


# ===========================================================================
# Recovery
# ===========================================================================


def recover_signer_strict(digest: bytes, signature: bytes) -> str:
    """
    Recover the address that signed ``digest``.

    Raises:
        RecoveryFailureError: If the signature is malformed, malleable, does not
            recover to a point, or recovers to the zero address
    """
    if len(digest) != 32:
        raise RecoveryFailureError("Digest must be 32 bytes")

    r, s, recovery_id = _split_signature(bytes(signature))
    if not 0 < r < SECP256K1_N:
        raise RecoveryFailureError("Signature r out of range")
    if not 0 < s <= SECP256K1_HALF_N:
        raise RecoveryFailureError("Signature s out of range or malleable")

    recoverable = r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([recovery_id])
    try:
        public_key = PublicKey.from_signature_and_message(recoverable, digest, hasher=None)
    except ValueError as e:
        raise RecoveryFailureError(f"Public key recovery failed: {e}") from e

    address = public_key_to_address(public_key.format(compressed=False))
    if address == ZERO_ADDRESS:
        raise RecoveryFailureError("Signature recovers to the zero address")
    return address


def recover_signer(digest: bytes, signature: bytes) -> Optional[str]:
    """
    Recover the signer of ``digest``, or None if no signer can be recovered.
    """
    try:
        return recover_signer_strict(digest, signature)
    except RecoveryFailureError as e:
        logger.debug("Signer recovery failed: %s", e)
        return None


# ===========================================================================
# Signer
# ===========================================================================


class EcdsaSigner:
    """
    secp256k1 signer for order and bulk order digests.

    Usage:
        # From raw key bytes (32 bytes)
        signer = EcdsaSigner.from_private_bytes(key_bytes)

        # From PEM file
        signer = EcdsaSigner.from_pem_file("/path/to/key.pem")

        # Generate new key (for testing only)
        signer = EcdsaSigner.generate()
    """

    def __init__(self, private_key: ec.EllipticCurvePrivateKey):
        if not isinstance(private_key.curve, ec.SECP256K1):
            raise TypeError(f"Expected secp256k1 private key, got {private_key.curve.name}")
        self._private_key = private_key
        self._public_key = private_key.public_key()

        secret = private_key.private_numbers().private_value.to_bytes(32, "big")
        self._signing_key = PrivateKey(secret)
        self._address = public_key_to_address(self.public_key_bytes)

    @property
    def address(self) -> str:
        """Checksummed account address of this key."""
        return self._address

    @property
    def public_key_bytes(self) -> bytes:
        """Uncompressed 65-byte public key."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )

    def sign_digest(self, digest: bytes, compact: bool = False) -> bytes:
        """
        Sign a 32-byte digest.

        Returns a 65-byte ``r ‖ s ‖ v`` signature with v in {27, 28}, or the
        64-byte EIP-2098 form when ``compact`` is set. ``s`` is always low.
        """
        if len(digest) != 32:
            raise ValueError("Digest must be 32 bytes")
        raw = self._signing_key.sign_recoverable(digest, hasher=None)
        signature = raw[:64] + bytes([raw[64] + 27])
        if compact:
            return to_compact_signature(signature)
        return signature

    @classmethod
    def generate(cls) -> "EcdsaSigner":
        """
        Generate a new secp256k1 key pair.

        WARNING: Use only for testing.
        """
        return cls(ec.generate_private_key(ec.SECP256K1()))

    @classmethod
    def from_private_bytes(cls, key_bytes: bytes) -> "EcdsaSigner":
        """Create signer from a raw 32-byte private key."""
        if len(key_bytes) != 32:
            raise ValueError("secp256k1 private key must be 32 bytes")
        value = int.from_bytes(key_bytes, "big")
        return cls(ec.derive_private_key(value, ec.SECP256K1()))

    @classmethod
    def from_pem_file(cls, path: str, password: Optional[bytes] = None) -> "EcdsaSigner":
        """Load signer from PEM-encoded private key file."""
        with open(path, "rb") as f:
            private_key = serialization.load_pem_private_key(
                f.read(),
                password=password,
            )
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise TypeError(f"Expected EC private key, got {type(private_key)}")
        return cls(private_key)

    def export_private_pem(self, password: Optional[bytes] = None) -> bytes:
        encryption = (
            serialization.BestAvailableEncryption(password)
            if password
            else serialization.NoEncryption()
        )
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=encryption,
        )

    def export_public_pem(self) -> bytes:
        """Export public key as PEM for distribution to verifiers."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
