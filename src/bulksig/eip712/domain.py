"""
Domain separators and final signing digests (EIP-712).

    domainSeparator = keccak(DOMAIN_TYPEHASH ‖ keccak(name) ‖ keccak(version) ‖ chainId ‖ verifyingContract)
    digest          = keccak(0x1901 ‖ domainSeparator ‖ structHash)

Both single orders and bulk order roots are signed through the same digest;
a bulk root is first wrapped as ``keccak(bulkTypehash(height) ‖ root)``.
"""

from __future__ import annotations

from typing import Optional

from eth_abi import encode
from eth_utils import keccak

from bulksig.eip712.typehash import EIP712_DOMAIN_TYPEHASH, typehash_for_height
from bulksig.protocol.models import ChainContext, normalize_address


EIP712_PREFIX = b"\x19\x01"


def domain_separator(
    verifying_contract: str,
    chain_id: int,
    name: Optional[str] = None,
    version: Optional[str] = None,
) -> bytes:
    """
    Compute the domain separator for a verifying contract on a chain.

    ``name`` and ``version`` default to the configured domain.
    """
    if name is None or version is None:
        from bulksig.core.settings import get_settings

        settings = get_settings()
        name = settings.domain_name if name is None else name
        version = settings.domain_version if version is None else version

    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                EIP712_DOMAIN_TYPEHASH,
                keccak(text=name),
                keccak(text=version),
                chain_id,
                normalize_address(verifying_contract),
            ],
        )
    )


def domain_separator_for(
    context: ChainContext,
    name: Optional[str] = None,
    version: Optional[str] = None,
) -> bytes:
    return domain_separator(context.verifying_contract, context.chain_id, name, version)


def final_digest(separator: bytes, struct_hash: bytes) -> bytes:
    """Wrap a struct hash into the digest that is actually signed."""
    if len(separator) != 32 or len(struct_hash) != 32:
        raise ValueError("domain separator and struct hash must be 32 bytes")
    return keccak(EIP712_PREFIX + separator + struct_hash)


def bulk_struct_hash(height: int, root: bytes) -> bytes:
    """
    Struct hash of a BulkOrder of ``height`` whose tree hashes to ``root``.

    Raises:
        InvalidTreeHeightError: If height is outside [1, 24]
    """
    if len(root) != 32:
        raise ValueError("bulk order root must be 32 bytes")
    return keccak(typehash_for_height(height) + root)


def order_digest(separator: bytes, order_hash: bytes) -> bytes:
    return final_digest(separator, order_hash)


def bulk_order_digest(separator: bytes, height: int, root: bytes) -> bytes:
    return final_digest(separator, bulk_struct_hash(height, root))
