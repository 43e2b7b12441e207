"""
EIP-712 struct hashing for orders.

Line items are hashed first with their own typehash, each item array is then
hashed as the keccak of the concatenated item hashes, and the outer
OrderComponents struct embeds the two array hashes. Static fields are encoded
exactly like ``abi.encode`` (32-byte words, addresses left-padded).
"""

from __future__ import annotations

from typing import Iterable

from eth_abi import encode
from eth_utils import keccak

from bulksig.eip712.typehash import (
    CONSIDERATION_ITEM_TYPEHASH,
    OFFER_ITEM_TYPEHASH,
    ORDER_COMPONENTS_TYPEHASH,
)
from bulksig.protocol.models import (
    ConsiderationItem,
    OfferItem,
    OrderComponents,
    OrderParameters,
)


def hash_offer_item(item: OfferItem) -> bytes:
    return keccak(
        encode(
            ["bytes32", "uint8", "address", "uint256", "uint256", "uint256"],
            [OFFER_ITEM_TYPEHASH, *item.to_abi()],
        )
    )


def hash_consideration_item(item: ConsiderationItem) -> bytes:
    return keccak(
        encode(
            ["bytes32", "uint8", "address", "uint256", "uint256", "uint256", "address"],
            [CONSIDERATION_ITEM_TYPEHASH, *item.to_abi()],
        )
    )


def hash_array(element_hashes: Iterable[bytes]) -> bytes:
    """EIP-712 array encoding: keccak of the concatenated element hashes."""
    return keccak(b"".join(element_hashes))


def hash_order_components(components: OrderComponents) -> bytes:
    """
    Compute the EIP-712 struct hash of an order.

    This is the leaf value used in bulk order trees and the struct hash
    wrapped by the order's final digest.
    """
    offer_hash = hash_array(hash_offer_item(item) for item in components.offer)
    consideration_hash = hash_array(
        hash_consideration_item(item) for item in components.consideration
    )
    return keccak(
        encode(
            [
                "bytes32",
                "address",
                "address",
                "bytes32",
                "bytes32",
                "uint8",
                "uint256",
                "uint256",
                "bytes32",
                "uint256",
                "bytes32",
                "uint256",
            ],
            [
                ORDER_COMPONENTS_TYPEHASH,
                components.offerer,
                components.zone,
                offer_hash,
                consideration_hash,
                int(components.order_type),
                components.start_time,
                components.end_time,
                components.zone_hash,
                components.salt,
                components.conduit_key,
                components.counter,
            ],
        )
    )


def hash_order_parameters(parameters: OrderParameters, counter: int) -> bytes:
    """
    Compute the order hash from fulfilment parameters and the offerer's counter.

    Equal by definition to ``hash_order_components(parameters.to_components(counter))``.

    Raises:
        InvalidOrderParametersError: If the original consideration count exceeds
            the supplied consideration items
    """
    return hash_order_components(parameters.to_components(counter))


EMPTY_ORDER_HASH = hash_order_components(OrderComponents.empty())
