"""
EIP-712 type descriptors for orders and bulk orders.

A bulk order of height N is the struct

    BulkOrder(OrderComponents[2][2]...[2] tree)     (N times "[2]")

so every height has its own type string and therefore its own typehash.
The 24 bulk typehashes are computed once at import into an immutable tuple
indexed by ``height - 1``.
"""

from __future__ import annotations

from typing import Tuple

from eth_utils import keccak

from bulksig.protocol.errors import InvalidTreeHeightError


MIN_TREE_HEIGHT = 1
MAX_TREE_HEIGHT = 24


# ===========================================================================
# Type strings
# ===========================================================================


EIP712_DOMAIN_TYPE = (
    "EIP712Domain("
    "string name,"
    "string version,"
    "uint256 chainId,"
    "address verifyingContract"
    ")"
)

OFFER_ITEM_TYPE = (
    "OfferItem("
    "uint8 itemType,"
    "address token,"
    "uint256 identifierOrCriteria,"
    "uint256 startAmount,"
    "uint256 endAmount"
    ")"
)

CONSIDERATION_ITEM_TYPE = (
    "ConsiderationItem("
    "uint8 itemType,"
    "address token,"
    "uint256 identifierOrCriteria,"
    "uint256 startAmount,"
    "uint256 endAmount,"
    "address recipient"
    ")"
)

ORDER_COMPONENTS_PARTIAL_TYPE = (
    "OrderComponents("
    "address offerer,"
    "address zone,"
    "OfferItem[] offer,"
    "ConsiderationItem[] consideration,"
    "uint8 orderType,"
    "uint256 startTime,"
    "uint256 endTime,"
    "bytes32 zoneHash,"
    "uint256 salt,"
    "bytes32 conduitKey,"
    "uint256 counter"
    ")"
)

# Referenced struct types are appended in alphabetical order.
ORDER_COMPONENTS_TYPE = (
    ORDER_COMPONENTS_PARTIAL_TYPE + CONSIDERATION_ITEM_TYPE + OFFER_ITEM_TYPE
)


def bulk_order_type_string(height: int) -> str:
    """Return the full EIP-712 type string for a bulk order tree of ``height``."""
    _check_height(height)
    return (
        "BulkOrder(OrderComponents"
        + "[2]" * height
        + " tree)"
        + CONSIDERATION_ITEM_TYPE
        + OFFER_ITEM_TYPE
        + ORDER_COMPONENTS_PARTIAL_TYPE
    )


# ===========================================================================
# Typehashes
# ===========================================================================


EIP712_DOMAIN_TYPEHASH = keccak(text=EIP712_DOMAIN_TYPE)
OFFER_ITEM_TYPEHASH = keccak(text=OFFER_ITEM_TYPE)
CONSIDERATION_ITEM_TYPEHASH = keccak(text=CONSIDERATION_ITEM_TYPE)
ORDER_COMPONENTS_TYPEHASH = keccak(text=ORDER_COMPONENTS_TYPE)


def _check_height(height: int) -> None:
    if (
        isinstance(height, bool)
        or not isinstance(height, int)
        or not MIN_TREE_HEIGHT <= height <= MAX_TREE_HEIGHT
    ):
        raise InvalidTreeHeightError(height)


BULK_ORDER_TYPEHASHES: Tuple[bytes, ...] = tuple(
    keccak(text=bulk_order_type_string(height))
    for height in range(MIN_TREE_HEIGHT, MAX_TREE_HEIGHT + 1)
)


def typehash_for_height(height: int) -> bytes:
    """
    Select the bulk order typehash for a tree of ``height``.

    Raises:
        InvalidTreeHeightError: If height is not an int in [1, 24]
    """
    _check_height(height)
    return BULK_ORDER_TYPEHASHES[height - 1]
