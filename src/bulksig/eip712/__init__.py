"""
EIP-712 structured-data hashing for orders and bulk orders.
"""

from bulksig.eip712.typehash import (
    MIN_TREE_HEIGHT,
    MAX_TREE_HEIGHT,
    BULK_ORDER_TYPEHASHES,
    EIP712_DOMAIN_TYPEHASH,
    OFFER_ITEM_TYPEHASH,
    CONSIDERATION_ITEM_TYPEHASH,
    ORDER_COMPONENTS_TYPEHASH,
    bulk_order_type_string,
    typehash_for_height,
)

from bulksig.eip712.order_hash import (
    EMPTY_ORDER_HASH,
    hash_offer_item,
    hash_consideration_item,
    hash_order_components,
    hash_order_parameters,
)

from bulksig.eip712.domain import (
    domain_separator,
    domain_separator_for,
    final_digest,
    bulk_struct_hash,
    order_digest,
    bulk_order_digest,
)

__all__ = [
    # Typehashes
    "MIN_TREE_HEIGHT",
    "MAX_TREE_HEIGHT",
    "BULK_ORDER_TYPEHASHES",
    "EIP712_DOMAIN_TYPEHASH",
    "OFFER_ITEM_TYPEHASH",
    "CONSIDERATION_ITEM_TYPEHASH",
    "ORDER_COMPONENTS_TYPEHASH",
    "bulk_order_type_string",
    "typehash_for_height",
    # Order hashing
    "EMPTY_ORDER_HASH",
    "hash_offer_item",
    "hash_consideration_item",
    "hash_order_components",
    "hash_order_parameters",
    # Digests
    "domain_separator",
    "domain_separator_for",
    "final_digest",
    "bulk_struct_hash",
    "order_digest",
    "bulk_order_digest",
]
