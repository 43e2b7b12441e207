"""
Bulk Order Signing

Signs many orders with a single signature over a Merkle root.

Signing proceeds by:
1. Hashing each order (EIP-712 struct hash = tree leaf)
2. Building the padded bulk order tree
3. Signing the bulk digest of the root once
4. Packing one ``signature ‖ index ‖ proof`` per order

The orders keep the order they were given in; the leaf index of an order is its
position in the input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from bulksig.eip712.domain import bulk_order_digest, domain_separator_for, final_digest
from bulksig.eip712.order_hash import hash_order_components
from bulksig.merkle.tree import BulkOrderProof, BulkOrderTree
from bulksig.protocol.models import ChainContext, OrderComponents, OrderParameters
from bulksig.signing.ecdsa import EcdsaSigner
from bulksig.signing.envelope import BulkSignatureEnvelope
from bulksig.signing.packing import pack_bulk_signature
from bulksig.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SignedBulkOrder:
    """
    Result of signing a batch of orders.

    Attributes:
        orders: Orders in leaf order
        order_hashes: Leaf hash of each order
        tree: The bulk order tree
        digest: The bulk digest that was signed
        signature: Base signature over ``digest``
        packed_signatures: Packed signature for each order, by index
    """
    orders: Tuple[OrderComponents, ...]
    order_hashes: Tuple[bytes, ...]
    tree: BulkOrderTree
    digest: bytes
    signature: bytes
    packed_signatures: List[bytes] = field(default_factory=list)

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def height(self) -> int:
        return self.tree.height

    def proof_for(self, index: int) -> BulkOrderProof:
        return self.tree.get_proof(index)

    def envelope_for(
        self,
        index: int,
        parameters: Optional[OrderParameters] = None,
    ) -> BulkSignatureEnvelope:
        """
        Build the validation envelope for the order at ``index``.

        ``parameters`` defaults to the order's own parameters; pass explicit
        parameters to add tips beyond the original consideration items.
        """
        order = self.orders[index]
        return BulkSignatureEnvelope(
            packed_signature=self.packed_signatures[index],
            parameters=parameters if parameters is not None else order.to_parameters(),
            counter=order.counter,
        )


class BulkOrderSigner:
    """
    Signer for bulk orders.

    Bulk orders are signed by:
    1. Hashing orders into leaves
    2. Building the Merkle tree
    3. Signing the bulk digest
    """

    def __init__(
        self,
        signer: EcdsaSigner,
        context: Optional[ChainContext] = None,
        domain_name: Optional[str] = None,
        domain_version: Optional[str] = None,
    ):
        self._signer = signer
        self._context = context or ChainContext.from_settings()
        self._domain_separator = domain_separator_for(self._context, domain_name, domain_version)

    @property
    def address(self) -> str:
        return self._signer.address

    @property
    def domain_separator(self) -> bytes:
        return self._domain_separator

    def order_digest(self, order: OrderComponents) -> bytes:
        """Final digest of a single order under this signer's domain."""
        return final_digest(self._domain_separator, hash_order_components(order))

    def sign_order(self, order: OrderComponents, compact: bool = False) -> bytes:
        """Sign a single order without a bulk tree."""
        return self._signer.sign_digest(self.order_digest(order), compact=compact)

    def sign_orders(
        self,
        orders: Sequence[OrderComponents],
        compact: bool = False,
    ) -> SignedBulkOrder:
        """
        Sign ``orders`` with one signature.

        Args:
            orders: Orders to sign, at least one
            compact: Use 64-byte EIP-2098 base signatures

        Raises:
            ValueError: If orders is empty
            InvalidTreeHeightError: If the orders need more than 24 tree levels
        """
        if len(orders) == 0:
            raise ValueError("Cannot sign an empty bulk order")

        order_hashes = tuple(hash_order_components(order) for order in orders)
        tree = BulkOrderTree(order_hashes)
        digest = bulk_order_digest(self._domain_separator, tree.height, tree.root)
        signature = self._signer.sign_digest(digest, compact=compact)

        packed = [
            pack_bulk_signature(signature, index, tree.get_proof(index).proof)
            for index in range(len(orders))
        ]

        logger.debug(
            "Signed bulk order: orders=%d height=%d root=0x%s",
            len(orders),
            tree.height,
            tree.root.hex(),
        )

        return SignedBulkOrder(
            orders=tuple(orders),
            order_hashes=order_hashes,
            tree=tree,
            digest=digest,
            signature=signature,
            packed_signatures=packed,
        )
