"""
Bulk Order Merkle Tree

Merkle primitives for bulk order signatures.

Key features:
- keccak-256 pair hashing over the plain concatenation ``left ‖ right``
- No sorting of pairs: position is carried by the leaf index bits
- Leaves padded to a power of two with the empty-order hash
- Tree height in [1, 24]
- Root reconstruction from a leaf, its index and its sibling path

Because the pair hash is the EIP-712 encoding of a two-element array, the root
of a bulk order tree equals the EIP-712 hash of the nested
``OrderComponents[2]...[2]`` array it represents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from eth_utils import keccak

from bulksig.eip712.typehash import MAX_TREE_HEIGHT
from bulksig.protocol.errors import InvalidTreeHeightError


MAX_LEAF_INDEX = 2**24 - 1


# ===========================================================================
# Hash Functions
# ===========================================================================


def hash_pair(left: bytes, right: bytes) -> bytes:
    """
    Hash two sibling nodes in order.

    The pair is never sorted; swapping ``left`` and ``right`` changes the result.
    """
    if len(left) != 32 or len(right) != 32:
        raise ValueError("Merkle nodes must be 32 bytes")
    return keccak(left + right)


def hash_sorted_pair(left: bytes, right: bytes) -> bytes:
    """Sorted-pair hashing, as used by generic Merkle libraries."""
    if left <= right:
        return hash_pair(left, right)
    return hash_pair(right, left)


def tree_height(leaf_count: int) -> int:
    """
    Height of a bulk order tree holding ``leaf_count`` orders.

    Equal to ``max(1, ceil(log2(leaf_count)))``.

    Raises:
        ValueError: If leaf_count < 1
        InvalidTreeHeightError: If the tree would be taller than 24 levels
    """
    if leaf_count < 1:
        raise ValueError("Cannot build tree with no leaves")
    height = max(1, (leaf_count - 1).bit_length())
    if height > MAX_TREE_HEIGHT:
        raise InvalidTreeHeightError(height)
    return height


# ===========================================================================
# Merkle Proof
# ===========================================================================


@dataclass(frozen=True)
class BulkOrderProof:
    """
    Inclusion proof for a leaf in a bulk order tree.

    Attributes:
        index: Leaf index; bit i gives the node's side at level i (1 = right)
        proof: Sibling hashes ordered from the leaf level up to the root
    """
    index: int
    proof: Tuple[bytes, ...] = field(default_factory=tuple)

    @property
    def height(self) -> int:
        return len(self.proof)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "proof": ["0x" + node.hex() for node in self.proof],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkOrderProof":
        return cls(
            index=int(data["index"]),
            proof=tuple(bytes.fromhex(node[2:] if node.startswith("0x") else node) for node in data["proof"]),
        )


# ===========================================================================
# Merkle Tree
# ===========================================================================


class BulkOrderTree:
    """
    Complete binary Merkle tree over bulk order leaves.

    Features:
    - Padding with a fixed filler leaf up to ``2 ** height`` leaves
    - Layers kept in memory for proof generation
    - Configurable pair ordering (unsorted by default)
    """

    def __init__(
        self,
        leaves: Sequence[bytes],
        filler: Optional[bytes] = None,
        sort_pairs: bool = False,
    ):
        if filler is None:
            from bulksig.eip712.order_hash import EMPTY_ORDER_HASH

            filler = EMPTY_ORDER_HASH

        for leaf in leaves:
            if len(leaf) != 32:
                raise ValueError("Bulk order leaves must be 32 bytes")

        self._leaf_count = len(leaves)
        self._height = tree_height(self._leaf_count)
        self._filler = bytes(filler)
        self._hash = hash_sorted_pair if sort_pairs else hash_pair

        padded = [bytes(leaf) for leaf in leaves]
        padded.extend([self._filler] * ((1 << self._height) - len(padded)))
        self._layers: List[List[bytes]] = [padded]
        self._build()

    def _build(self) -> None:
        current_level = self._layers[0]

        while len(current_level) > 1:
            next_level = [
                self._hash(current_level[i], current_level[i + 1])
                for i in range(0, len(current_level), 2)
            ]
            self._layers.append(next_level)
            current_level = next_level

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def height(self) -> int:
        return self._height

    @property
    def leaf_count(self) -> int:
        """Number of real (unpadded) leaves."""
        return self._leaf_count

    @property
    def leaves(self) -> List[bytes]:
        """All leaves including filler, in order."""
        return list(self._layers[0])

    def get_proof(self, index: int) -> BulkOrderProof:
        """
        Get the inclusion proof for a leaf.

        Raises:
            ValueError: If index is not a leaf of the padded tree
        """
        if index < 0 or index >= len(self._layers[0]):
            raise ValueError(f"Invalid leaf index: {index}")

        proof: List[bytes] = []
        current_index = index
        for level in self._layers[:-1]:
            proof.append(level[current_index ^ 1])
            current_index >>= 1

        return BulkOrderProof(index=index, proof=tuple(proof))


# ===========================================================================
# Root Reconstruction
# ===========================================================================


def recompute_root(leaf: bytes, index: int, proof: Sequence[bytes]) -> bytes:
    """
    Rebuild a tree root from a leaf, its index and its sibling path.

    At level i, bit i of ``index`` selects whether the running node is the left
    (bit 0) or right (bit 1) operand. The index is not checked against the proof
    length: bits above the tree height are ignored and a wrong index simply
    yields a different root.

    Raises:
        ValueError: If index is outside [0, 2**24) or a node is not 32 bytes
        InvalidTreeHeightError: If the proof has more than 24 elements
    """
    if index < 0 or index > MAX_LEAF_INDEX:
        raise ValueError(f"Leaf index out of range: {index}")
    if len(proof) > MAX_TREE_HEIGHT:
        raise InvalidTreeHeightError(len(proof))

    current = leaf
    for level, sibling in enumerate(proof):
        if (index >> level) & 1:
            current = hash_pair(sibling, current)
        else:
            current = hash_pair(current, sibling)
    return current


def verify_proof(leaf: bytes, index: int, proof: Sequence[bytes], root: bytes) -> bool:
    """Check that ``leaf`` at ``index`` is committed to by ``root``."""
    try:
        return recompute_root(leaf, index, proof) == root
    except ValueError:
        return False


def compute_root(leaves: Sequence[bytes], filler: Optional[bytes] = None) -> bytes:
    """
    Compute the root of a bulk order tree without keeping its layers.

    Convenience wrapper for callers that only need the root.
    """
    return BulkOrderTree(leaves, filler=filler).root
