"""
Bulk order Merkle trees.

Provides the unsorted keccak pair hash, tree construction with empty-order
padding, proof generation and root reconstruction.
"""

from bulksig.merkle.tree import (
    MAX_LEAF_INDEX,
    BulkOrderTree,
    BulkOrderProof,
    hash_pair,
    hash_sorted_pair,
    tree_height,
    recompute_root,
    verify_proof,
    compute_root,
)

__all__ = [
    "MAX_LEAF_INDEX",
    "BulkOrderTree",
    "BulkOrderProof",
    "hash_pair",
    "hash_sorted_pair",
    "tree_height",
    "recompute_root",
    "verify_proof",
    "compute_root",
]
