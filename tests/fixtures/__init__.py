"""
Test fixtures package for DIP proof verifier tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: Leaf factories and layouts
- trie_builder.py: Reference trie producer (roots and blinded nodes)

Usage:
    from fixtures import make_identity_leaves, make_dip_proof, make_layout

    def test_something():
        leaves = make_identity_leaves()
        root, proof = make_dip_proof(leaves, leaves, make_layout())
"""

from .common import (
    make_did_key_leaf,
    make_encryption_key_leaf,
    make_identity_leaves,
    make_layout,
    make_linked_account_leaf,
    make_web3_name_leaf,
    seeded_bytes,
)

from .trie_builder import (
    BuiltTrie,
    build_identity_commitment,
    build_trie,
    make_dip_proof,
)

__all__ = [
    # Common
    "make_did_key_leaf",
    "make_encryption_key_leaf",
    "make_identity_leaves",
    "make_layout",
    "make_linked_account_leaf",
    "make_web3_name_leaf",
    "seeded_bytes",
    # Trie builder
    "BuiltTrie",
    "build_identity_commitment",
    "build_trie",
    "make_dip_proof",
]
