"""
Module 03 - Patricia Trie Proofs

This module provides:
- TrieLayout / layout_for: hasher plus value-inlining rule
- Node codec: encode/decode base-16 trie nodes
- verify_trie_proof: check (key, value) membership against a trusted root

Usage:
    from core.crypto import get_hasher
    from core.trie import layout_for, verify_trie_proof

    layout = layout_for(1, get_hasher("blake2_256"))
    verify_trie_proof(root, proof_nodes, [(key, value)], layout)  # raises TrieProofError
"""
from .layout import (
    SUPPORTED_LAYOUT_VERSIONS,
    TRIE_VALUE_NODE_THRESHOLD,
    TrieLayout,
    layout_for,
)
from .node_codec import (
    BranchNode,
    ChildHandle,
    EmptyNode,
    HashChild,
    HashedValue,
    InlineChild,
    InlineValue,
    LeafNode,
    NodeValue,
    TrieNode,
    decode_node,
    encode_branch,
    encode_empty,
    encode_leaf,
)
from .verify import verify_trie_proof


__all__ = [
    # Layouts
    "SUPPORTED_LAYOUT_VERSIONS",
    "TRIE_VALUE_NODE_THRESHOLD",
    "TrieLayout",
    "layout_for",
    # Node model and codec
    "BranchNode",
    "ChildHandle",
    "EmptyNode",
    "HashChild",
    "HashedValue",
    "InlineChild",
    "InlineValue",
    "LeafNode",
    "NodeValue",
    "TrieNode",
    "decode_node",
    "encode_branch",
    "encode_empty",
    "encode_leaf",
    # Verification
    "verify_trie_proof",
]
