"""
Module 03 - Trie Layouts
A layout pairs a hasher with the rule deciding which values are stored inline.

- Layout version 0: every value is stored inline in its node
- Layout version 1: values of TRIE_VALUE_NODE_THRESHOLD bytes or more are
  stored by hash, the node carrying only the digest
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.crypto.hashing import Hasher
from core.trie.node_codec import HashedValue, InlineValue, NodeValue, encode_empty

TRIE_VALUE_NODE_THRESHOLD = 33

SUPPORTED_LAYOUT_VERSIONS: frozenset[int] = frozenset({0, 1})


@dataclass(frozen=True)
class TrieLayout:
    """
    Hasher plus value-inlining rule of a trie.

    Attributes:
        version: Layout version (0 or 1)
        hasher: Hash function used for node and value digests
        max_inline_value: Values at least this long are stored by hash;
            None stores every value inline
    """
    version: int
    hasher: Hasher
    max_inline_value: Optional[int] = None

    @property
    def hash_length(self) -> int:
        return self.hasher.length

    def node_value(self, value: bytes) -> NodeValue:
        """How `value` is stored in a node under this layout."""
        if self.max_inline_value is not None and len(value) >= self.max_inline_value:
            return HashedValue(self.hasher.hash(value))
        return InlineValue(value)

    def empty_root(self) -> bytes:
        """Root of a trie with no entries."""
        return self.hasher.hash(encode_empty())


def layout_for(version: int, hasher: Hasher) -> TrieLayout:
    """
    Build the layout of the given version over `hasher`.

    Raises:
        ValueError: If the layout version is not supported
    """
    if version == 0:
        return TrieLayout(version=0, hasher=hasher, max_inline_value=None)
    if version == 1:
        return TrieLayout(version=1, hasher=hasher, max_inline_value=TRIE_VALUE_NODE_THRESHOLD)
    raise ValueError(
        f"Unsupported trie layout version: {version}. "
        f"Supported versions: {sorted(SUPPORTED_LAYOUT_VERSIONS)}"
    )


__all__ = [
    "TRIE_VALUE_NODE_THRESHOLD",
    "SUPPORTED_LAYOUT_VERSIONS",
    "TrieLayout",
    "layout_for",
]
