"""
Module 03 - Trie Proof Verification
Inclusion-proof checking for base-16 Patricia tries.

Owner: Protocol/Crypto Engineer
Module ID: M03

A proof is an unordered collection of encoded trie nodes. Each node is
indexed by its digest, so the order and multiplicity of the supplied nodes
carry no meaning and nodes nobody needs are ignored. For every claimed
(key, value) pair the verifier walks from the trusted root along the key's
nibbles, resolving hash references through that index and inline children
in place, and requires the terminal node to hold exactly the claimed value
(or the digest of it, for values stored by hash).

Every failure (missing node, digest mismatch, absent key, wrong value,
malformed node, duplicate claim, nodes supplied with nothing to prove)
surfaces as TrieProofError and nothing else: the whole input may be
adversarial.
"""
from __future__ import annotations

from typing import Iterable

from core.schemas.errors import DipException, TrieProofError
from core.trie.layout import TrieLayout
from core.trie.nibbles import bytes_to_nibbles
from core.trie.node_codec import (
    BranchNode,
    EmptyNode,
    HashChild,
    InlineValue,
    LeafNode,
    NodeValue,
    TrieNode,
    decode_node,
)


class _ProofNodes:
    """Digest-indexed view of the supplied proof nodes with memoized decoding."""

    def __init__(self, proof_nodes: Iterable[bytes], layout: TrieLayout) -> None:
        self._layout = layout
        self._encoded: dict[bytes, bytes] = {}
        self._decoded: dict[bytes, TrieNode] = {}
        for node in proof_nodes:
            encoded = bytes(node)
            self._encoded[layout.hasher.hash(encoded)] = encoded

    def by_digest(self, digest: bytes) -> TrieNode:
        node = self._decoded.get(digest)
        if node is not None:
            return node
        encoded = self._encoded.get(digest)
        if encoded is None:
            raise TrieProofError("Proof is missing a node on the key path")
        node = decode_node(encoded, self._layout.hash_length)
        self._decoded[digest] = node
        return node

    def inline(self, encoded: bytes) -> TrieNode:
        return decode_node(encoded, self._layout.hash_length)


def _lookup(root: bytes, key: bytes, nodes: _ProofNodes) -> NodeValue:
    remaining = bytes_to_nibbles(key)
    node = nodes.by_digest(root)

    while True:
        if isinstance(node, EmptyNode):
            raise TrieProofError("Key not present in trie")

        if isinstance(node, LeafNode):
            if node.partial != remaining:
                raise TrieProofError("Key not present in trie")
            return node.value

        if not isinstance(node, BranchNode):
            raise TrieProofError("Unexpected node type")

        prefix_len = len(node.partial)
        if remaining[:prefix_len] != node.partial:
            raise TrieProofError("Key not present in trie")
        remaining = remaining[prefix_len:]

        if not remaining:
            if node.value is None:
                raise TrieProofError("Key not present in trie")
            return node.value

        child = node.children[remaining[0]]
        remaining = remaining[1:]
        if child is None:
            raise TrieProofError("Key not present in trie")
        if isinstance(child, HashChild):
            node = nodes.by_digest(child.digest)
        else:
            node = nodes.inline(child.encoded)


def _value_matches(stored: NodeValue, claimed: bytes, layout: TrieLayout) -> bool:
    if isinstance(stored, InlineValue):
        return stored.data == claimed
    return stored.digest == layout.hasher.hash(claimed)


def verify_trie_proof(
    root: bytes,
    proof_nodes: Iterable[bytes],
    items: Iterable[tuple[bytes, bytes]],
    layout: TrieLayout,
) -> None:
    """
    Verify that every (key, value) pair is a member of the trie with `root`.

    Args:
        root: Trusted root digest
        proof_nodes: Encoded trie nodes, in any order
        items: Claimed (key, value) pairs
        layout: Trie layout (hasher and value-inlining rule)

    Raises:
        TrieProofError: If any pair cannot be proven against `root`
    """
    try:
        _verify(bytes(root), proof_nodes, items, layout)
    except TrieProofError:
        raise
    except (DipException, ValueError, TypeError, IndexError) as e:
        raise TrieProofError() from e


def _verify(
    root: bytes,
    proof_nodes: Iterable[bytes],
    items: Iterable[tuple[bytes, bytes]],
    layout: TrieLayout,
) -> None:
    if len(root) != layout.hash_length:
        raise TrieProofError("Root has the wrong length for this hasher")

    claimed = [(bytes(key), value) for key, value in items]
    seen: set[bytes] = set()
    for key, value in claimed:
        if key in seen:
            raise TrieProofError("Duplicate key in claimed items")
        seen.add(key)

    proof_nodes = list(proof_nodes)
    if not claimed:
        # Nothing to prove, so every supplied node is extraneous
        if proof_nodes:
            raise TrieProofError("Proof nodes supplied without claimed items")
        return

    nodes = _ProofNodes(proof_nodes, layout)
    for key, value in claimed:
        stored = _lookup(root, key, nodes)
        if not _value_matches(stored, bytes(value), layout):
            raise TrieProofError("Value does not match the committed value")


__all__ = [
    "verify_trie_proof",
]
