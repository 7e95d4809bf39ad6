"""
Module 03 - Trie Proof Verification Unit Tests
Tests for core/trie/verify.py and core/trie/layout.py

Tests:
- Membership of single and many entries, in both layouts
- Proof nodes behave as an unordered set
- Tampering (node bytes, values, keys) is detected
- Every failure surfaces as TrieProofError
"""
import hashlib
import random

import pytest

from core.crypto.hashing import get_hasher
from core.schemas.errors import ErrorCodes, TrieProofError
from core.trie.layout import TRIE_VALUE_NODE_THRESHOLD, layout_for
from core.trie.node_codec import encode_leaf, InlineValue
from core.trie.verify import verify_trie_proof

from fixtures.trie_builder import build_trie


def make_entries(count: int, seed: int = 7) -> dict[bytes, bytes]:
    rng = random.Random(seed)
    entries: dict[bytes, bytes] = {}
    while len(entries) < count:
        key = bytes(rng.randrange(256) for _ in range(rng.choice([1, 2, 6, 32, 33])))
        value = bytes(rng.randrange(256) for _ in range(rng.choice([0, 1, 8, 32, 33, 80])))
        entries[key] = value
    return entries


@pytest.fixture(params=[0, 1], ids=["layout_v0", "layout_v1"])
def any_layout(request):
    return layout_for(request.param, get_hasher("blake2_256"))


class TestLayouts:
    """Tests for layout_for() and value inlining."""

    def test_v0_inlines_everything(self):
        """Test layout 0 never hashes values."""
        layout = layout_for(0, get_hasher("blake2_256"))
        assert isinstance(layout.node_value(b"x" * 100), InlineValue)

    def test_v1_threshold(self):
        """Test layout 1 hashes values of 33 bytes or more."""
        layout = layout_for(1, get_hasher("blake2_256"))
        assert isinstance(layout.node_value(b"x" * (TRIE_VALUE_NODE_THRESHOLD - 1)), InlineValue)
        hashed = layout.node_value(b"x" * TRIE_VALUE_NODE_THRESHOLD)
        assert hashed.digest == layout.hasher.hash(b"x" * TRIE_VALUE_NODE_THRESHOLD)

    def test_unsupported_version(self):
        """Test unknown layout versions are rejected."""
        with pytest.raises(ValueError):
            layout_for(2, get_hasher("blake2_256"))

    def test_empty_root(self):
        """Test the empty root is the digest of the empty node."""
        layout = layout_for(1, get_hasher("blake2_256"))
        assert layout.empty_root().hex().startswith("03170a2e")


class TestMembership:
    """Tests for proofs that should verify."""

    def test_single_entry(self, any_layout):
        """Test a one-entry trie is a single leaf at the root."""
        built = build_trie({b"\x01\x02": b"value"}, any_layout)
        assert built.root_node == encode_leaf((0, 1, 0, 2), InlineValue(b"value"))
        verify_trie_proof(built.root, built.nodes, [(b"\x01\x02", b"value")], any_layout)

    def test_many_entries_together(self, any_layout):
        """Test all entries of a larger trie verify in one call."""
        entries = make_entries(60)
        built = build_trie(entries, any_layout)
        verify_trie_proof(built.root, built.nodes, entries.items(), any_layout)

    def test_each_entry_alone(self, any_layout):
        """Test every entry verifies on its own."""
        entries = make_entries(25, seed=3)
        built = build_trie(entries, any_layout)
        for key, value in entries.items():
            verify_trie_proof(built.root, built.nodes, [(key, value)], any_layout)

    def test_hashed_values(self):
        """Test long values stored by hash verify against the full value."""
        layout = layout_for(1, get_hasher("blake2_256"))
        entries = {b"\xaa": b"v" * 40, b"\xab": b"w" * 33, b"\xac": b"short"}
        built = build_trie(entries, layout)
        verify_trie_proof(built.root, built.nodes, entries.items(), layout)

    def test_key_prefix_of_another(self, any_layout):
        """Test a key that prefixes another is stored as a branch value."""
        entries = {b"\x01": b"a", b"\x01\x02": b"b", b"\x01\x02\x03": b"c"}
        built = build_trie(entries, any_layout)
        verify_trie_proof(built.root, built.nodes, entries.items(), any_layout)

    def test_empty_key_and_empty_value(self, any_layout):
        """Test the empty key and the empty value are ordinary entries."""
        entries = {b"": b"root-value", b"\x10": b""}
        built = build_trie(entries, any_layout)
        verify_trie_proof(built.root, built.nodes, entries.items(), any_layout)

    def test_sha256_hasher(self):
        """Test verification is generic over the hasher."""
        layout = layout_for(1, get_hasher("sha2_256"))
        entries = make_entries(20, seed=11)
        built = build_trie(entries, layout)
        verify_trie_proof(built.root, built.nodes, entries.items(), layout)

    def test_no_items_always_succeeds(self, any_layout):
        """Test an empty claim list needs no nodes at all."""
        verify_trie_proof(b"\x00" * 32, [], [], any_layout)

    def test_no_items_with_nodes_rejected(self, any_layout):
        """Test nodes supplied with an empty claim list are extraneous."""
        built = build_trie({b"\x01": b"a"}, any_layout)
        with pytest.raises(TrieProofError):
            verify_trie_proof(built.root, built.nodes, [], any_layout)


class TestNodeSetSemantics:
    """Tests for proof nodes behaving as an unordered set."""

    def test_node_order_irrelevant(self, any_layout):
        """Test any permutation of the nodes verifies."""
        entries = make_entries(40, seed=5)
        built = build_trie(entries, any_layout)
        nodes = list(built.nodes)
        random.Random(1).shuffle(nodes)
        verify_trie_proof(built.root, nodes, entries.items(), any_layout)
        verify_trie_proof(built.root, list(reversed(nodes)), entries.items(), any_layout)

    def test_duplicates_and_extra_nodes_ignored(self, any_layout):
        """Test duplicated and unrelated nodes do not affect the result."""
        entries = make_entries(30, seed=9)
        built = build_trie(entries, any_layout)
        other = build_trie(make_entries(10, seed=99), any_layout)
        nodes = built.nodes + built.nodes[:3] + other.nodes + [b"\xff\xff garbage"]
        verify_trie_proof(built.root, nodes, entries.items(), any_layout)


class TestRejection:
    """Tests for proofs that must fail with TrieProofError."""

    @pytest.fixture
    def built(self, any_layout):
        entries = make_entries(40, seed=21)
        return entries, build_trie(entries, any_layout)

    def test_wrong_value(self, built, any_layout):
        """Test a changed value is rejected."""
        entries, trie = built
        key = next(iter(entries))
        with pytest.raises(TrieProofError) as exc_info:
            verify_trie_proof(trie.root, trie.nodes, [(key, entries[key] + b"!")], any_layout)
        assert exc_info.value.code == ErrorCodes.INVALID_MERKLE_PROOF

    def test_absent_key(self, built, any_layout):
        """Test a key not in the trie is rejected."""
        entries, trie = built
        absent = b"\x00" * 40
        assert absent not in entries
        with pytest.raises(TrieProofError):
            verify_trie_proof(trie.root, trie.nodes, [(absent, b"")], any_layout)

    def test_wrong_root(self, built, any_layout):
        """Test a different root is rejected."""
        entries, trie = built
        bad_root = bytes([trie.root[0] ^ 1]) + trie.root[1:]
        with pytest.raises(TrieProofError):
            verify_trie_proof(bad_root, trie.nodes, entries.items(), any_layout)

    def test_root_of_wrong_length(self, built, any_layout):
        """Test a root that is not a digest is rejected."""
        entries, trie = built
        with pytest.raises(TrieProofError):
            verify_trie_proof(trie.root[:31], trie.nodes, entries.items(), any_layout)

    def test_missing_nodes(self, built, any_layout):
        """Test dropping all but the root node is rejected."""
        entries, trie = built
        with pytest.raises(TrieProofError):
            verify_trie_proof(trie.root, [trie.root_node], entries.items(), any_layout)

    def test_flipped_byte_in_every_node(self, built, any_layout):
        """Test corrupting any one node breaks a full proof."""
        entries, trie = built
        for node in set(trie.nodes):
            corrupted = bytearray(node)
            corrupted[len(corrupted) // 2] ^= 0x01
            nodes = [n for n in trie.nodes if n != node] + [bytes(corrupted)]
            with pytest.raises(TrieProofError):
                verify_trie_proof(trie.root, nodes, entries.items(), any_layout)

    def test_duplicate_claims(self, built, any_layout):
        """Test the same key claimed twice is rejected."""
        entries, trie = built
        key = next(iter(entries))
        with pytest.raises(TrieProofError):
            verify_trie_proof(trie.root, trie.nodes, [(key, entries[key])] * 2, any_layout)

    def test_malformed_root_node(self, any_layout):
        """Test an undecodable node matching the root is a TrieProofError."""
        garbage = b"\x01\x02\x03"
        root = any_layout.hasher.hash(garbage)
        with pytest.raises(TrieProofError):
            verify_trie_proof(root, [garbage], [(b"\x01", b"")], any_layout)

    def test_empty_trie_has_no_members(self, any_layout):
        """Test nothing can be proven against the empty root."""
        built = build_trie({}, any_layout)
        assert built.root == any_layout.empty_root()
        with pytest.raises(TrieProofError):
            verify_trie_proof(built.root, built.nodes, [(b"\x01", b"")], any_layout)


def blake2_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


class TestSubstrateNodeVectors:
    """Tests against node bytes spelled out in the Substrate trie format."""

    # Branch over nibbles 0,1,0 (header 0x83, left-padded partial 00 10),
    # children at slots 2 and 3 (bitmap 0c00), each an inline leaf with no
    # remaining partial key (header 0x40) and a one-byte value.
    TWO_LEAF_BRANCH = bytes.fromhex("830010" "0c00" "0c400461" "0c400462")

    def test_inline_children(self):
        """Test a branch with two inline leaves, in both layouts."""
        root = blake2_256(self.TWO_LEAF_BRANCH)
        entries = {b"\x01\x02": b"a", b"\x01\x03": b"b"}
        for version in (0, 1):
            layout = layout_for(version, get_hasher("blake2_256"))
            verify_trie_proof(root, [self.TWO_LEAF_BRANCH], entries.items(), layout)
            assert build_trie(entries, layout).root == root

    def test_hashed_child(self):
        """Test a branch referencing a 42-byte leaf by digest."""
        layout = layout_for(0, get_hasher("blake2_256"))
        big_leaf = bytes.fromhex("40a0") + b"z" * 40
        root_node = bytes.fromhex("830010" "0c00" "0c400461" "80") + blake2_256(big_leaf)
        root = blake2_256(root_node)
        entries = {b"\x01\x02": b"a", b"\x01\x03": b"z" * 40}

        verify_trie_proof(root, [big_leaf, root_node], entries.items(), layout)
        assert build_trie(entries, layout).root == root
        with pytest.raises(TrieProofError):
            verify_trie_proof(root, [root_node], [(b"\x01\x03", b"z" * 40)], layout)

    def test_hashed_value_leaf(self):
        """Test a layout 1 leaf storing a 40-byte value by digest."""
        layout = layout_for(1, get_hasher("blake2_256"))
        value = b"v" * 40
        # Hashed-value leaf header 0b001 with 2 nibbles, partial aa, raw digest
        node = bytes.fromhex("22aa") + blake2_256(value)
        root = blake2_256(node)

        verify_trie_proof(root, [node], [(b"\xaa", value)], layout)
        assert build_trie({b"\xaa": value}, layout).root == root
        with pytest.raises(TrieProofError):
            verify_trie_proof(root, [node], [(b"\xaa", b"w" * 40)], layout)
