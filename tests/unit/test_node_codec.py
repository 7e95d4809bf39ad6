"""
Module 03 - Trie Node Codec Unit Tests
Tests for core/trie/nibbles.py and core/trie/node_codec.py

Tests:
- Nibble packing with left padding
- Header nibble-count encoding, including overflow bytes
- Leaf and branch encodings against hand-computed bytes
- Strict decoding: padding, trailing bytes, empty bitmaps, bad headers
"""
import pytest

from core.schemas.errors import ErrorCodes, TrieNodeDecodeException
from core.trie.nibbles import (
    bytes_to_nibbles,
    common_prefix_length,
    pack_partial,
    packed_length,
    unpack_partial,
)
from core.trie.node_codec import (
    BranchNode,
    EmptyNode,
    HashChild,
    HashedValue,
    InlineChild,
    InlineValue,
    LeafNode,
    decode_node,
    encode_branch,
    encode_empty,
    encode_header,
    encode_leaf,
)


HASH_LEN = 32


class TestNibbles:
    """Tests for nibble helpers."""

    def test_bytes_to_nibbles(self):
        """Test bytes split high nibble first."""
        assert bytes_to_nibbles(b"\xab\x01") == (10, 11, 0, 1)

    def test_pack_even(self):
        """Test an even number of nibbles packs without padding."""
        assert pack_partial([1, 2, 3, 4]).hex() == "1234"

    def test_pack_odd_left_padded(self):
        """Test an odd number of nibbles is padded at the front."""
        assert pack_partial([1, 2, 3]).hex() == "0123"
        assert packed_length(3) == 2

    def test_unpack_odd(self):
        """Test unpacking drops the padding nibble."""
        assert unpack_partial(bytes.fromhex("0123"), 3) == (1, 2, 3)

    def test_unpack_rejects_non_zero_padding(self):
        """Test a set padding nibble is rejected."""
        with pytest.raises(ValueError):
            unpack_partial(bytes.fromhex("f123"), 3)

    def test_unpack_rejects_wrong_length(self):
        """Test the byte length must match the nibble count."""
        with pytest.raises(ValueError):
            unpack_partial(bytes.fromhex("0123"), 5)

    def test_common_prefix_length(self):
        """Test the shared prefix is measured nibble by nibble."""
        assert common_prefix_length((1, 2, 3), (1, 2, 4)) == 2
        assert common_prefix_length((), (1,)) == 0


class TestHeader:
    """Tests for encode_header() and nibble-count decoding."""

    def test_small_count_single_byte(self):
        """Test counts below the prefix maximum fit in the first byte."""
        assert encode_header(0x40, 2, 0) == b"\x40"
        assert encode_header(0x40, 2, 62) == b"\x7e"

    def test_count_at_maximum_overflows(self):
        """Test a count equal to the maximum needs an extra byte."""
        assert encode_header(0x40, 2, 63).hex() == "7f00"
        assert encode_header(0x40, 2, 64).hex() == "7f01"

    def test_long_count_uses_continuation(self):
        """Test counts past 255 extra use 0xff continuation bytes."""
        assert encode_header(0x40, 2, 62 + 256).hex() == "7fff00"

    def test_narrow_prefixes(self):
        """Test 3 and 4 bit prefixes leave fewer bits for the count."""
        assert encode_header(0x20, 3, 30) == bytes([0x20 + 30])
        assert encode_header(0x20, 3, 31).hex() == "3f00"
        assert encode_header(0x10, 4, 14) == bytes([0x10 + 14])

    def test_too_long_rejected(self):
        """Test partial keys over the nibble bound cannot be encoded."""
        with pytest.raises(ValueError):
            encode_header(0x40, 2, 65536)

    @pytest.mark.parametrize("count", [0, 1, 62, 63, 64, 317, 318, 319, 600])
    def test_long_partial_leaf_decodes(self, count):
        """Test leaves with long partial keys decode to the same nibbles."""
        partial = tuple((i * 5 + 3) % 16 for i in range(count))
        encoded = encode_leaf(partial, InlineValue(b"\x01"))
        node = decode_node(encoded, HASH_LEN)
        assert node == LeafNode(partial, InlineValue(b"\x01"))


class TestLeafEncoding:
    """Tests for leaf nodes."""

    def test_inline_leaf_bytes(self):
        """Test an inline-value leaf against hand-computed bytes."""
        encoded = encode_leaf([1, 2, 3], InlineValue(b"\x05"))
        assert encoded.hex() == "4301230405"

    def test_inline_leaf_decodes(self):
        """Test the inline-value leaf decodes back."""
        node = decode_node(bytes.fromhex("4301230405"), HASH_LEN)
        assert node == LeafNode((1, 2, 3), InlineValue(b"\x05"))

    def test_hashed_value_leaf(self):
        """Test a hashed-value leaf carries the raw digest."""
        digest = b"\x11" * HASH_LEN
        encoded = encode_leaf([], HashedValue(digest))
        assert encoded == b"\x20" + digest
        assert decode_node(encoded, HASH_LEN) == LeafNode((), HashedValue(digest))

    def test_empty_node(self):
        """Test the empty trie node."""
        assert encode_empty() == b"\x00"
        assert decode_node(b"\x00", HASH_LEN) == EmptyNode()


class TestBranchEncoding:
    """Tests for branch nodes."""

    def _children(self, **slots):
        children = [None] * 16
        for index, child in slots.items():
            children[int(index[1:])] = child
        return children

    def test_branch_bytes(self):
        """Test a branch without value against hand-computed bytes."""
        inline = encode_leaf([], InlineValue(b"\x07"))
        children = self._children(n0=InlineChild(inline), n3=HashChild(b"\xaa" * HASH_LEN))
        encoded = encode_branch([5], children)
        expected = (
            bytes([0x81])                      # branch, 1 nibble
            + bytes([0x05])                    # padded partial
            + bytes([0x09, 0x00])              # bitmap: slots 0 and 3
            + bytes([len(inline) << 2]) + inline
            + bytes([HASH_LEN << 2]) + b"\xaa" * HASH_LEN
        )
        assert encoded == expected

    def test_branch_round_trip(self):
        """Test branches with inline and hashed values decode back."""
        children = self._children(n1=HashChild(b"\x01" * HASH_LEN), n15=InlineChild(b"\x40\x04\x09"))
        for value in (None, InlineValue(b"abc"), HashedValue(b"\x02" * HASH_LEN)):
            encoded = encode_branch([1, 2], children, value)
            node = decode_node(encoded, HASH_LEN)
            assert node == BranchNode((1, 2), tuple(children), value)

    def test_branch_needs_sixteen_slots(self):
        """Test encode_branch() rejects a wrong slot count."""
        with pytest.raises(ValueError):
            encode_branch([], [None] * 15)


class TestStrictDecoding:
    """Tests for decode_node() rejecting malformed input."""

    @pytest.mark.parametrize(
        "encoded",
        [
            "43f1230405",      # non-zero padding nibble
            "430123040500",    # trailing byte
            "43012304",        # value length past end
            "800000",          # branch bitmap without children
            "01",              # unallowed header
            "",                # no header at all
            "7f",              # overflowing count without continuation byte
        ],
    )
    def test_malformed_rejected(self, encoded):
        """Test malformed encodings raise TrieNodeDecodeException."""
        with pytest.raises(TrieNodeDecodeException) as exc_info:
            decode_node(bytes.fromhex(encoded), HASH_LEN)
        assert exc_info.value.code == ErrorCodes.TRIE_NODE_DECODE_ERROR

    def test_hashed_value_truncated(self):
        """Test a hashed-value leaf with a short digest is rejected."""
        with pytest.raises(TrieNodeDecodeException):
            decode_node(b"\x20" + b"\x11" * (HASH_LEN - 1), HASH_LEN)
