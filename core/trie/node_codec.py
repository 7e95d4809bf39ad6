"""
Module 03 - Trie Node Codec
Encoding and decoding of Substrate-style base-16 Patricia trie nodes.

Owner: Protocol/Crypto Engineer
Module ID: M03

Node Format (Hard Contracts):
1. Header byte: node kind in the top 2, 3 or 4 bits, nibble count of the
   partial key in the remaining bits, overflowing into extra bytes
   - 0x00            empty trie
   - 0b01xx_xxxx     leaf, inline value
   - 0b10xx_xxxx     branch without value
   - 0b11xx_xxxx     branch with inline value
   - 0b001x_xxxx     leaf, value stored by hash
   - 0b0001_xxxx     branch, value stored by hash
2. Partial key: left-padded packed nibbles
3. Branch: 16-bit little-endian child bitmap, then the value (if any),
   then one SCALE byte string per present child
4. Inline value: SCALE byte string; hashed value: raw digest
5. Child reference: a digest when its length equals the hash length,
   otherwise an inline node encoding

There are no extension nodes; branches carry their own partial key.

Decoding is strict: truncated input, trailing bytes, non-zero padding,
non-canonical compact lengths and empty bitmaps are all rejected with
TrieNodeDecodeException.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from core.codec.scale import ScaleDecoder, encode_bytes, encode_u16
from core.schemas.errors import ScaleCodecException, TrieNodeDecodeException
from core.trie.nibbles import NIBBLE_LENGTH, pack_partial, packed_length, unpack_partial


EMPTY_TRIE = 0x00
LEAF_PREFIX_MASK = 0b01 << 6
BRANCH_WITHOUT_VALUE_MASK = 0b10 << 6
BRANCH_WITH_VALUE_MASK = 0b11 << 6
HASHED_VALUE_LEAF_PREFIX_MASK = 0b001 << 5
HASHED_VALUE_BRANCH_MASK = 0b0001 << 4

# Upper bound on the nibble count a header may declare
NIBBLE_SIZE_BOUND = 65535

BITMAP_LENGTH = 2


# =============================================================================
# Node Model
# =============================================================================

@dataclass(frozen=True)
class InlineValue:
    """A value stored directly in its node."""
    data: bytes


@dataclass(frozen=True)
class HashedValue:
    """A value stored elsewhere and referenced by its digest."""
    digest: bytes


NodeValue = Union[InlineValue, HashedValue]


@dataclass(frozen=True)
class HashChild:
    """Child referenced by the digest of its encoding."""
    digest: bytes


@dataclass(frozen=True)
class InlineChild:
    """Child whose encoding is shorter than a digest and is embedded directly."""
    encoded: bytes


ChildHandle = Union[HashChild, InlineChild]


@dataclass(frozen=True)
class EmptyNode:
    """The node of an empty trie."""


@dataclass(frozen=True)
class LeafNode:
    partial: tuple[int, ...]
    value: NodeValue


@dataclass(frozen=True)
class BranchNode:
    partial: tuple[int, ...]
    children: tuple[Optional[ChildHandle], ...]
    value: Optional[NodeValue] = None


TrieNode = Union[EmptyNode, LeafNode, BranchNode]


# =============================================================================
# Header
# =============================================================================

def encode_header(prefix: int, prefix_bits: int, nibble_count: int) -> bytes:
    """
    Encode a node header for a partial key of `nibble_count` nibbles.

    The low bits of the first byte hold the count up to one less than their
    maximum; larger counts saturate those bits and continue in 255-valued
    bytes terminated by a byte below 255.
    """
    if nibble_count > NIBBLE_SIZE_BOUND:
        raise ValueError(f"Partial key too long: {nibble_count} nibbles")
    max_value = 255 >> prefix_bits
    first_part = min(max_value - 1, nibble_count)
    if nibble_count == first_part:
        return bytes([prefix + first_part])

    out = [prefix + max_value]
    remaining = nibble_count - first_part
    while remaining > 0:
        if remaining < 256:
            out.append(remaining - 1)
            remaining = 0
        else:
            out.append(255)
            remaining -= 255
    return bytes(out)


def _decode_size(first: int, decoder: ScaleDecoder, prefix_bits: int) -> int:
    max_value = 255 >> prefix_bits
    result = first & max_value
    if result < max_value:
        return result
    result -= 1
    while result <= NIBBLE_SIZE_BOUND:
        n = decoder.read_byte()
        if n < 255:
            return result + n + 1
        result += 255
    return NIBBLE_SIZE_BOUND


# =============================================================================
# Encoding
# =============================================================================

def encode_empty() -> bytes:
    return bytes([EMPTY_TRIE])


def _encode_value(value: NodeValue) -> bytes:
    if isinstance(value, InlineValue):
        return encode_bytes(value.data)
    return value.digest


def encode_leaf(partial: Sequence[int], value: NodeValue) -> bytes:
    """Encode a leaf node holding `value` under the remaining key `partial`."""
    if isinstance(value, HashedValue):
        header = encode_header(HASHED_VALUE_LEAF_PREFIX_MASK, 3, len(partial))
    else:
        header = encode_header(LEAF_PREFIX_MASK, 2, len(partial))
    return header + pack_partial(partial) + _encode_value(value)


def encode_branch(
    partial: Sequence[int],
    children: Sequence[Optional[ChildHandle]],
    value: Optional[NodeValue] = None,
) -> bytes:
    """
    Encode a branch node.

    Args:
        partial: Partial key nibbles shared by everything below this branch
        children: Exactly 16 optional child handles, indexed by nibble
        value: Optional value stored at the branch itself
    """
    if len(children) != NIBBLE_LENGTH:
        raise ValueError(f"A branch has {NIBBLE_LENGTH} child slots, got {len(children)}")

    if value is None:
        header = encode_header(BRANCH_WITHOUT_VALUE_MASK, 2, len(partial))
    elif isinstance(value, HashedValue):
        header = encode_header(HASHED_VALUE_BRANCH_MASK, 4, len(partial))
    else:
        header = encode_header(BRANCH_WITH_VALUE_MASK, 2, len(partial))

    bitmap = 0
    encoded_children: list[bytes] = []
    for index, child in enumerate(children):
        if child is None:
            continue
        bitmap |= 1 << index
        if isinstance(child, HashChild):
            encoded_children.append(encode_bytes(child.digest))
        else:
            encoded_children.append(encode_bytes(child.encoded))

    out = header + pack_partial(partial) + encode_u16(bitmap)
    if value is not None:
        out += _encode_value(value)
    return out + b"".join(encoded_children)


# =============================================================================
# Decoding
# =============================================================================

def _read_partial(decoder: ScaleDecoder, nibble_count: int) -> tuple[int, ...]:
    raw = decoder.read(packed_length(nibble_count))
    try:
        return unpack_partial(raw, nibble_count)
    except ValueError as e:
        raise TrieNodeDecodeException(str(e)) from e


def _read_value(decoder: ScaleDecoder, hashed: bool, hash_length: int) -> NodeValue:
    if hashed:
        return HashedValue(decoder.read(hash_length))
    return InlineValue(decoder.read_bytes())


def decode_node(data: bytes, hash_length: int) -> TrieNode:
    """
    Decode one encoded trie node.

    Args:
        data: The full node encoding
        hash_length: Digest length of the trie's hasher

    Returns:
        EmptyNode, LeafNode or BranchNode

    Raises:
        TrieNodeDecodeException: On any malformed, truncated or
            over-long encoding
    """
    decoder = ScaleDecoder(data)
    try:
        node = _decode(decoder, hash_length)
        decoder.assert_consumed()
    except ScaleCodecException as e:
        raise TrieNodeDecodeException(e.message, details=e.details) from e
    return node


def _decode(decoder: ScaleDecoder, hash_length: int) -> TrieNode:
    first = decoder.read_byte()
    if first == EMPTY_TRIE:
        return EmptyNode()

    kind = first & (0b11 << 6)
    if kind == LEAF_PREFIX_MASK:
        partial = _read_partial(decoder, _decode_size(first, decoder, 2))
        return LeafNode(partial, _read_value(decoder, False, hash_length))
    if kind == BRANCH_WITH_VALUE_MASK:
        return _decode_branch(decoder, _decode_size(first, decoder, 2), "inline", hash_length)
    if kind == BRANCH_WITHOUT_VALUE_MASK:
        return _decode_branch(decoder, _decode_size(first, decoder, 2), None, hash_length)

    if first & (0b111 << 5) == HASHED_VALUE_LEAF_PREFIX_MASK:
        partial = _read_partial(decoder, _decode_size(first, decoder, 3))
        return LeafNode(partial, _read_value(decoder, True, hash_length))
    if first & (0b1111 << 4) == HASHED_VALUE_BRANCH_MASK:
        return _decode_branch(decoder, _decode_size(first, decoder, 4), "hashed", hash_length)

    raise TrieNodeDecodeException(
        f"Unallowed node header: 0x{first:02x}",
        details={"header": first},
    )


def _decode_branch(
    decoder: ScaleDecoder,
    nibble_count: int,
    value_kind: Optional[str],
    hash_length: int,
) -> BranchNode:
    partial = _read_partial(decoder, nibble_count)
    bitmap = decoder.read_uint(BITMAP_LENGTH)
    if bitmap == 0:
        raise TrieNodeDecodeException("Branch bitmap without a child")

    value: Optional[NodeValue] = None
    if value_kind is not None:
        value = _read_value(decoder, value_kind == "hashed", hash_length)

    children: list[Optional[ChildHandle]] = []
    for index in range(NIBBLE_LENGTH):
        if not bitmap & (1 << index):
            children.append(None)
            continue
        encoded = decoder.read_bytes()
        if len(encoded) == hash_length:
            children.append(HashChild(encoded))
        else:
            children.append(InlineChild(encoded))
    return BranchNode(partial, tuple(children), value)


__all__ = [
    "InlineValue",
    "HashedValue",
    "NodeValue",
    "HashChild",
    "InlineChild",
    "ChildHandle",
    "EmptyNode",
    "LeafNode",
    "BranchNode",
    "TrieNode",
    "encode_header",
    "encode_empty",
    "encode_leaf",
    "encode_branch",
    "decode_node",
]
