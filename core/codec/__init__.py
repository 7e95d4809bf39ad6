"""
Module 02 - SCALE Codec

Byte-exact encoding primitives shared by the leaf codec and the trie node codec.

Usage:
    from core.codec import encode_compact, encode_bytes, ScaleDecoder

    encoded = encode_bytes(b"did")          # b"\\x0cdid"
    ScaleDecoder(encoded).read_bytes()       # b"did"
"""
from .scale import (
    COMPACT_FOUR_BYTE_MAX,
    COMPACT_SINGLE_BYTE_MAX,
    COMPACT_TWO_BYTE_MAX,
    SUPPORTED_UINT_WIDTHS,
    ScaleDecoder,
    encode_bytes,
    encode_compact,
    encode_fixed,
    encode_u8,
    encode_u16,
    encode_u32,
    encode_u64,
    encode_uint,
    encode_variant,
)

__all__ = [
    "COMPACT_FOUR_BYTE_MAX",
    "COMPACT_SINGLE_BYTE_MAX",
    "COMPACT_TWO_BYTE_MAX",
    "SUPPORTED_UINT_WIDTHS",
    "ScaleDecoder",
    "encode_bytes",
    "encode_compact",
    "encode_fixed",
    "encode_u8",
    "encode_u16",
    "encode_u32",
    "encode_u64",
    "encode_uint",
    "encode_variant",
]
