"""
Module 02 - SCALE Codec
Deterministic SCALE (Simple Concatenated Aggregate Little-Endian) primitives.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Fixed-width little-endian unsigned integers
- Compact (variable-length) unsigned integers
- Length-prefixed byte vectors and fixed-size byte arrays
- Enum variant framing
- ScaleDecoder: a bounds-checked cursor for reading SCALE data

Encoding Rules (Hard Contracts):
1. Fixed-width integers are little-endian, no sign
2. Compact integers use the 2-bit mode tag in the lowest bits of the first byte:
   0b00 single byte, 0b01 two bytes, 0b10 four bytes, 0b11 big-integer mode
3. Vec<u8> = compact(len) || bytes
4. [u8; N] = the N raw bytes, no prefix
5. Enum = variant index (u8) || payload

Decoding rejects non-canonical compact encodings, matching the reference
codec: a value must always use the shortest mode that can hold it.
"""
from __future__ import annotations

from core.schemas.errors import ScaleCodecException


# Upper bounds of the compact single/two/four byte modes
COMPACT_SINGLE_BYTE_MAX = (1 << 6) - 1
COMPACT_TWO_BYTE_MAX = (1 << 14) - 1
COMPACT_FOUR_BYTE_MAX = (1 << 30) - 1

# Big-integer mode carries at most 4 + 63 bytes
COMPACT_MAX_BIG_BYTES = 67

SUPPORTED_UINT_WIDTHS: frozenset[int] = frozenset({1, 2, 4, 8, 16})


def encode_uint(value: int, width: int) -> bytes:
    """
    Encode an unsigned integer as fixed-width little-endian bytes.

    Args:
        value: Non-negative integer
        width: Byte width (1, 2, 4, 8 or 16)

    Returns:
        `width` bytes

    Raises:
        ScaleCodecException: If the width is unsupported or the value
            does not fit
    """
    if width not in SUPPORTED_UINT_WIDTHS:
        raise ScaleCodecException(
            f"Unsupported integer width: {width}",
            details={"width": width},
        )
    if value < 0 or value >= 1 << (8 * width):
        raise ScaleCodecException(
            f"Value {value} does not fit in u{8 * width}",
            details={"value": value, "width": width},
        )
    return value.to_bytes(width, "little")


def encode_u8(value: int) -> bytes:
    return encode_uint(value, 1)


def encode_u16(value: int) -> bytes:
    return encode_uint(value, 2)


def encode_u32(value: int) -> bytes:
    return encode_uint(value, 4)


def encode_u64(value: int) -> bytes:
    return encode_uint(value, 8)


def encode_compact(value: int) -> bytes:
    """
    Encode a non-negative integer in SCALE compact form.

    Example:
        >>> encode_compact(1).hex()
        '04'
        >>> encode_compact(64).hex()
        '0101'
    """
    if value < 0:
        raise ScaleCodecException(
            f"Compact integers must be non-negative, got {value}",
            details={"value": value},
        )
    if value <= COMPACT_SINGLE_BYTE_MAX:
        return bytes([value << 2])
    if value <= COMPACT_TWO_BYTE_MAX:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value <= COMPACT_FOUR_BYTE_MAX:
        return ((value << 2) | 0b10).to_bytes(4, "little")

    byte_len = max(4, (value.bit_length() + 7) // 8)
    if byte_len > COMPACT_MAX_BIG_BYTES:
        raise ScaleCodecException(
            "Compact integer too large",
            details={"bit_length": value.bit_length()},
        )
    return bytes([((byte_len - 4) << 2) | 0b11]) + value.to_bytes(byte_len, "little")


def encode_bytes(data: bytes) -> bytes:
    """Encode a byte string as Vec<u8>: compact length prefix followed by the bytes."""
    return encode_compact(len(data)) + bytes(data)


def encode_fixed(data: bytes, length: int) -> bytes:
    """
    Encode a fixed-size byte array ([u8; N]).

    Raises:
        ScaleCodecException: If `data` is not exactly `length` bytes
    """
    if len(data) != length:
        raise ScaleCodecException(
            f"Expected {length} bytes, got {len(data)}",
            details={"expected": length, "actual": len(data)},
        )
    return bytes(data)


def encode_variant(index: int, payload: bytes = b"") -> bytes:
    """Encode an enum variant: one index byte followed by its payload."""
    return encode_u8(index) + payload


class ScaleDecoder:
    """
    Bounds-checked reader over a SCALE byte string.

    Every read either returns the requested data or raises
    ScaleCodecException; it never reads past the end of the buffer.

    Example:
        >>> decoder = ScaleDecoder(bytes.fromhex("0c616263"))
        >>> decoder.read_bytes()
        b'abc'
        >>> decoder.finished
        True
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = bytes(data)
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    @property
    def finished(self) -> bool:
        return self._offset >= len(self._data)

    def peek_byte(self) -> int:
        if self.finished:
            raise ScaleCodecException("Unexpected end of input", offset=self._offset)
        return self._data[self._offset]

    def read_byte(self) -> int:
        value = self.peek_byte()
        self._offset += 1
        return value

    def read(self, count: int) -> bytes:
        """Read exactly `count` bytes."""
        if count < 0 or count > self.remaining:
            raise ScaleCodecException(
                f"Cannot read {count} bytes, {self.remaining} remaining",
                offset=self._offset,
            )
        chunk = self._data[self._offset:self._offset + count]
        self._offset += count
        return chunk

    def read_uint(self, width: int) -> int:
        if width not in SUPPORTED_UINT_WIDTHS:
            raise ScaleCodecException(
                f"Unsupported integer width: {width}",
                details={"width": width},
            )
        return int.from_bytes(self.read(width), "little")

    def read_compact(self) -> int:
        """Read a compact integer, rejecting non-canonical encodings."""
        start = self._offset
        first = self.peek_byte()
        mode = first & 0b11

        if mode == 0b00:
            self._offset += 1
            return first >> 2

        if mode == 0b01:
            value = int.from_bytes(self.read(2), "little") >> 2
            if value <= COMPACT_SINGLE_BYTE_MAX:
                raise ScaleCodecException("Non-canonical compact integer", offset=start)
            return value

        if mode == 0b10:
            value = int.from_bytes(self.read(4), "little") >> 2
            if value <= COMPACT_TWO_BYTE_MAX:
                raise ScaleCodecException("Non-canonical compact integer", offset=start)
            return value

        self._offset += 1
        byte_len = (first >> 2) + 4
        value = int.from_bytes(self.read(byte_len), "little")
        minimum = COMPACT_FOUR_BYTE_MAX + 1 if byte_len == 4 else 1 << (8 * (byte_len - 1))
        if value < minimum:
            raise ScaleCodecException("Non-canonical compact integer", offset=start)
        return value

    def read_bytes(self) -> bytes:
        """Read a Vec<u8>."""
        return self.read(self.read_compact())

    def assert_consumed(self) -> None:
        """Raise if any input is left unread."""
        if not self.finished:
            raise ScaleCodecException(
                f"{self.remaining} trailing bytes after decoding",
                offset=self._offset,
            )


__all__ = [
    "COMPACT_SINGLE_BYTE_MAX",
    "COMPACT_TWO_BYTE_MAX",
    "COMPACT_FOUR_BYTE_MAX",
    "SUPPORTED_UINT_WIDTHS",
    "encode_uint",
    "encode_u8",
    "encode_u16",
    "encode_u32",
    "encode_u64",
    "encode_compact",
    "encode_bytes",
    "encode_fixed",
    "encode_variant",
    "ScaleDecoder",
]
