"""
Module 03 - Nibble Utilities
Conversions between byte strings and base-16 trie paths.

A trie key is walked one nibble (4 bits) at a time, high nibble first.
Partial keys stored in nodes are nibble-packed with left padding: when the
nibble count is odd, the first byte holds a single nibble in its low half
and its high half must be zero.
"""
from __future__ import annotations

from typing import Sequence

NIBBLE_PER_BYTE = 2
NIBBLE_LENGTH = 16


def bytes_to_nibbles(data: bytes) -> tuple[int, ...]:
    """
    Split bytes into nibbles, high nibble first.

    Example:
        >>> bytes_to_nibbles(b"\\xab\\x01")
        (10, 11, 0, 1)
    """
    nibbles: list[int] = []
    for byte in data:
        nibbles.append(byte >> 4)
        nibbles.append(byte & 0x0F)
    return tuple(nibbles)


def packed_length(nibble_count: int) -> int:
    """Number of bytes a left-padded partial key of `nibble_count` nibbles occupies."""
    return (nibble_count + NIBBLE_PER_BYTE - 1) // NIBBLE_PER_BYTE


def unpack_partial(data: bytes, nibble_count: int) -> tuple[int, ...]:
    """
    Unpack a left-padded partial key.

    Args:
        data: Exactly packed_length(nibble_count) bytes
        nibble_count: Number of nibbles encoded in `data`

    Returns:
        The nibbles of the partial key

    Raises:
        ValueError: If the length is wrong or the padding nibble is not zero
    """
    if len(data) != packed_length(nibble_count):
        raise ValueError(
            f"Partial key of {nibble_count} nibbles needs "
            f"{packed_length(nibble_count)} bytes, got {len(data)}"
        )
    nibbles = bytes_to_nibbles(data)
    if nibble_count % NIBBLE_PER_BYTE:
        if nibbles[0] != 0:
            raise ValueError("Non-zero padding nibble in partial key")
        return nibbles[1:]
    return nibbles


def pack_partial(nibbles: Sequence[int]) -> bytes:
    """
    Pack nibbles into a left-padded partial key.

    Example:
        >>> pack_partial([1, 2, 3]).hex()
        '0123'
    """
    padded = list(nibbles)
    if len(padded) % NIBBLE_PER_BYTE:
        padded.insert(0, 0)
    return bytes(
        (padded[i] << 4) | padded[i + 1]
        for i in range(0, len(padded), NIBBLE_PER_BYTE)
    )


def common_prefix_length(a: Sequence[int], b: Sequence[int]) -> int:
    """Length of the longest shared prefix of two nibble sequences."""
    count = 0
    for x, y in zip(a, b):
        if x != y:
            break
        count += 1
    return count


__all__ = [
    "NIBBLE_PER_BYTE",
    "NIBBLE_LENGTH",
    "bytes_to_nibbles",
    "packed_length",
    "unpack_partial",
    "pack_partial",
    "common_prefix_length",
]
