"""
Module 02 - Hashing Utilities
Pluggable hash functions for trie commitments, plus hex helpers.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Hasher: the capability the trie verifier is generic over
- Blake2_256 (the Substrate default) and Sha2_256 implementations
- A read-only registry to look hashers up by name
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Hashers are stateless; a single instance may be shared across threads
"""
from __future__ import annotations

import hashlib
from typing import Protocol, runtime_checkable

from core.schemas.errors import UnknownHasherException


@runtime_checkable
class Hasher(Protocol):
    """
    A fixed-output hash function.

    Implementations must be deterministic and stateless.
    """

    @property
    def name(self) -> str:
        """Registry name of this hasher."""
        ...

    @property
    def length(self) -> int:
        """Digest length in bytes."""
        ...

    def hash(self, data: bytes) -> bytes:
        """Hash raw bytes to a `length`-byte digest."""
        ...


class Blake2_256:
    """BLAKE2b with a 32-byte digest, as used by Substrate's BlakeTwo256."""

    name = "blake2_256"
    length = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=32).digest()

    def __repr__(self) -> str:
        return "Blake2_256()"


class Sha2_256:
    """SHA-256."""

    name = "sha2_256"
    length = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    def __repr__(self) -> str:
        return "Sha2_256()"


_HASHERS: dict[str, Hasher] = {
    Blake2_256.name: Blake2_256(),
    Sha2_256.name: Sha2_256(),
}

DEFAULT_HASHER_NAME = Blake2_256.name


def get_hasher(name: str) -> Hasher:
    """
    Look up a registered hasher by name.

    Args:
        name: Hasher name (e.g. "blake2_256")

    Returns:
        The shared hasher instance

    Raises:
        UnknownHasherException: If no hasher is registered under `name`
    """
    try:
        return _HASHERS[name.lower()]
    except KeyError:
        raise UnknownHasherException(name, available=available_hashers()) from None


def available_hashers() -> list[str]:
    """Names of all registered hashers, sorted."""
    return sorted(_HASHERS)


def blake2_256(data: bytes) -> bytes:
    """
    Compute the 32-byte BLAKE2b digest of raw bytes.

    Example:
        >>> blake2_256(b"\\x00").hex()[:16]
        '03170a2e7597b7b7'
    """
    return _HASHERS[Blake2_256.name].hash(data)


def sha256(data: bytes) -> bytes:
    """Compute the SHA-256 digest of raw bytes."""
    return _HASHERS[Sha2_256.name].hash(data)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "Hasher",
    "Blake2_256",
    "Sha2_256",
    "DEFAULT_HASHER_NAME",
    "get_hasher",
    "available_hashers",
    "blake2_256",
    "sha256",
    "to_hex",
    "from_hex",
]
