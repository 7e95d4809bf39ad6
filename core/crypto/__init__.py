"""
Core cryptographic utilities.

Module 02 provides the hash functions the trie verifier is generic over.
"""
from .hashing import (
    DEFAULT_HASHER_NAME,
    Blake2_256,
    Hasher,
    Sha2_256,
    available_hashers,
    blake2_256,
    from_hex,
    get_hasher,
    sha256,
    to_hex,
)

__all__ = [
    "DEFAULT_HASHER_NAME",
    "Blake2_256",
    "Hasher",
    "Sha2_256",
    "available_hashers",
    "blake2_256",
    "from_hex",
    "get_hasher",
    "sha256",
    "to_hex",
]
