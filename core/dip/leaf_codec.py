"""
Module 04 - DIP Leaf Codec
Derives the trie (key, value) bytes committed for each revealed leaf.

Owner: Protocol/Crypto Engineer
Module ID: M04

Encodings (identity commitment version 0, SCALE):

    DidKey         key   = key_id[32] || relationship
                   value = public_key || block_number
    Web3Name       key   = compact(len) || name
                   value = block_number
    LinkedAccount  key   = variant || account_id
                   value = (empty)

    relationship   Encryption = 0x00, Verification(r) = 0x01 || r
    public_key     0x00 || verification_key, 0x01 || encryption_key
    *_key          variant || raw key bytes

Block numbers are fixed-width little-endian; the width is a codec
parameter (u64 by default, u32 for chains with 32-bit block numbers).
"""
from __future__ import annotations

from dataclasses import dataclass

from core.codec.scale import encode_bytes, encode_fixed, encode_uint, encode_variant
from core.dip.leaves import (
    KEY_ID_LENGTH,
    DidEncryptionKey,
    DidKeyLeaf,
    DidKeyRelationship,
    DidPublicKey,
    DidVerificationKey,
    LinkableAccountId,
    LinkedAccountLeaf,
    RevealedLeaf,
    Web3NameLeaf,
)
from core.schemas.errors import DipException, ErrorCodes


SUPPORTED_COMMITMENT_VERSIONS: frozenset[int] = frozenset({0})
SUPPORTED_BLOCK_NUMBER_WIDTHS: frozenset[int] = frozenset({4, 8})

DEFAULT_COMMITMENT_VERSION = 0
DEFAULT_BLOCK_NUMBER_WIDTH = 8

_PUBLIC_VERIFICATION_KEY = 0
_PUBLIC_ENCRYPTION_KEY = 1
_ENCRYPTION_RELATIONSHIP = 0
_VERIFICATION_RELATIONSHIP = 1


class UnsupportedCommitmentVersionError(DipException):
    """Raised when no leaf encoding is defined for an identity commitment version."""

    def __init__(self, version: int) -> None:
        super().__init__(
            message=(
                f"Unsupported identity commitment version: {version}. "
                f"Supported versions: {sorted(SUPPORTED_COMMITMENT_VERSIONS)}"
            ),
            code=ErrorCodes.UNSUPPORTED_VERSION,
            details={"version": version},
        )
        self.version = version


def encode_relationship(relationship: DidKeyRelationship) -> bytes:
    if relationship.is_encryption:
        return encode_variant(_ENCRYPTION_RELATIONSHIP)
    inner = relationship.verification_relationship()
    return encode_variant(_VERIFICATION_RELATIONSHIP, encode_variant(inner.index))


def encode_public_key(key: DidPublicKey) -> bytes:
    if isinstance(key, DidVerificationKey):
        inner = encode_variant(key.key_type.index, key.public_key)
        return encode_variant(_PUBLIC_VERIFICATION_KEY, inner)
    if isinstance(key, DidEncryptionKey):
        inner = encode_variant(key.key_type.index, key.public_key)
        return encode_variant(_PUBLIC_ENCRYPTION_KEY, inner)
    raise TypeError(f"Unknown public key type: {type(key).__name__}")


def encode_linkable_account(account: LinkableAccountId) -> bytes:
    return encode_variant(account.kind.index, account.account_id)


@dataclass(frozen=True)
class LeafCodec:
    """
    Leaf-to-trie-entry encoder for one identity commitment version.

    Attributes:
        version: Identity commitment version the encoding belongs to
        block_number_width: Byte width of block numbers (4 or 8)

    Example:
        codec = LeafCodec()
        key, value = codec.encoded_key(leaf), codec.encoded_value(leaf)
    """
    version: int = DEFAULT_COMMITMENT_VERSION
    block_number_width: int = DEFAULT_BLOCK_NUMBER_WIDTH

    def __post_init__(self) -> None:
        if self.version not in SUPPORTED_COMMITMENT_VERSIONS:
            raise UnsupportedCommitmentVersionError(self.version)
        if self.block_number_width not in SUPPORTED_BLOCK_NUMBER_WIDTHS:
            raise ValueError(
                f"Unsupported block number width: {self.block_number_width}. "
                f"Supported widths: {sorted(SUPPORTED_BLOCK_NUMBER_WIDTHS)}"
            )

    def encode_block_number(self, block_number: int) -> bytes:
        return encode_uint(block_number, self.block_number_width)

    def encoded_key(self, leaf: RevealedLeaf) -> bytes:
        """Trie key under which `leaf` is committed."""
        if isinstance(leaf, DidKeyLeaf):
            return encode_fixed(leaf.key_id, KEY_ID_LENGTH) + encode_relationship(leaf.relationship)
        if isinstance(leaf, Web3NameLeaf):
            return encode_bytes(leaf.web3_name.encode("ascii"))
        if isinstance(leaf, LinkedAccountLeaf):
            return encode_linkable_account(leaf.account)
        raise TypeError(f"Unknown revealed leaf type: {type(leaf).__name__}")

    def encoded_value(self, leaf: RevealedLeaf) -> bytes:
        """Trie value committed under `leaf`'s key."""
        if isinstance(leaf, DidKeyLeaf):
            details = leaf.details
            return encode_public_key(details.key) + self.encode_block_number(details.block_number)
        if isinstance(leaf, Web3NameLeaf):
            return self.encode_block_number(leaf.claimed_at)
        if isinstance(leaf, LinkedAccountLeaf):
            return b""
        raise TypeError(f"Unknown revealed leaf type: {type(leaf).__name__}")

    def encode(self, leaf: RevealedLeaf) -> tuple[bytes, bytes]:
        """(key, value) pair committed for `leaf`."""
        return self.encoded_key(leaf), self.encoded_value(leaf)


def codec_for(version: int, block_number_width: int = DEFAULT_BLOCK_NUMBER_WIDTH) -> LeafCodec:
    """
    Leaf codec for an identity commitment version.

    Raises:
        UnsupportedCommitmentVersionError: If `version` is unknown
    """
    return LeafCodec(version=version, block_number_width=block_number_width)


__all__ = [
    "SUPPORTED_COMMITMENT_VERSIONS",
    "SUPPORTED_BLOCK_NUMBER_WIDTHS",
    "DEFAULT_COMMITMENT_VERSION",
    "DEFAULT_BLOCK_NUMBER_WIDTH",
    "UnsupportedCommitmentVersionError",
    "encode_relationship",
    "encode_public_key",
    "encode_linkable_account",
    "LeafCodec",
    "codec_for",
]
