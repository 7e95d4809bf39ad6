"""
Module 04 - DIP Leaf Model
Typed identity facts that a DIP Merkle proof can reveal.

Owner: Protocol/Crypto Engineer
Module ID: M04

A revealed leaf is exactly one of:
- DidKeyLeaf: a key bound to the DID under a given relationship
- Web3NameLeaf: the web3name linked to the DID and when it was claimed
- LinkedAccountLeaf: an account linked to the DID (presence only)

RevealedLeaf is the closed union of the three. Code that dispatches on a
leaf must handle every kind and raise TypeError for anything else.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional, Union


KEY_ID_LENGTH = 32


class DidVerificationKeyRelationship(str, Enum):
    """
    Relationship of a verification key to its DID Document.

    Declaration order is the variant order of the wire encoding.
    """
    AUTHENTICATION = "authentication"
    CAPABILITY_DELEGATION = "capability_delegation"
    CAPABILITY_INVOCATION = "capability_invocation"
    ASSERTION_METHOD = "assertion_method"

    @property
    def index(self) -> int:
        return list(DidVerificationKeyRelationship).index(self)


@total_ordering
@dataclass(frozen=True)
class DidKeyRelationship:
    """
    Relationship of any key to its DID Document: Encryption, or
    Verification with a sub-relationship.

    `verification` is None for the Encryption variant. Ordering puts
    Encryption first, then verification relationships in variant order; it
    has no cryptographic meaning.
    """
    verification: Optional[DidVerificationKeyRelationship] = None

    @classmethod
    def encryption(cls) -> "DidKeyRelationship":
        return cls(None)

    @classmethod
    def from_verification(cls, relationship: DidVerificationKeyRelationship) -> "DidKeyRelationship":
        return cls(DidVerificationKeyRelationship(relationship))

    @property
    def is_encryption(self) -> bool:
        return self.verification is None

    def verification_relationship(self) -> DidVerificationKeyRelationship:
        """
        The verification sub-relationship.

        Raises:
            ValueError: For the Encryption variant
        """
        if self.verification is None:
            raise ValueError("Encryption relationship has no verification relationship")
        return self.verification

    def _sort_key(self) -> tuple[int, ...]:
        if self.verification is None:
            return (0,)
        return (1, self.verification.index)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DidKeyRelationship):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if self.verification is None:
            return "encryption"
        return self.verification.value


# =============================================================================
# Key material
# =============================================================================

class VerificationKeyType(str, Enum):
    """Verification key schemes, in wire variant order."""
    ED25519 = "ed25519"
    SR25519 = "sr25519"
    ECDSA = "ecdsa"
    ACCOUNT = "account"

    @property
    def index(self) -> int:
        return list(VerificationKeyType).index(self)


class EncryptionKeyType(str, Enum):
    """Encryption key schemes, in wire variant order."""
    X25519 = "x25519"

    @property
    def index(self) -> int:
        return list(EncryptionKeyType).index(self)


VERIFICATION_KEY_LENGTHS: dict[VerificationKeyType, int] = {
    VerificationKeyType.ED25519: 32,
    VerificationKeyType.SR25519: 32,
    VerificationKeyType.ECDSA: 33,
    VerificationKeyType.ACCOUNT: 32,
}

ENCRYPTION_KEY_LENGTHS: dict[EncryptionKeyType, int] = {
    EncryptionKeyType.X25519: 32,
}


@dataclass(frozen=True)
class DidVerificationKey:
    """
    A public verification key. The ACCOUNT type binds the DID to an owning
    account id instead of a raw key.
    """
    key_type: VerificationKeyType
    public_key: bytes

    def __post_init__(self) -> None:
        expected = VERIFICATION_KEY_LENGTHS[VerificationKeyType(self.key_type)]
        if len(self.public_key) != expected:
            raise ValueError(
                f"{self.key_type.value} key must be {expected} bytes, got {len(self.public_key)}"
            )


@dataclass(frozen=True)
class DidEncryptionKey:
    """A public key-agreement key."""
    key_type: EncryptionKeyType
    public_key: bytes

    def __post_init__(self) -> None:
        expected = ENCRYPTION_KEY_LENGTHS[EncryptionKeyType(self.key_type)]
        if len(self.public_key) != expected:
            raise ValueError(
                f"{self.key_type.value} key must be {expected} bytes, got {len(self.public_key)}"
            )


DidPublicKey = Union[DidVerificationKey, DidEncryptionKey]


@dataclass(frozen=True)
class DidPublicKeyDetails:
    """A DID public key and the block number at which it was added."""
    key: DidPublicKey
    block_number: int

    def __post_init__(self) -> None:
        if self.block_number < 0:
            raise ValueError(f"Block number must be non-negative, got {self.block_number}")


# =============================================================================
# Linked accounts
# =============================================================================

class LinkableAccountKind(str, Enum):
    """Account id formats a DID can be linked to, in wire variant order."""
    ACCOUNT_ID_20 = "account_id_20"
    ACCOUNT_ID_32 = "account_id_32"

    @property
    def index(self) -> int:
        return list(LinkableAccountKind).index(self)

    @property
    def length(self) -> int:
        return 20 if self is LinkableAccountKind.ACCOUNT_ID_20 else 32


@dataclass(frozen=True)
class LinkableAccountId:
    """An Ethereum-style (20 byte) or Substrate-style (32 byte) account id."""
    kind: LinkableAccountKind
    account_id: bytes

    def __post_init__(self) -> None:
        expected = LinkableAccountKind(self.kind).length
        if len(self.account_id) != expected:
            raise ValueError(
                f"{self.kind.value} must be {expected} bytes, got {len(self.account_id)}"
            )


# =============================================================================
# Leaves
# =============================================================================

@dataclass(frozen=True)
class DidKeyLeaf:
    """
    Reveals one DID key.

    Trie key: (key_id, relationship). Trie value: details.
    """
    key_id: bytes
    relationship: DidKeyRelationship
    details: DidPublicKeyDetails

    def __post_init__(self) -> None:
        if len(self.key_id) != KEY_ID_LENGTH:
            raise ValueError(f"Key id must be {KEY_ID_LENGTH} bytes, got {len(self.key_id)}")


@dataclass(frozen=True)
class Web3NameLeaf:
    """
    Reveals the web3name linked to the DID.

    Trie key: web3_name. Trie value: claimed_at.
    """
    web3_name: str
    claimed_at: int

    def __post_init__(self) -> None:
        if not self.web3_name.isascii():
            raise ValueError("Web3name must be ASCII")
        if self.claimed_at < 0:
            raise ValueError(f"Block number must be non-negative, got {self.claimed_at}")


@dataclass(frozen=True)
class LinkedAccountLeaf:
    """
    Reveals an account linked to the DID.

    Trie key: account. Trie value: empty.
    """
    account: LinkableAccountId


RevealedLeaf = Union[DidKeyLeaf, Web3NameLeaf, LinkedAccountLeaf]

REVEALED_LEAF_TYPES: tuple[type, ...] = (DidKeyLeaf, Web3NameLeaf, LinkedAccountLeaf)


__all__ = [
    "KEY_ID_LENGTH",
    "DidVerificationKeyRelationship",
    "DidKeyRelationship",
    "VerificationKeyType",
    "EncryptionKeyType",
    "VERIFICATION_KEY_LENGTHS",
    "ENCRYPTION_KEY_LENGTHS",
    "DidVerificationKey",
    "DidEncryptionKey",
    "DidPublicKey",
    "DidPublicKeyDetails",
    "LinkableAccountKind",
    "LinkableAccountId",
    "DidKeyLeaf",
    "Web3NameLeaf",
    "LinkedAccountLeaf",
    "RevealedLeaf",
    "REVEALED_LEAF_TYPES",
]
