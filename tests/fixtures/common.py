"""
Common test fixtures shared by all modules.

Provides factory functions for DIP leaves and proofs:
- DidKeyLeaf (verification and encryption keys)
- Web3NameLeaf
- LinkedAccountLeaf (20 and 32 byte account ids)
- A standard identity with keys, a name and linked accounts

Byte fields default to deterministic patterns derived from a seed so that
distinct seeds give distinct leaves.
"""

from typing import Optional

from core.crypto.hashing import get_hasher
from core.dip.leaves import (
    DidEncryptionKey,
    DidKeyLeaf,
    DidKeyRelationship,
    DidPublicKeyDetails,
    DidVerificationKey,
    DidVerificationKeyRelationship,
    EncryptionKeyType,
    LinkableAccountId,
    LinkableAccountKind,
    LinkedAccountLeaf,
    RevealedLeaf,
    VerificationKeyType,
    Web3NameLeaf,
)
from core.trie.layout import TrieLayout, layout_for


def seeded_bytes(seed: int, length: int) -> bytes:
    """`length` bytes filled with a seed-dependent pattern."""
    return bytes((seed * 31 + i * 7) % 256 for i in range(length))


def make_layout(version: int = 1, hasher: str = "blake2_256") -> TrieLayout:
    return layout_for(version, get_hasher(hasher))


# =============================================================================
# Leaf Factories
# =============================================================================

def make_did_key_leaf(
    seed: int = 1,
    relationship: Optional[DidKeyRelationship] = None,
    key_type: VerificationKeyType = VerificationKeyType.ED25519,
    block_number: int = 100,
) -> DidKeyLeaf:
    """
    Create a DidKeyLeaf holding a verification key.

    Args:
        seed: Varies the key id and key bytes.
        relationship: Defaults to Authentication.
        key_type: Verification key scheme.
        block_number: Block the key was added at.
    """
    if relationship is None:
        relationship = DidKeyRelationship.from_verification(DidVerificationKeyRelationship.AUTHENTICATION)
    key_length = 33 if key_type is VerificationKeyType.ECDSA else 32
    return DidKeyLeaf(
        key_id=seeded_bytes(seed, 32),
        relationship=relationship,
        details=DidPublicKeyDetails(
            key=DidVerificationKey(key_type, seeded_bytes(seed + 1000, key_length)),
            block_number=block_number,
        ),
    )


def make_encryption_key_leaf(seed: int = 2, block_number: int = 100) -> DidKeyLeaf:
    """Create a DidKeyLeaf holding an X25519 key agreement key."""
    return DidKeyLeaf(
        key_id=seeded_bytes(seed, 32),
        relationship=DidKeyRelationship.encryption(),
        details=DidPublicKeyDetails(
            key=DidEncryptionKey(EncryptionKeyType.X25519, seeded_bytes(seed + 2000, 32)),
            block_number=block_number,
        ),
    )


def make_web3_name_leaf(name: str = "alice", claimed_at: int = 42) -> Web3NameLeaf:
    return Web3NameLeaf(web3_name=name, claimed_at=claimed_at)


def make_linked_account_leaf(seed: int = 3, ethereum: bool = False) -> LinkedAccountLeaf:
    """Create a LinkedAccountLeaf; `ethereum` selects a 20-byte account id."""
    if ethereum:
        account = LinkableAccountId(LinkableAccountKind.ACCOUNT_ID_20, seeded_bytes(seed, 20))
    else:
        account = LinkableAccountId(LinkableAccountKind.ACCOUNT_ID_32, seeded_bytes(seed, 32))
    return LinkedAccountLeaf(account)


def make_identity_leaves() -> list[RevealedLeaf]:
    """
    A representative identity: authentication, assertion and encryption
    keys, a web3name and two linked accounts.
    """
    return [
        make_did_key_leaf(seed=1),
        make_did_key_leaf(
            seed=2,
            relationship=DidKeyRelationship.from_verification(DidVerificationKeyRelationship.ASSERTION_METHOD),
            key_type=VerificationKeyType.ECDSA,
            block_number=250,
        ),
        make_encryption_key_leaf(seed=3),
        make_web3_name_leaf(),
        make_linked_account_leaf(seed=4),
        make_linked_account_leaf(seed=5, ethereum=True),
    ]
