"""
Module 05 - DIP Merkle Proof Verification
Checks a DIP proof against a trusted identity commitment.

Owner: Protocol/Crypto Engineer
Module ID: M05

Flow:
1. Derive the committed (key, value) bytes of every revealed leaf
2. Prove all pairs against the identity commitment using the blinded nodes
3. Fold the leaves, in proof order, into RevealedDidMerkleProofLeaves

Any trie failure is reported as INVALID_MERKLE_PROOF; capacity overflows as
TOO_MANY_REVEALED_KEYS / TOO_MANY_REVEALED_ACCOUNTS. Nothing is logged and
nothing is returned unless every step succeeds.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from core.crypto.hashing import Hasher
from core.dip.aggregator import RevealedDidMerkleProofLeaves, aggregate_revealed_leaves
from core.dip.leaf_codec import LeafCodec
from core.dip.leaves import REVEALED_LEAF_TYPES, RevealedLeaf
from core.schemas.errors import (
    DidMerkleProofVerificationException,
    DidMerkleProofVerifierError,
    DipException,
)
from core.trie.layout import layout_for
from core.trie.verify import verify_trie_proof


DEFAULT_LAYOUT_VERSION = 1


@dataclass(frozen=True)
class DidMerkleProof:
    """
    A DIP Merkle proof.

    Attributes:
        blinded: Encoded trie nodes needed to reach the revealed leaves,
            in any order
        revealed: The leaves the proof discloses, in the order they are
            folded into the result
    """
    blinded: tuple[bytes, ...] = field(default_factory=tuple)
    revealed: tuple[RevealedLeaf, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blinded", tuple(bytes(node) for node in self.blinded))
        object.__setattr__(self, "revealed", tuple(self.revealed))
        for leaf in self.revealed:
            if not isinstance(leaf, REVEALED_LEAF_TYPES):
                raise TypeError(f"Unknown revealed leaf type: {type(leaf).__name__}")


def _invalid_proof() -> DidMerkleProofVerificationException:
    return DidMerkleProofVerificationException(DidMerkleProofVerifierError.INVALID_MERKLE_PROOF)


def verify_dip_merkle_proof(
    identity_commitment: bytes,
    proof: DidMerkleProof,
    *,
    hasher: Hasher,
    max_revealed_keys: int,
    max_revealed_accounts: int,
    codec: LeafCodec = LeafCodec(),
    layout_version: int = DEFAULT_LAYOUT_VERSION,
) -> RevealedDidMerkleProofLeaves:
    """
    Verify a DIP Merkle proof and return what it reveals.

    Args:
        identity_commitment: Trusted trie root for the subject DID
        proof: Blinded nodes and revealed leaves
        hasher: Hash function the commitment was built with
        max_revealed_keys: Maximum number of DID keys in the result
        max_revealed_accounts: Maximum number of linked accounts in the result
        codec: Leaf encoding of the commitment version
        layout_version: Trie layout the commitment was built with

    Returns:
        RevealedDidMerkleProofLeaves

    Raises:
        DidMerkleProofVerificationException: Carrying INVALID_MERKLE_PROOF,
            TOO_MANY_REVEALED_KEYS or TOO_MANY_REVEALED_ACCOUNTS
        ValueError: If `layout_version` is not supported
    """
    layout = layout_for(layout_version, hasher)

    try:
        items = [codec.encode(leaf) for leaf in proof.revealed]
    except DipException as e:
        # A leaf that cannot be encoded cannot be committed either
        raise _invalid_proof() from e

    try:
        verify_trie_proof(identity_commitment, proof.blinded, items, layout)
    except DipException as e:
        raise _invalid_proof() from e

    return aggregate_revealed_leaves(proof.revealed, max_revealed_keys, max_revealed_accounts)


__all__ = [
    "DEFAULT_LAYOUT_VERSION",
    "DidMerkleProof",
    "verify_dip_merkle_proof",
]
