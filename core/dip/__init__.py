"""
DIP (Decentralized Identity Provider) proof verification.

This module provides:
- Leaf model: DID keys, web3names and linked accounts a proof can reveal
- LeafCodec: the trie (key, value) bytes committed for each leaf
- verify_dip_merkle_proof: check a proof and fold its leaves into a bounded result
- DipProofVerifier: configured, logging entry point

Usage:
    from core.crypto import get_hasher
    from core.dip import DidMerkleProof, verify_dip_merkle_proof

    result = verify_dip_merkle_proof(
        root, DidMerkleProof(blinded=nodes, revealed=leaves),
        hasher=get_hasher("blake2_256"), max_revealed_keys=10, max_revealed_accounts=10,
    )
"""
from .leaves import (
    KEY_ID_LENGTH,
    DidEncryptionKey,
    DidKeyLeaf,
    DidKeyRelationship,
    DidPublicKey,
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
from .leaf_codec import (
    SUPPORTED_BLOCK_NUMBER_WIDTHS,
    SUPPORTED_COMMITMENT_VERSIONS,
    LeafCodec,
    UnsupportedCommitmentVersionError,
    codec_for,
)
from .aggregator import (
    BoundedList,
    RevealedDidKey,
    RevealedDidMerkleProofLeaves,
    RevealedWeb3Name,
    aggregate_revealed_leaves,
)
from .proof import DEFAULT_LAYOUT_VERSION, DidMerkleProof, verify_dip_merkle_proof
from .service import DipProofVerifier


__all__ = [
    # Leaf model
    "KEY_ID_LENGTH",
    "DidEncryptionKey",
    "DidKeyLeaf",
    "DidKeyRelationship",
    "DidPublicKey",
    "DidPublicKeyDetails",
    "DidVerificationKey",
    "DidVerificationKeyRelationship",
    "EncryptionKeyType",
    "LinkableAccountId",
    "LinkableAccountKind",
    "LinkedAccountLeaf",
    "RevealedLeaf",
    "VerificationKeyType",
    "Web3NameLeaf",
    # Codec
    "SUPPORTED_BLOCK_NUMBER_WIDTHS",
    "SUPPORTED_COMMITMENT_VERSIONS",
    "LeafCodec",
    "UnsupportedCommitmentVersionError",
    "codec_for",
    # Aggregation and result
    "BoundedList",
    "RevealedDidKey",
    "RevealedDidMerkleProofLeaves",
    "RevealedWeb3Name",
    "aggregate_revealed_leaves",
    # Verification
    "DEFAULT_LAYOUT_VERSION",
    "DidMerkleProof",
    "verify_dip_merkle_proof",
    "DipProofVerifier",
]
