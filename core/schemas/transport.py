"""
Module 01 - Schemas & Canonicalization
File: transport.py

Purpose: JSON documents for DIP proofs and verification results.
These models are what the CLI reads from disk and the API accepts over
HTTP. Byte fields are 0x-prefixed hex strings.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config.runtime import ProofLimits
from core.crypto.hashing import from_hex, to_hex
from core.dip.aggregator import RevealedDidMerkleProofLeaves
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
from core.dip.proof import DidMerkleProof

from .errors import ProofLimitException, SchemaValidationException
from .versioning import SCHEMA_VERSION, SchemaVersion


RelationshipName = Literal[
    "encryption",
    "authentication",
    "capability_delegation",
    "capability_invocation",
    "assertion_method",
]
KeyTypeName = Literal["ed25519", "sr25519", "ecdsa", "account", "x25519"]
AccountKindName = Literal["account_id_20", "account_id_32"]


def _normalize_hex(value: str) -> str:
    return to_hex(from_hex(value.lower()))


def _relationship_from_name(name: str) -> DidKeyRelationship:
    if name == "encryption":
        return DidKeyRelationship.encryption()
    return DidKeyRelationship.from_verification(DidVerificationKeyRelationship(name))


def _public_key_from_parts(key_type: str, public_key: bytes):
    if key_type == EncryptionKeyType.X25519.value:
        return DidEncryptionKey(EncryptionKeyType(key_type), public_key)
    return DidVerificationKey(VerificationKeyType(key_type), public_key)


# =============================================================================
# Leaf Documents
# =============================================================================

class DidKeyLeafModel(BaseModel):
    """A revealed DID key."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["did_key"] = "did_key"
    key_id: str = Field(..., description="32-byte key id, 0x-prefixed hex")
    relationship: RelationshipName = Field(..., description="Key relationship to the DID")
    key_type: KeyTypeName = Field(..., description="Public key scheme")
    public_key: str = Field(..., description="Raw public key, 0x-prefixed hex")
    block_number: int = Field(..., ge=0, description="Block at which the key was added")

    @field_validator("key_id", "public_key")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        return _normalize_hex(v)

    def to_leaf(self) -> DidKeyLeaf:
        """
        Raises:
            SchemaValidationException: If field lengths do not match the key types
        """
        try:
            details = DidPublicKeyDetails(
                key=_public_key_from_parts(self.key_type, from_hex(self.public_key)),
                block_number=self.block_number,
            )
            return DidKeyLeaf(
                key_id=from_hex(self.key_id),
                relationship=_relationship_from_name(self.relationship),
                details=details,
            )
        except ValueError as e:
            raise SchemaValidationException(str(e), field_path="revealed.did_key") from e

    @classmethod
    def from_leaf(cls, leaf: DidKeyLeaf) -> "DidKeyLeafModel":
        key = leaf.details.key
        return cls(
            key_id=to_hex(leaf.key_id),
            relationship=str(leaf.relationship),
            key_type=key.key_type.value,
            public_key=to_hex(key.public_key),
            block_number=leaf.details.block_number,
        )


class Web3NameLeafModel(BaseModel):
    """A revealed web3name."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["web3_name"] = "web3_name"
    web3_name: str = Field(..., min_length=1, description="ASCII web3name")
    claimed_at: int = Field(..., ge=0, description="Block at which the name was claimed")

    def to_leaf(self) -> Web3NameLeaf:
        try:
            return Web3NameLeaf(web3_name=self.web3_name, claimed_at=self.claimed_at)
        except ValueError as e:
            raise SchemaValidationException(str(e), field_path="revealed.web3_name") from e

    @classmethod
    def from_leaf(cls, leaf: Web3NameLeaf) -> "Web3NameLeafModel":
        return cls(web3_name=leaf.web3_name, claimed_at=leaf.claimed_at)


class LinkedAccountLeafModel(BaseModel):
    """A revealed linked account."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["linked_account"] = "linked_account"
    account_kind: AccountKindName = Field(..., description="Account id format")
    account_id: str = Field(..., description="Account id, 0x-prefixed hex")

    @field_validator("account_id")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        return _normalize_hex(v)

    def to_leaf(self) -> LinkedAccountLeaf:
        try:
            account = LinkableAccountId(LinkableAccountKind(self.account_kind), from_hex(self.account_id))
        except ValueError as e:
            raise SchemaValidationException(str(e), field_path="revealed.linked_account") from e
        return LinkedAccountLeaf(account)

    @classmethod
    def from_leaf(cls, leaf: LinkedAccountLeaf) -> "LinkedAccountLeafModel":
        return cls(account_kind=leaf.account.kind.value, account_id=to_hex(leaf.account.account_id))


RevealedLeafModel = Annotated[
    Union[DidKeyLeafModel, Web3NameLeafModel, LinkedAccountLeafModel],
    Field(discriminator="kind"),
]


def leaf_model_from_leaf(leaf: RevealedLeaf) -> Union[DidKeyLeafModel, Web3NameLeafModel, LinkedAccountLeafModel]:
    """Transport document for a typed leaf."""
    if isinstance(leaf, DidKeyLeaf):
        return DidKeyLeafModel.from_leaf(leaf)
    if isinstance(leaf, Web3NameLeaf):
        return Web3NameLeafModel.from_leaf(leaf)
    if isinstance(leaf, LinkedAccountLeaf):
        return LinkedAccountLeafModel.from_leaf(leaf)
    raise TypeError(f"Unknown revealed leaf type: {type(leaf).__name__}")


# =============================================================================
# Proof Document
# =============================================================================

class DipProofDocument(BaseModel):
    """
    A DIP Merkle proof together with the commitment it is checked against.

    Example:
        {
          "schema_version": "v1",
          "identity_commitment": "0x...",
          "blinded": ["0x...", "0x..."],
          "revealed": [{"kind": "web3_name", "web3_name": "alice", "claimed_at": 42}]
        }
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: SchemaVersion = Field(default=SCHEMA_VERSION, description="Document schema version")
    identity_commitment: str = Field(..., description="Trusted trie root, 0x-prefixed hex")
    blinded: list[str] = Field(default_factory=list, description="Encoded trie nodes, any order")
    revealed: list[RevealedLeafModel] = Field(default_factory=list, description="Revealed leaves, proof order")

    @field_validator("identity_commitment")
    @classmethod
    def validate_commitment(cls, v: str) -> str:
        return _normalize_hex(v)

    @field_validator("blinded")
    @classmethod
    def validate_blinded(cls, v: list[str]) -> list[str]:
        return [_normalize_hex(node) for node in v]

    def check_limits(self, limits: ProofLimits) -> None:
        """
        Raises:
            ProofLimitException: If the document exceeds any of `limits`
        """
        if len(self.blinded) > limits.max_blinded_nodes:
            raise ProofLimitException(
                f"Too many blinded nodes: {len(self.blinded)} > {limits.max_blinded_nodes}",
                limit="max_blinded_nodes",
                maximum=limits.max_blinded_nodes,
                actual=len(self.blinded),
            )
        largest = max((len(node) - 2) // 2 for node in self.blinded) if self.blinded else 0
        if largest > limits.max_node_size:
            raise ProofLimitException(
                f"Blinded node too large: {largest} bytes > {limits.max_node_size}",
                limit="max_node_size",
                maximum=limits.max_node_size,
                actual=largest,
            )
        if len(self.revealed) > limits.max_revealed_leaves:
            raise ProofLimitException(
                f"Too many revealed leaves: {len(self.revealed)} > {limits.max_revealed_leaves}",
                limit="max_revealed_leaves",
                maximum=limits.max_revealed_leaves,
                actual=len(self.revealed),
            )

    def to_proof(self) -> tuple[bytes, DidMerkleProof]:
        """
        Convert to (identity_commitment, DidMerkleProof).

        Raises:
            SchemaValidationException: If a leaf does not map to a typed leaf
        """
        proof = DidMerkleProof(
            blinded=tuple(from_hex(node) for node in self.blinded),
            revealed=tuple(leaf.to_leaf() for leaf in self.revealed),
        )
        return from_hex(self.identity_commitment), proof

    @classmethod
    def from_proof(cls, identity_commitment: bytes, proof: DidMerkleProof) -> "DipProofDocument":
        return cls(
            identity_commitment=to_hex(identity_commitment),
            blinded=[to_hex(node) for node in proof.blinded],
            revealed=[leaf_model_from_leaf(leaf) for leaf in proof.revealed],
        )


# =============================================================================
# Result Views
# =============================================================================

class RevealedDidKeyView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    relationship: RelationshipName
    key_type: KeyTypeName
    public_key: str
    block_number: int


class RevealedWeb3NameView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    web3_name: str
    claimed_at: int


class LinkedAccountView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    account_kind: AccountKindName
    account_id: str


class RevealedLeavesView(BaseModel):
    """JSON rendering of RevealedDidMerkleProofLeaves."""

    model_config = ConfigDict(extra="forbid")

    schema_version: SchemaVersion = Field(default=SCHEMA_VERSION)
    did_keys: list[RevealedDidKeyView] = Field(default_factory=list)
    web3_name: Optional[RevealedWeb3NameView] = None
    linked_accounts: list[LinkedAccountView] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: RevealedDidMerkleProofLeaves) -> "RevealedLeavesView":
        did_keys = [
            RevealedDidKeyView(
                id=to_hex(key.id),
                relationship=str(key.relationship),
                key_type=key.details.key.key_type.value,
                public_key=to_hex(key.details.key.public_key),
                block_number=key.details.block_number,
            )
            for key in result.did_keys
        ]
        web3_name = None
        if result.web3_name is not None:
            web3_name = RevealedWeb3NameView(
                web3_name=result.web3_name.web3_name,
                claimed_at=result.web3_name.claimed_at,
            )
        linked_accounts = [
            LinkedAccountView(account_kind=account.kind.value, account_id=to_hex(account.account_id))
            for account in result.linked_accounts
        ]
        return cls(did_keys=did_keys, web3_name=web3_name, linked_accounts=linked_accounts)


__all__ = [
    "DidKeyLeafModel",
    "Web3NameLeafModel",
    "LinkedAccountLeafModel",
    "RevealedLeafModel",
    "leaf_model_from_leaf",
    "DipProofDocument",
    "RevealedDidKeyView",
    "RevealedWeb3NameView",
    "LinkedAccountView",
    "RevealedLeavesView",
]
