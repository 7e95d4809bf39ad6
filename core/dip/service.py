"""
Module 06 - DIP Proof Verifier Service
Configured entry point used by the CLI and the HTTP API.

Owner: Protocol/Crypto Engineer
Module ID: M06

DipProofVerifier binds a VerifierConfig (hasher, trie layout, leaf codec and
result capacities) once and then verifies any number of proofs. Unlike the
pure verification functions it logs its outcomes.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from core.config.runtime import ProofLimits, VerifierConfig
from core.crypto.hashing import Hasher, get_hasher, to_hex
from core.dip.aggregator import RevealedDidMerkleProofLeaves
from core.dip.leaf_codec import LeafCodec
from core.dip.proof import DidMerkleProof, verify_dip_merkle_proof
from core.schemas.errors import DidMerkleProofVerificationException
from core.trie.layout import SUPPORTED_LAYOUT_VERSIONS

if TYPE_CHECKING:
    from core.schemas.transport import DipProofDocument


logger = logging.getLogger(__name__)


class DipProofVerifier:
    """
    Verifies DIP Merkle proofs under a fixed configuration.

    Usage:
        verifier = DipProofVerifier(VerifierConfig(max_revealed_keys=4))
        result = verifier.verify(root, proof)
    """

    def __init__(self, config: Optional[VerifierConfig] = None) -> None:
        """
        Raises:
            UnknownHasherException: If the configured hasher is not registered
            UnsupportedCommitmentVersionError: If the commitment version is unknown
            ValueError: On an unsupported layout version, block number width
                or a negative capacity
        """
        self.config = config or VerifierConfig()
        if self.config.layout_version not in SUPPORTED_LAYOUT_VERSIONS:
            raise ValueError(
                f"Unsupported trie layout version: {self.config.layout_version}. "
                f"Supported versions: {sorted(SUPPORTED_LAYOUT_VERSIONS)}"
            )
        if self.config.max_revealed_keys < 0 or self.config.max_revealed_accounts < 0:
            raise ValueError("Revealed key and account limits must be non-negative")
        self.hasher: Hasher = get_hasher(self.config.hasher)
        self.codec = LeafCodec(
            version=self.config.commitment_version,
            block_number_width=self.config.block_number_width,
        )

    def verify(self, identity_commitment: bytes, proof: DidMerkleProof) -> RevealedDidMerkleProofLeaves:
        """
        Verify `proof` against `identity_commitment`.

        Raises:
            DidMerkleProofVerificationException: If the proof is rejected
        """
        root_hex = to_hex(identity_commitment)
        logger.debug(
            f"Verifying DIP proof against {root_hex}: "
            f"{len(proof.blinded)} blinded nodes, {len(proof.revealed)} revealed leaves"
        )
        try:
            result = verify_dip_merkle_proof(
                identity_commitment,
                proof,
                hasher=self.hasher,
                max_revealed_keys=self.config.max_revealed_keys,
                max_revealed_accounts=self.config.max_revealed_accounts,
                codec=self.codec,
                layout_version=self.config.layout_version,
            )
        except DidMerkleProofVerificationException as e:
            logger.warning(f"DIP proof rejected for {root_hex}: {e.error.name} (code {e.error_code})")
            raise

        logger.info(
            f"DIP proof verified for {root_hex}: {len(result.did_keys)} keys, "
            f"web3name={'yes' if result.web3_name else 'no'}, "
            f"{len(result.linked_accounts)} linked accounts"
        )
        return result

    def verify_document(
        self,
        document: "DipProofDocument",
        limits: Optional[ProofLimits] = None,
    ) -> RevealedDidMerkleProofLeaves:
        """
        Verify a transport document, enforcing size limits first.

        Raises:
            ProofLimitException: If the document exceeds `limits`
            SchemaValidationException: If the document does not map to typed leaves
            DidMerkleProofVerificationException: If the proof is rejected
        """
        if limits is not None:
            document.check_limits(limits)
        root, proof = document.to_proof()
        return self.verify(root, proof)

    def __repr__(self) -> str:
        return (
            f"DipProofVerifier(hasher={self.hasher.name!r}, "
            f"layout_version={self.config.layout_version}, "
            f"commitment_version={self.codec.version})"
        )


__all__ = [
    "DipProofVerifier",
]
