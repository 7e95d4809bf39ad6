"""
Module 06 - DIP Proof Verifier Service Unit Tests
Tests for core/dip/service.py

Tests:
- Construction validates the configuration
- verify() and verify_document() outcomes
- Outcomes are logged
"""
import logging

import pytest

from core.config.runtime import ProofLimits, VerifierConfig
from core.dip.leaf_codec import UnsupportedCommitmentVersionError
from core.dip.service import DipProofVerifier
from core.schemas.errors import (
    DidMerkleProofVerificationException,
    DidMerkleProofVerifierError,
    ProofLimitException,
    UnknownHasherException,
)
from core.schemas.transport import DipProofDocument


class TestConstruction:
    """Tests for DipProofVerifier.__init__()."""

    def test_defaults(self):
        """Test the default configuration."""
        verifier = DipProofVerifier()
        assert verifier.hasher.name == "blake2_256"
        assert verifier.codec.block_number_width == 8
        assert "blake2_256" in repr(verifier)

    def test_unknown_hasher(self):
        """Test an unregistered hasher is rejected."""
        with pytest.raises(UnknownHasherException):
            DipProofVerifier(VerifierConfig(hasher="md5"))

    def test_unknown_layout(self):
        """Test an unsupported layout version is rejected."""
        with pytest.raises(ValueError):
            DipProofVerifier(VerifierConfig(layout_version=3))

    def test_unknown_commitment_version(self):
        """Test an unsupported commitment version is rejected."""
        with pytest.raises(UnsupportedCommitmentVersionError):
            DipProofVerifier(VerifierConfig(commitment_version=9))

    def test_negative_capacity(self):
        """Test negative capacities are rejected."""
        with pytest.raises(ValueError):
            DipProofVerifier(VerifierConfig(max_revealed_keys=-1))


class TestVerify:
    """Tests for DipProofVerifier.verify()."""

    def test_success_logged(self, full_proof, caplog):
        """Test an accepted proof is returned and logged at INFO."""
        root, proof = full_proof
        with caplog.at_level(logging.INFO, logger="core.dip.service"):
            result = DipProofVerifier().verify(root, proof)
        assert len(result.did_keys) == 3
        assert "DIP proof verified" in caplog.text

    def test_rejection_logged_and_raised(self, full_proof, caplog):
        """Test a rejected proof raises and is logged at WARNING."""
        root, proof = full_proof
        verifier = DipProofVerifier(VerifierConfig(max_revealed_keys=1))
        with caplog.at_level(logging.WARNING, logger="core.dip.service"):
            with pytest.raises(DidMerkleProofVerificationException) as exc_info:
                verifier.verify(root, proof)
        assert exc_info.value.error is DidMerkleProofVerifierError.TOO_MANY_REVEALED_KEYS
        assert "TOO_MANY_REVEALED_KEYS" in caplog.text

    def test_wrong_hasher(self, full_proof):
        """Test a verifier configured for another hasher rejects the proof."""
        root, proof = full_proof
        with pytest.raises(DidMerkleProofVerificationException) as exc_info:
            DipProofVerifier(VerifierConfig(hasher="sha2_256")).verify(root, proof)
        assert exc_info.value.error_code == 0


class TestVerifyDocument:
    """Tests for DipProofVerifier.verify_document()."""

    def test_document(self, full_proof):
        """Test a transport document verifies."""
        document = DipProofDocument.from_proof(*full_proof)
        result = DipProofVerifier().verify_document(document, ProofLimits())
        assert result.web3_name.web3_name == "alice"

    def test_limits_checked_first(self, full_proof):
        """Test limits are enforced before verification."""
        document = DipProofDocument.from_proof(*full_proof)
        with pytest.raises(ProofLimitException):
            DipProofVerifier().verify_document(document, ProofLimits(max_revealed_leaves=1))
