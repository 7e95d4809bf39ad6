"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the DIP proof verifier.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the verifier."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Codec Errors
    SCALE_CODEC_ERROR = "SCALE_CODEC_ERROR"
    TRIE_NODE_DECODE_ERROR = "TRIE_NODE_DECODE_ERROR"

    # Hashing
    UNKNOWN_HASHER = "UNKNOWN_HASHER"

    # Proof Verification Errors
    INVALID_MERKLE_PROOF = "INVALID_MERKLE_PROOF"
    TOO_MANY_REVEALED_KEYS = "TOO_MANY_REVEALED_KEYS"
    TOO_MANY_REVEALED_ACCOUNTS = "TOO_MANY_REVEALED_ACCOUNTS"

    # Caller-side resource bounds
    PROOF_LIMIT_EXCEEDED = "PROOF_LIMIT_EXCEEDED"


class DidMerkleProofVerifierError(IntEnum):
    """
    Closed set of DIP Merkle proof verification failures.

    The integer values are the stable wire codes used when a failure crosses
    a dispatch or RPC boundary. Never reorder or renumber.
    """

    INVALID_MERKLE_PROOF = 0
    TOO_MANY_REVEALED_KEYS = 1
    TOO_MANY_REVEALED_ACCOUNTS = 2

    @property
    def error_code(self) -> str:
        """The string code from ErrorCodes matching this failure."""
        return _VERIFIER_ERROR_CODES[self]


_VERIFIER_ERROR_CODES: dict[DidMerkleProofVerifierError, str] = {
    DidMerkleProofVerifierError.INVALID_MERKLE_PROOF: ErrorCodes.INVALID_MERKLE_PROOF,
    DidMerkleProofVerifierError.TOO_MANY_REVEALED_KEYS: ErrorCodes.TOO_MANY_REVEALED_KEYS,
    DidMerkleProofVerifierError.TOO_MANY_REVEALED_ACCOUNTS: ErrorCodes.TOO_MANY_REVEALED_ACCOUNTS,
}


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DipError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across the API and CLI without exceptions,
    enabling structured error handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_MERKLE_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "DipException":
        """Convert this error model to a raised exception."""
        return DipException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DipException(Exception):
    """
    Base exception for all DIP verifier errors.

    This exception carries structured error information and can be
    converted to/from DipError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "DIP_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> DipError:
        """Convert this exception to a DipError model."""
        return DipError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(DipException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class SchemaValidationException(DipException):
    """Exception raised when schema validation fails."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class ScaleCodecException(DipException):
    """Exception raised when SCALE encoding or decoding fails."""

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if offset is not None:
            full_details["offset"] = offset
        super().__init__(
            message=message,
            code=ErrorCodes.SCALE_CODEC_ERROR,
            details=full_details,
            retryable=False,
        )


class TrieNodeDecodeException(DipException):
    """Exception raised when a trie node has a malformed encoding."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TRIE_NODE_DECODE_ERROR,
            details=details,
            retryable=False,
        )


class TrieProofError(DipException):
    """
    Exception raised when a trie inclusion proof does not check out.

    Missing nodes, hash mismatches, value mismatches and malformed nodes all
    collapse into this one kind so callers learn nothing about the structure
    of an adversarial proof.
    """

    def __init__(self, message: str = "Invalid trie proof") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_MERKLE_PROOF,
            retryable=False,
        )


class UnknownHasherException(DipException):
    """Exception raised when a hasher name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        super().__init__(
            message=f"Unknown hasher: '{name}'",
            code=ErrorCodes.UNKNOWN_HASHER,
            details={"name": name, "available": available or []},
            retryable=False,
        )


class ProofLimitException(DipException):
    """Exception raised when a proof exceeds caller-chosen size bounds."""

    def __init__(
        self,
        message: str,
        limit: str,
        maximum: int,
        actual: int,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_LIMIT_EXCEEDED,
            details={"limit": limit, "maximum": maximum, "actual": actual},
            retryable=False,
        )


class DidMerkleProofVerificationException(DipException):
    """
    Exception raised when a DIP Merkle proof is rejected.

    Carries exactly one DidMerkleProofVerifierError. The numeric value of
    that error is the stable code to send across a system boundary.
    """

    def __init__(self, error: DidMerkleProofVerifierError) -> None:
        self.error = DidMerkleProofVerifierError(error)
        super().__init__(
            message=f"DIP Merkle proof verification failed: {self.error.name}",
            code=self.error.error_code,
            details={"error_code": int(self.error)},
            retryable=False,
        )

    @property
    def error_code(self) -> int:
        """Stable numeric code of the failure."""
        return int(self.error)
