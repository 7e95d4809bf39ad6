"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.

Transport documents live in core.schemas.transport and are imported from
there directly; they depend on core.dip, which itself depends on the error
taxonomy exported here.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SchemaVersion,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    DidMerkleProofVerificationException,
    DidMerkleProofVerifierError,
    DipError,
    DipException,
    ErrorCodes,
    ProofLimitException,
    ScaleCodecException,
    SchemaValidationException,
    TrieNodeDecodeException,
    TrieProofError,
    UnknownHasherException,
)


__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "SchemaVersion",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "CanonicalizationException",
    "DidMerkleProofVerificationException",
    "DidMerkleProofVerifierError",
    "DipError",
    "DipException",
    "ErrorCodes",
    "ProofLimitException",
    "ScaleCodecException",
    "SchemaValidationException",
    "TrieNodeDecodeException",
    "TrieProofError",
    "UnknownHasherException",
]
