"""
Module 08 - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.transport import RevealedLeavesView


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "dip-verifier-api"
    version: str = "v1"


class VerifyResponse(BaseModel):
    """
    Response for POST /verify endpoint.

    A rejected proof is a successful request: ok is false and error_code
    carries the stable numeric failure code.
    """

    ok: bool = Field(..., description="Whether the proof verified")
    identity_commitment: str = Field(..., description="Commitment the proof was checked against")
    hasher: str = Field(..., description="Hasher used for verification")
    result: RevealedLeavesView | None = Field(
        default=None,
        description="Revealed identity facts (only when ok)",
    )
    error_code: int | None = Field(
        default=None,
        description="Numeric failure code: 0 invalid proof, 1 too many keys, 2 too many accounts",
    )
    error: str | None = Field(default=None, description="Failure name")


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
