"""
Module 08 - API Request Models

Pydantic models for API request validation.
"""

from pydantic import BaseModel, ConfigDict, Field

from core.schemas.transport import DipProofDocument


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    model_config = ConfigDict(extra="forbid")

    proof: DipProofDocument = Field(
        ...,
        description="Proof document including the identity commitment to check against",
    )
    max_revealed_keys: int | None = Field(
        default=None,
        ge=0,
        description="Maximum revealed DID keys (default: server configuration)",
    )
    max_revealed_accounts: int | None = Field(
        default=None,
        ge=0,
        description="Maximum revealed linked accounts (default: server configuration)",
    )
    hasher: str | None = Field(
        default=None,
        min_length=1,
        description="Hasher the commitment was built with (default: server configuration)",
    )
