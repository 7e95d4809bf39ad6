"""
Capabilities Route

Discovery endpoint for supported hashers, trie layouts and commitment
versions, and the bounds this server verifies with.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.deps import get_runtime_config
from core.crypto.hashing import available_hashers, get_hasher
from core.dip.leaf_codec import SUPPORTED_BLOCK_NUMBER_WIDTHS, SUPPORTED_COMMITMENT_VERSIONS
from core.schemas.versioning import SUPPORTED_SCHEMA_VERSIONS
from core.trie.layout import SUPPORTED_LAYOUT_VERSIONS


router = APIRouter(tags=["capabilities"])


class HasherInfo(BaseModel):
    """A registered hasher."""

    name: str = Field(..., description="Hasher name")
    length: int = Field(..., description="Digest length in bytes")


class VerifierBounds(BaseModel):
    """Bounds and defaults applied when a request does not override them."""

    hasher: str
    layout_version: int
    commitment_version: int
    block_number_width: int
    max_revealed_keys: int
    max_revealed_accounts: int
    max_blinded_nodes: int
    max_node_size: int
    max_revealed_leaves: int


class CapabilitiesResponse(BaseModel):
    """Response for GET /capabilities."""

    ok: bool = True
    hashers: list[HasherInfo] = Field(default_factory=list)
    layout_versions: list[int] = Field(default_factory=list)
    commitment_versions: list[int] = Field(default_factory=list)
    block_number_widths: list[int] = Field(default_factory=list)
    schema_versions: list[str] = Field(default_factory=list)
    defaults: VerifierBounds


@router.get("/capabilities", response_model=CapabilitiesResponse)
async def get_capabilities() -> CapabilitiesResponse:
    """Return what this server can verify and with which defaults."""
    config = get_runtime_config()
    hashers = [get_hasher(name) for name in available_hashers()]
    return CapabilitiesResponse(
        hashers=[HasherInfo(name=h.name, length=h.length) for h in hashers],
        layout_versions=sorted(SUPPORTED_LAYOUT_VERSIONS),
        commitment_versions=sorted(SUPPORTED_COMMITMENT_VERSIONS),
        block_number_widths=sorted(SUPPORTED_BLOCK_NUMBER_WIDTHS),
        schema_versions=sorted(SUPPORTED_SCHEMA_VERSIONS),
        defaults=VerifierBounds(
            hasher=config.verifier.hasher,
            layout_version=config.verifier.layout_version,
            commitment_version=config.verifier.commitment_version,
            block_number_width=config.verifier.block_number_width,
            max_revealed_keys=config.verifier.max_revealed_keys,
            max_revealed_accounts=config.verifier.max_revealed_accounts,
            max_blinded_nodes=config.limits.max_blinded_nodes,
            max_node_size=config.limits.max_node_size,
            max_revealed_leaves=config.limits.max_revealed_leaves,
        ),
    )
