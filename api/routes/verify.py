"""
Module 08 - Verify Route

Verify a DIP proof document against its identity commitment.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import get_runtime_config, get_verifier
from api.errors import APIError, ProofTooLargeError
from api.models.requests import VerifyRequest
from api.models.responses import VerifyResponse
from core.schemas.errors import (
    DidMerkleProofVerificationException,
    ProofLimitException,
    SchemaValidationException,
)
from core.schemas.transport import RevealedLeavesView


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse)
async def verify_proof(request: VerifyRequest) -> VerifyResponse:
    """
    Verify a DIP proof.

    A rejected proof is reported with ok=false and its numeric error code.
    Malformed documents are 400; documents over the size limits are 413.
    """
    verifier = get_verifier(
        max_revealed_keys=request.max_revealed_keys,
        max_revealed_accounts=request.max_revealed_accounts,
        hasher=request.hasher,
    )
    document = request.proof
    limits = get_runtime_config().limits

    try:
        result = verifier.verify_document(document, limits)
    except ProofLimitException as e:
        logger.info(f"Rejected oversized proof: {e.message}")
        raise ProofTooLargeError(e.message, details=e.details) from e
    except SchemaValidationException as e:
        raise APIError.from_exception(e, status_code=400) from e
    except DidMerkleProofVerificationException as e:
        return VerifyResponse(
            ok=False,
            identity_commitment=document.identity_commitment,
            hasher=verifier.hasher.name,
            error_code=e.error_code,
            error=e.error.name,
        )

    return VerifyResponse(
        ok=True,
        identity_commitment=document.identity_commitment,
        hasher=verifier.hasher.name,
        result=RevealedLeavesView.from_result(result),
    )
