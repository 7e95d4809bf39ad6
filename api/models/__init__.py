"""API request and response models."""

from api.models.requests import VerifyRequest
from api.models.responses import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    VerifyResponse,
)

__all__ = [
    "VerifyRequest",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "VerifyResponse",
]
