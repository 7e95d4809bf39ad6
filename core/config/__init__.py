"""
Runtime Configuration Module

Provides configuration loading and management for the DIP proof verifier.
"""

from .runtime import (
    ApiConfig,
    ProofLimits,
    RuntimeConfig,
    VerifierConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ApiConfig",
    "ProofLimits",
    "RuntimeConfig",
    "VerifierConfig",
    "get_default_config",
    "set_default_config",
]
