"""
Module 08 - API Dependencies

Dependency injection for the API.
Provides the runtime configuration and configured proof verifiers.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from core.config.runtime import RuntimeConfig, get_default_config, set_default_config
from core.dip.service import DipProofVerifier
from core.schemas.errors import DipException

logger = logging.getLogger(__name__)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a config file, then overlay environment variables.

    Search order for config file:
      1. ./dip.yaml
      2. ./.dip.yaml
      3. ~/.config/dip/config.yaml

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "dip.yaml",
        Path.cwd() / ".dip.yaml",
        Path.home() / ".config" / "dip" / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Loaded config from {path}")
            return RuntimeConfig.from_yaml(path).with_env_overrides()

    return RuntimeConfig.from_env()


def get_runtime_config() -> RuntimeConfig:
    """Process-wide configuration, loaded on first use."""
    return get_default_config()


def init_runtime_config() -> RuntimeConfig:
    """Load configuration from disk and environment and install it as the default."""
    config = _load_runtime_config()
    set_default_config(config)
    return config


def get_verifier(
    *,
    max_revealed_keys: int | None = None,
    max_revealed_accounts: int | None = None,
    hasher: str | None = None,
) -> DipProofVerifier:
    """
    Build a verifier from the server configuration and per-request overrides.

    Capacity overrides may only lower the configured bounds.

    Raises:
        InvalidRequestError: If an override names an unknown hasher, raises a
            configured bound, or the resulting configuration is unusable
    """
    from api.errors import InvalidRequestError

    base = get_runtime_config().verifier
    overrides: dict[str, object] = {}
    for name, requested in (
        ("max_revealed_keys", max_revealed_keys),
        ("max_revealed_accounts", max_revealed_accounts),
    ):
        if requested is None:
            continue
        configured = getattr(base, name)
        if requested > configured:
            raise InvalidRequestError(
                f"{name}={requested} exceeds the server limit of {configured}",
                details={"limit": name, "max": configured, "requested": requested},
            )
        overrides[name] = requested
    if hasher is not None:
        overrides["hasher"] = hasher

    try:
        return DipProofVerifier(replace(base, **overrides))
    except (DipException, ValueError) as e:
        details = e.details if isinstance(e, DipException) else {}
        raise InvalidRequestError(str(e), details=details) from e
