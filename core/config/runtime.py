"""
Runtime Configuration

Central configuration for proof verification, proof-size limits and service setup.
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class VerifierConfig:
    """Configuration for DIP proof verification."""
    hasher: str = "blake2_256"
    layout_version: int = 1
    commitment_version: int = 0
    block_number_width: int = 8
    max_revealed_keys: int = 10
    max_revealed_accounts: int = 10


@dataclass
class ProofLimits:
    """
    Upper bounds on the size of an incoming proof document.

    Checked before any hashing so that oversized proofs are rejected cheaply.
    """
    max_blinded_nodes: int = 64
    max_node_size: int = 1024
    max_revealed_leaves: int = 64


@dataclass
class ApiConfig:
    """Configuration for the HTTP service."""
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


# (env var, section, key, type)
_ENV_VARS: list[tuple[str, str, str, type]] = [
    ("DIP_HASHER", "verifier", "hasher", str),
    ("DIP_LAYOUT_VERSION", "verifier", "layout_version", int),
    ("DIP_COMMITMENT_VERSION", "verifier", "commitment_version", int),
    ("DIP_BLOCK_NUMBER_WIDTH", "verifier", "block_number_width", int),
    ("DIP_MAX_REVEALED_KEYS", "verifier", "max_revealed_keys", int),
    ("DIP_MAX_REVEALED_ACCOUNTS", "verifier", "max_revealed_accounts", int),
    ("DIP_MAX_BLINDED_NODES", "limits", "max_blinded_nodes", int),
    ("DIP_MAX_NODE_SIZE", "limits", "max_node_size", int),
    ("DIP_MAX_REVEALED_LEAVES", "limits", "max_revealed_leaves", int),
    ("DIP_LOG_LEVEL", "api", "log_level", str),
    ("DIP_API_HOST", "api", "host", str),
    ("DIP_API_PORT", "api", "port", int),
]


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the DIP proof verifier.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    verifier: VerifierConfig = field(default_factory=VerifierConfig)
    limits: ProofLimits = field(default_factory=ProofLimits)
    api: ApiConfig = field(default_factory=ApiConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - DIP_HASHER: Hasher name (blake2_256, sha2_256)
        - DIP_LAYOUT_VERSION: Trie layout version (0 or 1)
        - DIP_COMMITMENT_VERSION: Identity commitment version
        - DIP_BLOCK_NUMBER_WIDTH: Block number width in bytes (4 or 8)
        - DIP_MAX_REVEALED_KEYS / DIP_MAX_REVEALED_ACCOUNTS: Result capacities
        - DIP_MAX_BLINDED_NODES / DIP_MAX_NODE_SIZE / DIP_MAX_REVEALED_LEAVES:
          Proof document limits
        - DIP_LOG_LEVEL, DIP_API_HOST, DIP_API_PORT: Service settings

        Raises:
            ValueError: If an integer variable does not parse
        """
        overrides: dict[str, Any] = {}
        for env_var, section, key, kind in _ENV_VARS:
            raw = os.getenv(env_var)
            if not raw:
                continue
            try:
                value = kind(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_var}: {raw!r}") from e
            overrides.setdefault(section, {})[key] = value
        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        verifier_data = data.get("verifier", {})
        limits_data = data.get("limits", {})
        api_data = data.get("api", {})

        verifier = VerifierConfig(**verifier_data) if verifier_data else VerifierConfig()
        limits = ProofLimits(**limits_data) if limits_data else ProofLimits()
        api = ApiConfig(**api_data) if api_data else ApiConfig()

        return cls(
            verifier=verifier,
            limits=limits,
            api=api,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "verifier": asdict(self.verifier),
            "limits": asdict(self.limits),
            "api": asdict(self.api),
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
