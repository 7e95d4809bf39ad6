"""
Module 07 - CLI Configuration

Locates and loads the YAML configuration used by the CLI.

Search order when no --config is given:
1. ./dip.yaml
2. ./.dip.yaml
3. ~/.config/dip/config.yaml

Environment variables (DIP_* prefix) always override file values.
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)


def config_search_paths() -> list[Path]:
    return [
        Path.cwd() / "dip.yaml",
        Path.cwd() / ".dip.yaml",
        Path.home() / ".config" / "dip" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load CLI configuration.

    Args:
        config_path: Explicit YAML file; must exist when given

    Returns:
        RuntimeConfig with environment overrides applied

    Raises:
        FileNotFoundError: If `config_path` does not exist
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    for candidate in config_search_paths():
        if candidate.exists():
            logger.debug(f"Loading config from {candidate}")
            return RuntimeConfig.from_yaml(candidate).with_env_overrides()

    return RuntimeConfig.from_env()


def get_default_config_template() -> str:
    """Template written by `dip config --init`."""
    return """\
# DIP proof verifier configuration
# Environment variables (DIP_*) override these values.

verifier:
  hasher: blake2_256          # blake2_256 | sha2_256
  layout_version: 1           # trie layout: 0 = all values inline, 1 = hash values >= 33 bytes
  commitment_version: 0       # identity commitment (leaf encoding) version
  block_number_width: 8       # 4 for u32 block numbers, 8 for u64
  max_revealed_keys: 10
  max_revealed_accounts: 10

limits:
  max_blinded_nodes: 64
  max_node_size: 1024
  max_revealed_leaves: 64

api:
  host: 127.0.0.1
  port: 8000
  log_level: INFO
"""
