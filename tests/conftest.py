"""
Pytest configuration and shared fixtures for DIP proof verifier tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")
_builder = importlib.import_module("fixtures.trie_builder")

make_layout = _common.make_layout
make_identity_leaves = _common.make_identity_leaves
make_dip_proof = _builder.make_dip_proof


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def layout():
    """Provide the default trie layout (V1 over blake2_256)."""
    return make_layout()


@pytest.fixture
def identity_leaves():
    """Provide a representative set of committed identity leaves."""
    return make_identity_leaves()


@pytest.fixture
def full_proof(identity_leaves, layout):
    """Provide (root, proof) revealing every committed identity leaf."""
    return make_dip_proof(identity_leaves, identity_leaves, layout)


@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Keep DIP_* environment variables and the cached default config out of tests."""
    import os
    from core.config.runtime import set_default_config

    for name in list(os.environ):
        if name.startswith("DIP_"):
            monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
