"""
Pytest configuration and shared fixtures for binmerkle tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Keeps BINMERKLE_* environment variables out of the tests
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

from fixtures.common import KNOWN_LEAVES, make_hasher, make_tree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove BINMERKLE_* variables so tests see defaults."""
    import os

    for name in list(os.environ):
        if name.startswith("BINMERKLE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sha256_hasher():
    """Provide a fresh SHA-256 hasher."""
    return make_hasher("sha256")


@pytest.fixture
def known_tree():
    """Provide the depth-3 known-answer tree."""
    return make_tree(list(KNOWN_LEAVES), depth=3)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
