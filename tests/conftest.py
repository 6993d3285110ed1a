"""
Pytest configuration and shared fixtures for Arbor tests.

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

make_blocks = _common.make_blocks
make_tree = _common.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def blocks():
    """Eight distinct blocks."""
    return make_blocks(8)


@pytest.fixture
def tree(blocks):
    """A full height-3 SHA-256 tree over the default blocks."""
    return make_tree(3, blocks)


@pytest.fixture
def partial_tree():
    """A height-3 SHA-256 tree holding five blocks and three padding leaves."""
    return make_tree(3, make_blocks(5))


@pytest.fixture(autouse=True)
def _isolate_arbor_env(monkeypatch):
    """Keep ARBOR_* variables from the developer's shell out of tests."""
    for name in [
        "ARBOR_HASH_ALGORITHM",
        "ARBOR_DEFAULT_HEIGHT",
        "ARBOR_LOG_LEVEL",
        "ARBOR_LOG_FILE",
        "ARBOR_OUTPUT_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
