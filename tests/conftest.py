# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for DEXARB tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.logging import clear_global_context  # noqa: E402


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(autouse=True)
def _reset_logging_context():
    """Global log context is process-wide; keep tests independent."""
    yield
    clear_global_context()
