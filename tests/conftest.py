"""Pytest configuration for the errorcore test suite.

Makes the repository root importable, loads the shared fixtures and resets
the cached settings and translator around every test so that environment
overrides made with ``monkeypatch`` take effect.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from errorcore.core.config import get_settings  # noqa: E402
from errorcore.errors.translator import get_translator  # noqa: E402

pytest_plugins = [
    "tests.fixtures.common_fixtures",
]


@pytest.fixture(autouse=True)
def reset_cached_settings():
    """Clear cached settings and translator around every test."""
    get_settings.cache_clear()
    get_translator.cache_clear()
    yield
    get_settings.cache_clear()
    get_translator.cache_clear()
