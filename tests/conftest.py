"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Drop cached settings and TRADESIZER_ env overrides around each test."""
    from src.settings import get_settings

    for key in list(os.environ):
        if key.startswith("TRADESIZER_"):
            monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
