"""Core test fixtures."""

from __future__ import annotations

import pytest

from heapscope.core.types.config import HeapscopeConfig


@pytest.fixture()
def events():
    """Collects emitted HeapEvents; pass ``events.append`` as the callback."""
    return []


@pytest.fixture()
def default_config() -> HeapscopeConfig:
    """Defaults without touching a heapscope.toml in the working directory."""
    return HeapscopeConfig()
