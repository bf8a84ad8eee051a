"""Shared pytest fixtures for kvresolver tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kvresolver.registry import BackendFamily, SchemeRegistry


@pytest.fixture
def backend_ctor() -> MagicMock:
    """Stand-in backend constructor returning a fresh object per call."""
    return MagicMock(side_effect=lambda url: object())


@pytest.fixture
def fake_registry(backend_ctor: MagicMock) -> SchemeRegistry:
    """Registry mirroring the key-value-store aliases, backed by *backend_ctor*."""
    return SchemeRegistry.from_families(
        [BackendFamily("fake", ("mysql", "websql", "cordova-sqlite"), backend_ctor)]
    )


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer env vars from leaking into settings tests."""
    monkeypatch.delenv("KVRESOLVER_CONFIG", raising=False)
    monkeypatch.delenv("KVRESOLVER_VERBOSE", raising=False)
    monkeypatch.delenv("KVRESOLVER_LOG_JSON", raising=False)
    monkeypatch.delenv("KVRESOLVER_REGISTRY__PRESET", raising=False)
    monkeypatch.delenv("KVRESOLVER_REGISTRY__LOAD_PLUGINS", raising=False)
