"""Shared fixtures."""

from __future__ import annotations

import pytest
from vectors import BACKEND_NAMES

from ed25519_verification_key_2020.backends import get_backend


@pytest.fixture(params=BACKEND_NAMES)
def backend(request):
    """Each backend in turn."""
    return get_backend(request.param)


@pytest.fixture
def nacl_backend():
    return get_backend("nacl")


@pytest.fixture
def cryptography_backend():
    return get_backend("cryptography")


@pytest.fixture(autouse=True)
def _clear_backend_env(monkeypatch):
    monkeypatch.delenv("ED25519_KEY_BACKEND", raising=False)
    monkeypatch.delenv("ED25519_KEY_LOG_LEVEL", raising=False)
