"""Shared fixtures."""

import os

import pytest

from credential_cache import CredentialManager
from credential_cache.manager import _reset_credential_manager
from credential_cache.audit import reset_logger
from credential_cache.storage import InMemoryStore


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from CREDENTIAL_CACHE_* variables and shared state."""
    for name in list(os.environ):
        if name.upper().startswith("CREDENTIAL_CACHE_"):
            monkeypatch.delenv(name, raising=False)
    _reset_credential_manager()
    yield
    _reset_credential_manager()
    reset_logger()


@pytest.fixture
def store() -> InMemoryStore:
    """Process-local backend."""
    return InMemoryStore()


@pytest.fixture
def manager(store: InMemoryStore) -> CredentialManager:
    """Active manager backed by the in-memory store."""
    return CredentialManager(store)


@pytest.fixture
def inert_manager() -> CredentialManager:
    """Manager without a backend."""
    return CredentialManager(None)
