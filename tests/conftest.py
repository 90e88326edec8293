"""
Pytest configuration and fixtures for passphrase envelope tests.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from passphrase_envelope import Envelope, encrypt_data
from passphrase_envelope.config import (
    ITERATIONS_ENV,
    MIN_PASSPHRASE_LENGTH_ENV,
    get_config,
)

# Low work factor so the suite stays fast; the default count is exercised
# separately.
FAST_ITERATIONS = 1_000


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the caller's environment and cached config."""
    monkeypatch.delenv(ITERATIONS_ENV, raising=False)
    monkeypatch.delenv(MIN_PASSPHRASE_LENGTH_ENV, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def iterations() -> int:
    return FAST_ITERATIONS


@pytest.fixture
def passphrase() -> str:
    return "correct horse battery staple"


@pytest.fixture
def envelope(passphrase: str, iterations: int) -> Envelope:
    """An envelope sealing a small note."""
    return encrypt_data({"note": "hello"}, passphrase, iterations=iterations)
