"""Tests for the worker-thread wrappers."""

from __future__ import annotations

import asyncio

import pytest

from passphrase_envelope import (
    DecryptionError,
    decrypt_data_async,
    encrypt_data,
    encrypt_data_async,
)


async def test_async_round_trip(passphrase, iterations):
    envelope = await encrypt_data_async({"note": "hello"}, passphrase, iterations=iterations)

    assert await decrypt_data_async(envelope, passphrase) == {"note": "hello"}


async def test_concurrent_operations_are_independent(passphrase, iterations):
    envelopes = await asyncio.gather(
        *(encrypt_data_async({"n": i}, passphrase, iterations=iterations) for i in range(8))
    )

    assert len({env.iv for env in envelopes}) == 8

    results = await asyncio.gather(*(decrypt_data_async(env, passphrase) for env in envelopes))

    assert results == [{"n": i} for i in range(8)]


async def test_async_errors_propagate(passphrase, iterations):
    envelope = encrypt_data({"note": "hello"}, passphrase, iterations=iterations)

    with pytest.raises(DecryptionError):
        await decrypt_data_async(envelope, "wrong passphrase")
