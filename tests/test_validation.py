"""Tests for encryption settings validation."""

from __future__ import annotations

import pytest

from passphrase_envelope import EncryptionSettings, validate_settings

TOO_SHORT = "Passphrase must be at least 8 characters long"
NO_SALT = "Salt is required for encryption"


def test_valid_settings():
    result = validate_settings({"passphrase": "long enough", "saltB64": "c2FsdA=="})

    assert result.is_valid
    assert result.errors == []
    assert bool(result)


def test_collects_every_error_in_order():
    result = validate_settings({"passphrase": "short", "saltB64": None})

    assert result.is_valid is False
    assert result.errors == [TOO_SHORT, NO_SALT]


@pytest.mark.parametrize("passphrase", [None, "", "1234567"])
def test_passphrase_minimum_length(passphrase):
    result = validate_settings({"passphrase": passphrase, "saltB64": "c2FsdA=="})

    assert result.errors == [TOO_SHORT]


def test_exactly_minimum_length_is_valid():
    assert validate_settings({"passphrase": "12345678", "saltB64": "c2FsdA=="}).is_valid


def test_accepts_alternate_salt_keys():
    assert validate_settings({"passphrase": "long enough", "saltBase64": "c2FsdA=="}).is_valid
    assert validate_settings({"passphrase": "long enough", "salt_b64": "c2FsdA=="}).is_valid


def test_salt_optional_when_not_required():
    result = validate_settings({"passphrase": "long enough"}, require_salt=False)

    assert result.is_valid


def test_accepts_settings_object():
    settings = EncryptionSettings(enabled=True, passphrase="long enough", salt_b64="c2FsdA==")

    assert validate_settings(settings).is_valid


def test_settings_repr_hides_passphrase():
    settings = EncryptionSettings(enabled=True, passphrase="super secret words")

    assert "super secret words" not in repr(settings)


def test_configured_minimum_is_used(monkeypatch):
    monkeypatch.setenv("PASSPHRASE_ENVELOPE_MIN_PASSPHRASE_LENGTH", "12")

    result = validate_settings({"passphrase": "elevenchars", "saltB64": "c2FsdA=="})

    assert result.errors == ["Passphrase must be at least 12 characters long"]


def test_empty_settings():
    result = validate_settings({})

    assert result.errors == [TOO_SHORT, NO_SALT]


def test_override_cannot_lower_minimum():
    result = validate_settings(
        {"passphrase": "abcd", "saltB64": "c2FsdA=="}, min_passphrase_length=4
    )

    assert result.errors == [TOO_SHORT]


def test_override_can_raise_minimum():
    result = validate_settings(
        {"passphrase": "elevenchars", "saltB64": "c2FsdA=="}, min_passphrase_length=12
    )

    assert result.errors == ["Passphrase must be at least 12 characters long"]
