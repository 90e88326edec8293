"""Tests for the envelope wire codec."""

from __future__ import annotations

import base64
import json

import pytest

from passphrase_envelope import (
    DecryptionError,
    Envelope,
    MAX_ITERATIONS,
    MalformedEnvelopeError,
    UnsupportedFormatError,
    decode_envelope,
    encode_envelope,
    is_envelope,
)

WIRE_KEYS = {"v", "alg", "kdf", "iter", "salt", "iv", "ct", "tag"}


def test_encode_produces_wire_format(envelope, iterations):
    wire = encode_envelope(envelope)

    assert set(wire) == WIRE_KEYS
    assert wire["v"] == 1
    assert wire["alg"] == "AES-256-GCM"
    assert wire["kdf"] == "PBKDF2-SHA256"
    assert wire["iter"] == iterations
    assert len(base64.b64decode(wire["salt"])) == 16
    assert len(base64.b64decode(wire["iv"])) == 12
    assert len(base64.b64decode(wire["tag"])) == 16
    assert base64.b64decode(wire["ct"])


def test_decode_restores_envelope(envelope):
    assert decode_envelope(encode_envelope(envelope)) == envelope
    assert decode_envelope(envelope) is envelope


def test_json_text_round_trip(envelope):
    text = envelope.to_json()

    assert json.loads(text) == envelope.to_dict()
    assert Envelope.from_json(text) == envelope


def test_envelope_is_immutable(envelope):
    with pytest.raises(AttributeError):
        envelope.iterations = 1


def test_repr_omits_ciphertext(envelope):
    assert "ciphertext" not in repr(envelope)


@pytest.mark.parametrize(
    "overrides",
    [{"v": 2}, {"v": "1"}, {"v": True}, {"alg": "AES-128-CBC"}, {"alg": None}],
)
def test_decode_rejects_unknown_version_or_algorithm(envelope, overrides):
    wire = {**envelope.to_dict(), **overrides}

    with pytest.raises(UnsupportedFormatError):
        decode_envelope(wire)


def test_version_is_checked_before_other_fields():
    with pytest.raises(UnsupportedFormatError):
        decode_envelope({"v": 2, "alg": "AES-256-GCM", "salt": "garbage"})


def test_decode_rejects_unknown_kdf(envelope):
    wire = {**envelope.to_dict(), "kdf": "scrypt"}

    with pytest.raises(UnsupportedFormatError):
        decode_envelope(wire)


def test_decode_rejects_non_mapping():
    with pytest.raises(UnsupportedFormatError):
        decode_envelope(["v", 1])


def test_missing_kdf_and_iter_use_defaults(envelope):
    wire = envelope.to_dict()
    del wire["kdf"]
    del wire["iter"]

    decoded = decode_envelope(wire)

    assert decoded.kdf_name == "PBKDF2-SHA256"
    assert decoded.iterations == 210_000


@pytest.mark.parametrize(
    "overrides",
    [
        {"iter": 0},
        {"iter": "210000"},
        {"iter": 1.5},
        {"iter": MAX_ITERATIONS + 1},
        {"iter": 2**64},
        {"salt": None},
        {"ct": ""},
        {"iv": "not*base64"},
        {"salt": base64.b64encode(bytes(32)).decode()},
        {"iv": base64.b64encode(bytes(16)).decode()},
        {"tag": base64.b64encode(bytes(12)).decode()},
    ],
)
def test_decode_rejects_malformed_fields(envelope, overrides):
    wire = {**envelope.to_dict(), **overrides}

    with pytest.raises(MalformedEnvelopeError):
        decode_envelope(wire)


def test_malformed_is_a_decryption_error():
    assert issubclass(MalformedEnvelopeError, DecryptionError)


def test_from_json_rejects_invalid_json():
    with pytest.raises(MalformedEnvelopeError):
        Envelope.from_json("{not json")


def test_direct_construction_validates_sizes():
    with pytest.raises(MalformedEnvelopeError):
        Envelope(salt=bytes(8), iv=bytes(12), ciphertext=b"x", auth_tag=bytes(16), iterations=1)
    with pytest.raises(UnsupportedFormatError):
        Envelope(
            salt=bytes(16), iv=bytes(12), ciphertext=b"x", auth_tag=bytes(16),
            iterations=1, version=2,
        )


def test_is_envelope_accepts_envelopes(envelope):
    assert is_envelope(envelope)
    assert is_envelope(envelope.to_dict())


@pytest.mark.parametrize(
    "value",
    [
        None,
        "plain text",
        42,
        [],
        {"note": "hello"},
        {"v": 1, "alg": "AES-256-GCM"},
        {"v": 2, "alg": "AES-256-GCM", "salt": "a", "iv": "b", "ct": "c", "tag": "d"},
        {"v": 1, "alg": "AES-128-CBC", "salt": "a", "iv": "b", "ct": "c", "tag": "d"},
        {"v": True, "alg": "AES-256-GCM", "salt": "a", "iv": "b", "ct": "c", "tag": "d"},
        {"v": 1, "alg": "AES-256-GCM", "salt": "a", "iv": "b", "ct": "", "tag": "d"},
    ],
)
def test_is_envelope_rejects_other_values(value):
    assert is_envelope(value) is False
