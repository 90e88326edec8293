"""
Versioned envelope codec.

This module provides:
- Envelope: Immutable encrypted payload with everything needed to decrypt
  it except the passphrase
- encode_envelope / decode_envelope: Conversion to and from the wire mapping
- is_envelope: Structural check used to tell envelopes from plaintext data

Wire format (field names are part of the compatibility contract)::

    {"v": 1, "alg": "AES-256-GCM", "kdf": "PBKDF2-SHA256", "iter": 210000,
     "salt": "<b64>", "iv": "<b64>", "ct": "<b64>", "tag": "<b64>"}

``v`` and ``alg`` are checked before any other field is read. An unknown
combination is a hard failure, never a best-effort decode.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .config import MAX_ITERATIONS, get_config
from .crypto import NONCE_SIZE, SALT_SIZE, TAG_SIZE
from .errors import InvalidInputError, MalformedEnvelopeError, UnsupportedFormatError
from .kdf import b64decode_field, b64encode

ENVELOPE_VERSION: int = 1
ALGORITHM: str = "AES-256-GCM"
KDF_NAME: str = "PBKDF2-SHA256"

_BINARY_FIELDS = ("salt", "iv", "ct", "tag")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_format(version: Any, algorithm: Any) -> None:
    if not (_is_int(version) and version == ENVELOPE_VERSION) or algorithm != ALGORITHM:
        raise UnsupportedFormatError(
            f"Unsupported encryption format (v={version!r}, alg={algorithm!r})"
        )


@dataclass(frozen=True)
class Envelope:
    """Encrypted payload with its KDF and cipher parameters."""

    salt: bytes  # 16 bytes
    iv: bytes  # 12 bytes, unique per encryption
    ciphertext: bytes = field(repr=False)
    auth_tag: bytes  # 16 bytes
    iterations: int
    version: int = ENVELOPE_VERSION
    algorithm: str = ALGORITHM
    kdf_name: str = KDF_NAME

    def __post_init__(self) -> None:
        _check_format(self.version, self.algorithm)
        if self.kdf_name != KDF_NAME:
            raise UnsupportedFormatError(f"Unsupported key derivation: {self.kdf_name!r}")
        if not _is_int(self.iterations) or not 1 <= self.iterations <= MAX_ITERATIONS:
            raise MalformedEnvelopeError(f"Invalid iteration count: {self.iterations!r}")
        for name, value, size in (
            ("salt", self.salt, SALT_SIZE),
            ("iv", self.iv, NONCE_SIZE),
            ("tag", self.auth_tag, TAG_SIZE),
        ):
            if len(value) != size:
                raise MalformedEnvelopeError(
                    f"Invalid {name} size: expected {size}, got {len(value)}"
                )

    def to_dict(self) -> Dict[str, Any]:
        """Wire mapping with base64-encoded binary fields."""
        return {
            "v": self.version,
            "alg": self.algorithm,
            "kdf": self.kdf_name,
            "iter": self.iterations,
            "salt": b64encode(self.salt),
            "iv": b64encode(self.iv),
            "ct": b64encode(self.ciphertext),
            "tag": b64encode(self.auth_tag),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Envelope:
        """
        Parse and validate a wire mapping.

        Args:
            data: Mapping in wire format

        Returns:
            Envelope instance

        Raises:
            UnsupportedFormatError: If ``v``/``alg``/``kdf`` are not recognized
            MalformedEnvelopeError: If the remaining fields are unusable
        """
        if not isinstance(data, Mapping):
            raise UnsupportedFormatError("Unsupported encryption format")

        _check_format(data.get("v"), data.get("alg"))

        kdf_name = data.get("kdf", KDF_NAME)
        if kdf_name != KDF_NAME:
            raise UnsupportedFormatError(f"Unsupported key derivation: {kdf_name!r}")

        iterations = data.get("iter")
        if iterations is None:
            iterations = get_config().default_iterations

        decoded = {}
        for name in _BINARY_FIELDS:
            try:
                decoded[name] = b64decode_field(data.get(name), name)
            except InvalidInputError as e:
                raise MalformedEnvelopeError(f"Malformed envelope: {e}") from None

        return cls(
            salt=decoded["salt"],
            iv=decoded["iv"],
            ciphertext=decoded["ct"],
            auth_tag=decoded["tag"],
            iterations=iterations,
            kdf_name=kdf_name,
        )

    def to_json(self) -> str:
        """Serialize envelope to compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, json_str: str) -> Envelope:
        """
        Deserialize envelope from JSON text.

        Raises:
            MalformedEnvelopeError: If the text is not valid JSON
            UnsupportedFormatError: If the format is not recognized
        """
        try:
            data = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise MalformedEnvelopeError(f"Failed to parse envelope: {e}") from None
        return cls.from_dict(data)


def encode_envelope(envelope: Envelope) -> Dict[str, Any]:
    """Encode an Envelope into its transport-safe wire mapping."""
    return envelope.to_dict()


def decode_envelope(value: Any) -> Envelope:
    """Decode a wire mapping (or pass an Envelope through)."""
    if isinstance(value, Envelope):
        return value
    return Envelope.from_dict(value)


def is_envelope(value: Any) -> bool:
    """
    Tell whether ``value`` looks like one of our encrypted envelopes.

    Checks ``v``, ``alg`` and the presence of the binary fields only; it does
    not decode them. Never raises.
    """
    if isinstance(value, Envelope):
        return True
    if not isinstance(value, Mapping):
        return False
    version = value.get("v")
    if not (_is_int(version) and version == ENVELOPE_VERSION):
        return False
    if value.get("alg") != ALGORITHM:
        return False
    return all(
        isinstance(value.get(name), str) and value.get(name) for name in _BINARY_FIELDS
    )
