"""
Public passphrase encryption operations.

Every operation is a stateless function of its arguments. There is no
shared key store or cache, so concurrent calls from any number of threads
are safe without locking.

Key derivation is deliberately slow (>= 100ms per call at the default
iteration count). Callers on a latency-sensitive thread or an event loop
should use the ``*_async`` variants or their own worker pool.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .config import get_config
from .crypto import SALT_SIZE, AesGcmCipher, SecureKey, generate_nonce
from .envelope import Envelope, decode_envelope, is_envelope
from .errors import (
    DecryptionError,
    InvalidInputError,
    MalformedEnvelopeError,
    PassphraseRequiredError,
)
from .kdf import b64decode_field, b64encode, check_iterations, derive_key
from .salt import deterministic_salt, random_salt
from .validation import SettingsLike, ValidationResult
from .validation import validate_settings as _validate_settings

logger = logging.getLogger(__name__)

EnvelopeLike = Union[Envelope, Mapping[str, Any], str]


@dataclass(frozen=True)
class EncryptionParams:
    """Salt and iteration count for first-time setup."""

    salt_b64: str
    iterations: int

    def to_dict(self) -> dict:
        return {"saltBase64": self.salt_b64, "iterations": self.iterations}


def _decode_salt(salt_b64: Optional[str]) -> bytes:
    salt = b64decode_field(salt_b64, "Salt")
    if len(salt) != SALT_SIZE:
        raise InvalidInputError(
            f"Invalid salt size: expected {SALT_SIZE}, got {len(salt)}"
        )
    return salt


def _require_passphrase(passphrase: Optional[str]) -> str:
    if not passphrase or not isinstance(passphrase, str):
        raise InvalidInputError("Passphrase is required")
    return passphrase


def derive_key_from_passphrase(
    passphrase: str,
    salt_b64: str,
    iterations: Optional[int] = None,
) -> bytes:
    """
    Derive the 32-byte AES key for a passphrase and base64 salt.

    Raises:
        InvalidInputError: If passphrase or salt is missing or invalid
    """
    if not passphrase or not salt_b64:
        raise InvalidInputError("Passphrase and salt are required")
    if iterations is None:
        iterations = get_config().default_iterations
    return derive_key(passphrase, _decode_salt(salt_b64), iterations)


def derive_salt_from_passphrase(passphrase: str) -> str:
    """Deterministic base64 salt shared by every device with the passphrase."""
    return b64encode(deterministic_salt(passphrase))


def generate_salt() -> str:
    """Random base64 salt."""
    return b64encode(random_salt())


def _serialize(data: Any) -> bytes:
    try:
        text = json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Data is not JSON-serializable: {e}") from None
    return text.encode("utf-8")


def encrypt_data(
    data: Any,
    passphrase: str,
    *,
    salt_b64: Optional[str] = None,
    iterations: Optional[int] = None,
) -> Envelope:
    """
    Encrypt a JSON-serializable value with a passphrase.

    Args:
        data: Any JSON-serializable value except None
        passphrase: User passphrase
        salt_b64: Salt to use (deterministic or stored); random when omitted
        iterations: PBKDF2 work factor (configured default when omitted)

    Returns:
        New Envelope with a fresh random IV

    Raises:
        InvalidInputError: If data or passphrase is missing, the data is not
            JSON-serializable or the salt/iterations are invalid
    """
    if data is None:
        raise InvalidInputError("Data and passphrase are required")
    _require_passphrase(passphrase)

    if iterations is None:
        iterations = get_config().default_iterations
    check_iterations(iterations)

    plaintext = _serialize(data)
    salt = _decode_salt(salt_b64) if salt_b64 else random_salt()
    iv = generate_nonce()

    with SecureKey(derive_key(passphrase, salt, iterations)) as key:
        ciphertext, auth_tag = AesGcmCipher.seal(plaintext, key, iv)

    logger.debug(
        "Encrypted %d bytes (iterations=%d, salt_mode=%s)",
        len(plaintext),
        iterations,
        "supplied" if salt_b64 else "random",
    )
    return Envelope(
        salt=salt,
        iv=iv,
        ciphertext=ciphertext,
        auth_tag=auth_tag,
        iterations=iterations,
    )


def _coerce_envelope(envelope: EnvelopeLike) -> Envelope:
    if isinstance(envelope, str):
        return Envelope.from_json(envelope)
    return decode_envelope(envelope)


def decrypt_data(envelope: EnvelopeLike, passphrase: str) -> Any:
    """
    Decrypt an envelope back into the original JSON value.

    Args:
        envelope: Envelope, wire mapping or JSON text
        passphrase: User passphrase

    Returns:
        The value that was encrypted

    Raises:
        InvalidInputError: If envelope or passphrase is missing
        UnsupportedFormatError: If ``v``/``alg`` are not recognized; raised
            before any decryption is attempted
        DecryptionError: Wrong passphrase or corrupted/tampered data
    """
    if envelope is None or (isinstance(envelope, (str, Mapping)) and not envelope):
        raise InvalidInputError("Envelope and passphrase are required")
    _require_passphrase(passphrase)

    parsed = _coerce_envelope(envelope)

    with SecureKey(derive_key(passphrase, parsed.salt, parsed.iterations)) as key:
        try:
            plaintext = AesGcmCipher.open(parsed.ciphertext, key, parsed.iv, parsed.auth_tag)
        except DecryptionError:
            logger.warning("Envelope authentication failed")
            raise

    try:
        return json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise MalformedEnvelopeError() from None


def is_encrypted(value: Any) -> bool:
    """True if ``value`` is one of our envelopes (mapping or Envelope)."""
    return is_envelope(value)


def validate_settings(settings: SettingsLike, require_salt: bool = True) -> ValidationResult:
    """Collect every problem with a passphrase/salt pair. Never raises."""
    return _validate_settings(settings, require_salt=require_salt)


def generate_encryption_params() -> EncryptionParams:
    """Fresh random salt and the configured iteration count."""
    return EncryptionParams(
        salt_b64=generate_salt(),
        iterations=get_config().default_iterations,
    )


def open_payload(value: Any, passphrase: Optional[str] = None) -> Any:
    """
    Return stored data in plaintext, decrypting it if it is an envelope.

    Lets callers read storage that is partly migrated from unencrypted to
    encrypted form.

    Raises:
        PassphraseRequiredError: If ``value`` is an envelope and no
            passphrase was supplied
        DecryptionError: Wrong passphrase or corrupted data
    """
    if not is_envelope(value):
        return value
    if not passphrase:
        raise PassphraseRequiredError("Data is encrypted and requires a passphrase")
    return decrypt_data(value, passphrase)


async def encrypt_data_async(
    data: Any,
    passphrase: str,
    *,
    salt_b64: Optional[str] = None,
    iterations: Optional[int] = None,
) -> Envelope:
    """encrypt_data in a worker thread."""
    return await asyncio.to_thread(
        encrypt_data, data, passphrase, salt_b64=salt_b64, iterations=iterations
    )


async def decrypt_data_async(envelope: EnvelopeLike, passphrase: str) -> Any:
    """decrypt_data in a worker thread."""
    return await asyncio.to_thread(decrypt_data, envelope, passphrase)
