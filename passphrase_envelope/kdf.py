"""
Passphrase key derivation.

PBKDF2-HMAC-SHA256 stretches a passphrase and a 16-byte salt into a 256-bit
AES key. The iteration count travels with every envelope, so the default can
be raised over time while older envelopes keep decrypting with the count
they were sealed with.

The same primitive backs ``hash_password``/``verify_password``, the verifier
stored for password-protected notes.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .config import MAX_ITERATIONS, get_config
from .crypto import AES_256_KEY_SIZE, SALT_SIZE, generate_random_bytes
from .errors import InvalidInputError


def check_iterations(iterations: Any) -> int:
    """Return iterations if it is a positive int, else raise InvalidInputError."""
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidInputError(f"Iterations must be an integer, got {iterations!r}")
    if iterations < 1:
        raise InvalidInputError(f"Iterations must be positive, got {iterations}")
    if iterations > MAX_ITERATIONS:
        raise InvalidInputError(
            f"Iterations cannot exceed {MAX_ITERATIONS}, got {iterations}"
        )
    return iterations


def pbkdf2_sha256(secret: str, salt: bytes, iterations: int, length: int) -> bytes:
    try:
        encoded = secret.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidInputError("Passphrase is not valid text") from None

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(encoded)


def derive_key(passphrase: str, salt: bytes, iterations: int) -> bytes:
    """
    Derive a 32-byte AES key from a passphrase using PBKDF2-HMAC-SHA256.

    Args:
        passphrase: Non-empty passphrase
        salt: Exactly 16 bytes
        iterations: Positive PBKDF2 work factor

    Returns:
        32-byte key; identical inputs always give the identical key

    Raises:
        InvalidInputError: If passphrase or salt is empty, the salt has the
            wrong length, or iterations is not a positive integer
    """
    if not passphrase or not isinstance(passphrase, str):
        raise InvalidInputError("Passphrase and salt are required")
    if not salt:
        raise InvalidInputError("Passphrase and salt are required")
    if len(salt) != SALT_SIZE:
        raise InvalidInputError(
            f"Invalid salt size: expected {SALT_SIZE}, got {len(salt)}"
        )
    check_iterations(iterations)

    return pbkdf2_sha256(passphrase, bytes(salt), iterations, AES_256_KEY_SIZE)


def b64decode_field(value: Any, field_name: str) -> bytes:
    """Strictly decode a standard base64 string, raising InvalidInputError."""
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"{field_name} is required")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInputError(f"{field_name} is not valid base64")


def b64encode(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


@dataclass(frozen=True)
class PasswordHash:
    """Stored password verifier (``{"hashBase64", "saltBase64", "iterations"}``)."""

    hash_b64: str
    salt_b64: str
    iterations: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hashBase64": self.hash_b64,
            "saltBase64": self.salt_b64,
            "iterations": self.iterations,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, json_str: str) -> PasswordHash:
        """
        Parse a stored verifier.

        Raises:
            InvalidInputError: If the text is not a valid verifier
        """
        try:
            data = json.loads(json_str)
            return cls(
                hash_b64=data["hashBase64"],
                salt_b64=data["saltBase64"],
                iterations=check_iterations(data["iterations"]),
            )
        except (TypeError, KeyError, ValueError) as e:
            raise InvalidInputError(f"Invalid password hash: {e}")


def hash_password(password: str, iterations: Optional[int] = None) -> PasswordHash:
    """
    Hash a password for later verification.

    Args:
        password: Non-empty password
        iterations: PBKDF2 work factor (configured default when omitted)

    Returns:
        PasswordHash with a fresh random salt
    """
    if not password:
        raise InvalidInputError("Password is required")
    if iterations is None:
        iterations = get_config().default_iterations

    salt = generate_random_bytes(SALT_SIZE)
    digest = derive_key(password, salt, iterations)
    return PasswordHash(
        hash_b64=b64encode(digest),
        salt_b64=b64encode(salt),
        iterations=iterations,
    )


def verify_password(
    password: str,
    hash_b64: str,
    salt_b64: str,
    iterations: int,
) -> bool:
    """
    Check a password against a stored verifier in constant time.

    Returns:
        True on match; False on mismatch or a malformed verifier
    """
    try:
        expected = b64decode_field(hash_b64, "Hash")
        salt = b64decode_field(salt_b64, "Salt")
        actual = derive_key(password, salt, iterations)
    except InvalidInputError:
        return False
    return hmac.compare_digest(actual, expected)
