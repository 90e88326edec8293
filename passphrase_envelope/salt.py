"""
Salt strategies for key derivation.

- ``random_salt``: 16 random bytes per encryption. The default; each secret
  gets its own salt, which defeats precomputed tables.
- ``deterministic_salt``: 16 bytes derived from the passphrase alone, so
  every device holding the same passphrase computes the same salt without
  exchanging it. The trade-off is that two users who pick the same
  passphrase also share a salt. Use it for one user's devices agreeing on a
  salt, not as protection for weak passphrases across a population.

The deterministic derivation is a single PBKDF2 iteration. It does not
replace the work factor of the main key derivation.
"""

from __future__ import annotations

from .crypto import SALT_SIZE, generate_random_bytes
from .errors import InvalidInputError
from .kdf import pbkdf2_sha256

# Wire-compatibility constant: previously issued deterministic salts depend
# on these exact bytes.
SALT_DERIVATION_CONTEXT: bytes = b"CogNotez-Salt-Derivation-Key"
SALT_DERIVATION_ITERATIONS: int = 1


def random_salt() -> bytes:
    """Return 16 cryptographically secure random bytes."""
    return generate_random_bytes(SALT_SIZE)


def deterministic_salt(passphrase: str) -> bytes:
    """
    Derive a 16-byte salt from the passphrase alone.

    Raises:
        InvalidInputError: If passphrase is empty
    """
    if not passphrase or not isinstance(passphrase, str):
        raise InvalidInputError("Passphrase is required to derive salt")
    return pbkdf2_sha256(
        passphrase,
        SALT_DERIVATION_CONTEXT,
        SALT_DERIVATION_ITERATIONS,
        SALT_SIZE,
    )
