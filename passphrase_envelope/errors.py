"""
Exception classes for passphrase envelope operations.

Validation problems are not exceptions: ``validate_settings`` returns them
as data so a caller can show the full list.
"""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base exception for all passphrase envelope operations."""

    pass


class InvalidInputError(EnvelopeError):
    """A required passphrase, salt or data argument is missing or empty."""

    pass


class PassphraseRequiredError(InvalidInputError):
    """An encrypted envelope was received but no passphrase was supplied."""

    pass


class UnsupportedFormatError(EnvelopeError):
    """Envelope version or algorithm is not recognized by this implementation."""

    pass


class DecryptionError(EnvelopeError):
    """
    Authentication failed while opening an envelope.

    A wrong passphrase and tampered ciphertext are indistinguishable.
    """

    DEFAULT_MESSAGE = "Incorrect passphrase or corrupted data"

    def __init__(self, message: str = DEFAULT_MESSAGE) -> None:
        super().__init__(message)


class MalformedEnvelopeError(DecryptionError):
    """Envelope fields are missing, not valid base64 or have the wrong length."""

    pass


class ConfigError(EnvelopeError):
    """Configuration error."""

    pass
