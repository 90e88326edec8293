"""
Cryptographic primitives for AES-256-GCM passphrase envelopes.

This module provides:
- SecureKey: Key wrapper that can be wiped as soon as it has been used
- AesGcmCipher: AES-256-GCM seal/open with a detached authentication tag
"""

from __future__ import annotations

import secrets
from typing import Optional, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionError, InvalidInputError

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
SALT_SIZE: int = 16  # 128 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)


class SecureKey:
    """
    Derived key held in a mutable buffer so it can be overwritten after use.

    Use as a context manager to wipe the key when the block exits.
    Python may still hold transient copies (e.g. the ``bytes`` returned by
    the KDF), so this is best-effort zeroization.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise InvalidInputError("Key must be bytes or bytearray")
        self._bytes = bytearray(key_bytes)

    def as_bytes(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def zeroize(self) -> None:
        """Overwrite the key material with zeros."""
        for i in range(len(self._bytes)):
            self._bytes[i] = 0

    def is_zeroized(self) -> bool:
        return not any(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __enter__(self) -> SecureKey:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.zeroize()

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecureKey([REDACTED])"

    def __del__(self) -> None:
        if hasattr(self, "_bytes"):
            self.zeroize()


def _key_bytes(key: SecureKey | bytes | bytearray) -> bytes:
    raw = key.as_bytes() if isinstance(key, SecureKey) else bytes(key)
    if len(raw) != AES_256_KEY_SIZE:
        raise InvalidInputError(
            f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(raw)}"
        )
    return raw


def _check_nonce(iv: bytes) -> None:
    if len(iv) != NONCE_SIZE:
        raise InvalidInputError(
            f"Invalid nonce size: expected {NONCE_SIZE}, got {len(iv)}"
        )


class AesGcmCipher:
    """
    AES-256-GCM authenticated encryption.

    The tag is returned and accepted separately from the ciphertext, which is
    how the envelope stores it (``ct`` and ``tag`` fields).
    """

    @staticmethod
    def seal(
        plaintext: bytes,
        key: SecureKey | bytes,
        iv: bytes,
        aad: Optional[bytes] = None,
    ) -> Tuple[bytes, bytes]:
        """
        Encrypt plaintext with AES-256-GCM.

        Args:
            plaintext: Data to encrypt
            key: 32-byte encryption key
            iv: 12-byte nonce, never reused with the same key
            aad: Optional Additional Authenticated Data

        Returns:
            Tuple of (ciphertext, 16-byte authentication tag)

        Raises:
            InvalidInputError: If key or nonce size is invalid
        """
        _check_nonce(iv)
        sealed = AESGCM(_key_bytes(key)).encrypt(iv, plaintext, aad)
        return sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

    @staticmethod
    def open(
        ciphertext: bytes,
        key: SecureKey | bytes,
        iv: bytes,
        auth_tag: bytes,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Verify the tag and decrypt ciphertext with AES-256-GCM.

        Args:
            ciphertext: Encrypted data without the tag
            key: 32-byte decryption key
            iv: 12-byte nonce used for encryption
            auth_tag: 16-byte authentication tag
            aad: Optional Additional Authenticated Data (must match encryption)

        Returns:
            Decrypted plaintext bytes

        Raises:
            InvalidInputError: If key, nonce or tag size is invalid
            DecryptionError: If authentication fails
        """
        _check_nonce(iv)
        if len(auth_tag) != TAG_SIZE:
            raise InvalidInputError(
                f"Invalid tag size: expected {TAG_SIZE}, got {len(auth_tag)}"
            )

        aesgcm = AESGCM(_key_bytes(key))

        try:
            return aesgcm.decrypt(iv, ciphertext + auth_tag, aad)
        except InvalidTag:
            # Generic error to prevent oracle attacks
            raise DecryptionError() from None


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)


def generate_nonce() -> bytes:
    """Fresh random 12-byte GCM nonce."""
    return generate_random_bytes(NONCE_SIZE)
