"""
Passphrase Envelope Library

Passphrase-based AES-256-GCM encryption of JSON data, producing a
versioned, self-describing envelope that is safe to upload to a third-party
store.

Quick Start
-----------
```python
from passphrase_envelope import (
    decrypt_data,
    derive_salt_from_passphrase,
    encrypt_data,
    is_encrypted,
)

passphrase = "correct horse battery staple"

# Random salt per envelope (default)
envelope = encrypt_data({"note": "hello"}, passphrase)
blob = envelope.to_json()

# Same salt on every device that knows the passphrase
salt_b64 = derive_salt_from_passphrase(passphrase)
envelope = encrypt_data({"note": "hello"}, passphrase, salt_b64=salt_b64)

assert is_encrypted(envelope.to_dict())
assert decrypt_data(blob, passphrase) == {"note": "hello"}
```

Key Features
------------
- **AES-256-GCM**: Wrong passphrase and tampering fail the same way
- **PBKDF2-HMAC-SHA256**: Iteration count stored per envelope, raisable over time
- **Deterministic salts**: Optional passphrase-derived salt for multi-device sync
- **Versioned envelopes**: Unknown versions/algorithms are rejected outright
- **Memory Security**: Best-effort key zeroization after each operation

Modules
-------
- `service`: Public encrypt/decrypt/derive/validate operations
- `kdf`: PBKDF2 key derivation and password verifiers
- `salt`: Random and deterministic salt strategies
- `crypto`: AES-256-GCM primitives
- `envelope`: Envelope wire codec
- `validation`: Settings validation
- `config`: Environment-driven configuration
- `errors`: Error types and exception classes
"""

import logging as _logging

__version__ = "0.1.0"

# ============================================================================
# Crypto Exports
# ============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    TAG_SIZE,
    AesGcmCipher,
    SecureKey,
    generate_random_bytes,
)

# ============================================================================
# Error Exports
# ============================================================================

from .errors import (
    ConfigError,
    DecryptionError,
    EnvelopeError,
    InvalidInputError,
    MalformedEnvelopeError,
    PassphraseRequiredError,
    UnsupportedFormatError,
)

# ============================================================================
# Config Exports
# ============================================================================

from .config import (
    DEFAULT_ITERATIONS,
    MAX_ITERATIONS,
    MIN_PASSPHRASE_LENGTH,
    EnvelopeConfig,
    get_config,
    load_config,
)

# ============================================================================
# Derivation / Envelope Exports
# ============================================================================

from .kdf import PasswordHash, derive_key, hash_password, verify_password
from .salt import SALT_DERIVATION_CONTEXT, deterministic_salt, random_salt
from .envelope import (
    ALGORITHM,
    ENVELOPE_VERSION,
    KDF_NAME,
    Envelope,
    decode_envelope,
    encode_envelope,
    is_envelope,
)
from .validation import EncryptionSettings, ValidationResult

# ============================================================================
# Public Operations (Primary API)
# ============================================================================

from .service import (
    EncryptionParams,
    decrypt_data,
    decrypt_data_async,
    derive_key_from_passphrase,
    derive_salt_from_passphrase,
    encrypt_data,
    encrypt_data_async,
    generate_encryption_params,
    generate_salt,
    is_encrypted,
    open_payload,
    validate_settings,
)

from .logging import SecretRedactingFilter, configure_logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# ============================================================================
# Public API
# ============================================================================

__all__ = [
    # Version
    "__version__",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "SALT_SIZE",
    "TAG_SIZE",
    "AesGcmCipher",
    "SecureKey",
    "generate_random_bytes",
    # Errors
    "EnvelopeError",
    "InvalidInputError",
    "PassphraseRequiredError",
    "UnsupportedFormatError",
    "DecryptionError",
    "MalformedEnvelopeError",
    "ConfigError",
    # Config
    "DEFAULT_ITERATIONS",
    "MAX_ITERATIONS",
    "MIN_PASSPHRASE_LENGTH",
    "EnvelopeConfig",
    "get_config",
    "load_config",
    # Derivation
    "derive_key",
    "PasswordHash",
    "hash_password",
    "verify_password",
    "SALT_DERIVATION_CONTEXT",
    "deterministic_salt",
    "random_salt",
    # Envelope
    "ENVELOPE_VERSION",
    "ALGORITHM",
    "KDF_NAME",
    "Envelope",
    "encode_envelope",
    "decode_envelope",
    "is_envelope",
    # Validation
    "EncryptionSettings",
    "ValidationResult",
    # Operations (Primary API)
    "derive_key_from_passphrase",
    "derive_salt_from_passphrase",
    "generate_salt",
    "encrypt_data",
    "decrypt_data",
    "encrypt_data_async",
    "decrypt_data_async",
    "is_encrypted",
    "open_payload",
    "validate_settings",
    "generate_encryption_params",
    "EncryptionParams",
    # Logging
    "SecretRedactingFilter",
    "configure_logging",
]
