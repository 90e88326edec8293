"""
Runtime configuration for passphrase envelopes.

Values come from the environment (a ``.env`` file is honoured):

- ``PASSPHRASE_ENVELOPE_ITERATIONS``: PBKDF2 work factor for new envelopes
  (default 210000). Existing envelopes embed their own count, so raising it
  never breaks decryption.
- ``PASSPHRASE_ENVELOPE_MIN_PASSPHRASE_LENGTH``: minimum passphrase length
  enforced by ``validate_settings`` (default 8, may only be raised).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_ITERATIONS: int = 210_000  # OWASP floor for PBKDF2-HMAC-SHA256
# Ceiling for any work factor, including one read from an untrusted envelope
MAX_ITERATIONS: int = 10_000_000
MIN_PASSPHRASE_LENGTH: int = 8

ITERATIONS_ENV: str = "PASSPHRASE_ENVELOPE_ITERATIONS"
MIN_PASSPHRASE_LENGTH_ENV: str = "PASSPHRASE_ENVELOPE_MIN_PASSPHRASE_LENGTH"


@dataclass(frozen=True)
class EnvelopeConfig:
    """Immutable envelope configuration."""

    default_iterations: int = DEFAULT_ITERATIONS
    min_passphrase_length: int = MIN_PASSPHRASE_LENGTH

    def __post_init__(self) -> None:
        if self.default_iterations < 1:
            raise ConfigError(
                f"Iterations must be positive, got {self.default_iterations}"
            )
        if self.default_iterations > MAX_ITERATIONS:
            raise ConfigError(
                f"Iterations cannot exceed {MAX_ITERATIONS}, got {self.default_iterations}"
            )
        if self.min_passphrase_length < MIN_PASSPHRASE_LENGTH:
            raise ConfigError(
                f"Minimum passphrase length cannot be below {MIN_PASSPHRASE_LENGTH}, "
                f"got {self.min_passphrase_length}"
            )


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> EnvelopeConfig:
    """
    Build an EnvelopeConfig from environment variables.

    Args:
        environ: Mapping to read from. When omitted, ``.env`` is loaded and
            ``os.environ`` is used.

    Returns:
        EnvelopeConfig instance

    Raises:
        ConfigError: If a value is not an integer or out of range
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    return EnvelopeConfig(
        default_iterations=_read_int(environ, ITERATIONS_ENV, DEFAULT_ITERATIONS),
        min_passphrase_length=_read_int(
            environ, MIN_PASSPHRASE_LENGTH_ENV, MIN_PASSPHRASE_LENGTH
        ),
    )


@lru_cache(maxsize=1)
def get_config() -> EnvelopeConfig:
    """Return the process-wide configuration, loading it on first use."""
    return load_config()
