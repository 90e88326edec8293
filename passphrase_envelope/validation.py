"""
Encryption settings and their validation.

``validate_settings`` is a pure function that collects every violated rule
instead of stopping at the first, so a settings screen can list them all.
Only passphrase length is enforced; callers may tighten the rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from .config import MIN_PASSPHRASE_LENGTH, get_config


@dataclass(frozen=True)
class EncryptionSettings:
    """Sync encryption settings as persisted by the calling application."""

    enabled: bool = False
    passphrase: Optional[str] = field(default=None, repr=False)
    salt_b64: Optional[str] = None
    iterations: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EncryptionSettings:
        """Accept camelCase (``saltB64``/``saltBase64``) or snake_case keys."""
        salt = data.get("saltB64")
        if salt is None:
            salt = data.get("saltBase64", data.get("salt_b64"))
        return cls(
            enabled=bool(data.get("enabled", False)),
            passphrase=data.get("passphrase"),
            salt_b64=salt,
            iterations=data.get("iterations"),
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_settings."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.is_valid


SettingsLike = Union[EncryptionSettings, Mapping[str, Any]]


def validate_settings(
    settings: SettingsLike,
    require_salt: bool = True,
    min_passphrase_length: Optional[int] = None,
) -> ValidationResult:
    """
    Check passphrase and salt before they are used.

    Args:
        settings: EncryptionSettings or a mapping with ``passphrase`` and
            ``saltB64``
        require_salt: Whether the calling mode needs a salt
        min_passphrase_length: Override of the configured minimum; values
            below 8 are raised to 8

    Returns:
        ValidationResult with every error, in rule order
    """
    if not isinstance(settings, EncryptionSettings):
        settings = EncryptionSettings.from_mapping(settings or {})
    if min_passphrase_length is None:
        min_passphrase_length = get_config().min_passphrase_length
    min_passphrase_length = max(min_passphrase_length, MIN_PASSPHRASE_LENGTH)

    errors: List[str] = []

    passphrase = settings.passphrase
    if not isinstance(passphrase, str) or len(passphrase) < min_passphrase_length:
        errors.append(
            f"Passphrase must be at least {min_passphrase_length} characters long"
        )

    if require_salt and not settings.salt_b64:
        errors.append("Salt is required for encryption")

    return ValidationResult(is_valid=not errors, errors=errors)
