"""
Logging helpers for passphrase envelope operations.

This module provides:
- SecretRedactingFilter: Scrubs passphrase/key/salt-like values from records
- configure_logging: Attach a console handler with the filter to the
  package logger

The package itself only logs non-secret metadata (iteration counts, sizes,
salt mode). The filter guards against callers passing secrets into the same
loggers.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Iterable, List, Optional, Pattern, Tuple

PACKAGE_LOGGER: str = "passphrase_envelope"

_REDACTED_TEXT: str = "[REDACTED]"

_SENSITIVE_PATTERNS: List[Tuple[str, Pattern[str]]] = [
    ("passphrase", re.compile(r'(?i)(passphrase|password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\',}]+["\']?')),
    ("key", re.compile(r'(?i)(secret|private[_-]?key|key)\s*[=:]\s*["\']?[^\s"\',}]+["\']?')),
    ("salt", re.compile(r'(?i)(salt(?:_?b64|base64)?)\s*[=:]\s*["\']?[^\s"\',}]+["\']?')),
    # Long base64 runs (keys, salts, ciphertext)
    ("base64_secret", re.compile(r"[A-Za-z0-9+/]{40,}={0,2}")),
]


class SecretRedactingFilter(logging.Filter):
    """
    Log filter that replaces sensitive values with ``[REDACTED]``.

    The record is always kept; its formatted message is rewritten.
    """

    def __init__(
        self,
        name: str = "",
        additional_patterns: Optional[Iterable[Pattern[str]]] = None,
    ) -> None:
        super().__init__(name)
        self._additional_patterns = list(additional_patterns or [])

    def filter(self, record: logging.LogRecord) -> bool:
        # Merge args first so a redacted format string cannot orphan them
        record.msg = self._sanitize(record.getMessage())
        record.args = None
        return True

    def _sanitize(self, text: str) -> str:
        result = text
        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)
        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)
        return result


def configure_logging(level: str = "INFO", stream=None) -> logging.Logger:
    """
    Send package logs to a stream with secret redaction.

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ...)
        stream: Output stream (stderr by default)

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))

    if not any(getattr(h, "_passphrase_envelope", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        handler.addFilter(SecretRedactingFilter())
        handler._passphrase_envelope = True
        logger.addHandler(handler)

    return logger
