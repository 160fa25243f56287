"""Credential masking for log output.

Database URLs and key/value pairs such as ``password=...`` are masked
before a message or structured extra leaves the process.
"""

from __future__ import annotations

import re
from typing import Any

# Mask replacement string
MASK = "***MASKED***"

# key=value / key: value pairs whose value must not be logged; group 1 keeps the key
_KEY_VALUE_PATTERN = re.compile(
    r'(["\']?(?:password|passwd|pwd|secret|(?:access[_-]?|auth[_-]?)?token|api[_-]?key)["\']?'
    r"\s*[:=]\s*)[\"']?[^\"'\s,;}\]]+[\"']?",
    re.IGNORECASE,
)

# user:password@ in connection URLs (postgresql://, mysql://, https://, ...)
_URL_CREDENTIALS_PATTERN = re.compile(r"([a-z][a-z0-9+.\-]*://)[^:/@\s]+:[^@\s]+(@)", re.IGNORECASE)

SENSITIVE_KEYWORDS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "pwd",
        "secret",
        "token",
        "api_key",
        "apikey",
        "credential",
        "authorization",
    }
)


def mask_sensitive_string(text: str) -> str:
    """Mask credentials in a string.

    Args:
        text: The text to mask

    Returns:
        Text with credential values replaced by MASK
    """
    if not text:
        return text

    result = _URL_CREDENTIALS_PATTERN.sub(r"\1" + MASK + r"\2", text)
    return _KEY_VALUE_PATTERN.sub(r"\g<1>" + MASK, result)


def is_sensitive_key(key: str) -> bool:
    lower_key = key.lower()
    return any(keyword in lower_key for keyword in SENSITIVE_KEYWORDS)


def mask_dict(data: dict[str, Any], depth: int = 0, max_depth: int = 10) -> dict[str, Any]:
    """Recursively mask sensitive values in a dictionary.

    Values under sensitive keys are replaced outright; other strings are
    scanned with ``mask_sensitive_string``.
    """
    if depth >= max_depth:
        return data

    result: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = MASK
        elif isinstance(value, dict):
            result[key] = mask_dict(value, depth + 1, max_depth)
        elif isinstance(value, str):
            result[key] = mask_sensitive_string(value)
        else:
            result[key] = value
    return result
