"""
Helpers for logging third-party payloads without leaking secrets or PII.

Webhook bodies and tool inputs are logged through sanitize_for_logging so
tokens, emails and long free-text fields never reach the log stream verbatim.
"""
import re
from typing import Any


# Keys whose values are always redacted
SENSITIVE_KEYS = [
    "api_key", "token", "password", "secret", "auth",
    "email", "phone", "access_token", "refresh_token",
    "bearer", "authorization", "webhook_secret",
]

_EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
_CONTROL_CHARS = re.compile(r'[\x00-\x1F\x7F]')


def sanitize_for_logging(data: Any, max_len: int = 100) -> Any:
    """
    Sanitize data for safe logging.

    Dicts are walked recursively and sensitive keys are redacted, strings are
    stripped of control characters, emails are masked and long values are
    truncated.

    Args:
        data: dict, list, str or scalar to sanitize
        max_len: Maximum length for string values before truncation

    Returns:
        Sanitized copy of the data
    """
    if data is None:
        return "None"

    if isinstance(data, dict):
        sanitized = {}
        for k, v in data.items():
            if any(sensitive in str(k).lower() for sensitive in SENSITIVE_KEYS):
                sanitized[k] = "***REDACTED***"
            else:
                sanitized[k] = sanitize_for_logging(v, max_len)
        return sanitized

    if isinstance(data, list):
        return [sanitize_for_logging(item, max_len) for item in data]

    if isinstance(data, (bool, int, float)):
        return data

    cleaned = redact_emails(_CONTROL_CHARS.sub('', str(data)))
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "..."
    return cleaned


def redact_emails(text: str) -> str:
    """Replace email addresses with [EMAIL_REDACTED]."""
    return _EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)


def preview(text: str, length: int = 50) -> str:
    """Single-line preview of free text for log messages."""
    cleaned = _CONTROL_CHARS.sub(' ', text or '')
    if len(cleaned) > length:
        return cleaned[:length] + "..."
    return cleaned
