"""Log sanitizer - removes credentials from anything we log.

Slack responses and request payloads pass through here before they reach
the log file, so bot tokens and webhook URLs never end up on disk.
"""

import re
from typing import Union

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # Slack tokens (bot, user, app-level, refresh)
    (r'\bxox[abposr]-[A-Za-z0-9-]{10,}', '[SLACK_TOKEN]'),
    (r'\bxapp-[A-Za-z0-9-]{10,}', '[SLACK_TOKEN]'),

    # Slack incoming webhook URLs
    (r'https://hooks\.slack\.com/services/[A-Za-z0-9/_-]+', '[SLACK_WEBHOOK]'),

    # Discord bot tokens (three dot-separated base64 segments)
    (r'\b[MN][A-Za-z\d_-]{23,25}\.[A-Za-z\d_-]{6}\.[A-Za-z\d_-]{27,}', '[DISCORD_TOKEN]'),

    # Email addresses
    (r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b', '[EMAIL]'),

    # Bearer tokens
    (r'(Bearer|Basic)\s+[A-Za-z0-9\-_\.]+', r'\1 [REDACTED]'),

    # API keys, tokens, secrets in key=value format
    (r'(password|secret|token|api_key|apikey|api-key)["\s:=]+[^\s,}"\']{8,}',
     r'\1=[REDACTED]'),
]

# Compiled patterns for efficiency
_COMPILED_PATTERNS = [(re.compile(p, re.IGNORECASE), r) for p, r in SENSITIVE_PATTERNS]


def sanitize_log(text: str) -> str:
    """Remove sensitive data from text for safe logging.

    Args:
        text: The text to sanitize

    Returns:
        Sanitized text with sensitive data replaced by placeholders
    """
    if not text:
        return text

    result = text
    for pattern, replacement in _COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def sanitize_for_log(value: Union[str, bytes, dict, None], max_length: int = 200) -> str:
    """Sanitize and truncate a value for logging.

    Args:
        value: The value to sanitize (string, bytes or a decoded JSON body)
        max_length: Maximum length of returned string

    Returns:
        Sanitized, truncated string safe for logging
    """
    if value is None:
        return "<None>"

    if isinstance(value, bytes):
        text = value.decode('utf-8', errors='replace')
    else:
        text = str(value)

    sanitized = sanitize_log(text)

    if len(sanitized) > max_length:
        return sanitized[:max_length] + f"... [{len(text)} chars total]"

    return sanitized
