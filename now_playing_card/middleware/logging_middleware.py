"""Sensitive data redaction for logged URLs."""

import re

# Sensitive parameters to redact from URLs
SENSITIVE_PARAMS = [
    "api_key",
    "apikey",
    "token",
    "password",
    "secret",
    "key",
    "access_token",
    "auth_token",
    "authorization",
    "bearer",
]


def redact_sensitive_data(url: str) -> str:
    """Redact sensitive query parameters from URL."""
    redacted = url
    for param in SENSITIVE_PARAMS:
        pattern = rf"(?i)\b{param}=([^&\s\"]+)"
        redacted = re.sub(pattern, f"{param}=***REDACTED***", redacted)
    return redacted
