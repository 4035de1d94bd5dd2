"""Error message sanitization to prevent credential leakage."""

from __future__ import annotations

import os
import re


def sanitize_error(message: str) -> str:
    """Sanitize error messages to prevent API token and path leakage."""
    if not message:
        return message

    sanitized = message
    # Zammad token auth header, with or without the header name
    sanitized = re.sub(r"Token\s+token=\S+", "Token token=[REDACTED]", sanitized)
    sanitized = re.sub(r"Bearer\s+\S+", "Bearer [REDACTED]", sanitized)
    sanitized = re.sub(r"Authorization:\s*(?!Token token=\[REDACTED\])\S+", "Authorization: [REDACTED]", sanitized)
    sanitized = re.sub(r"([?&](?:token|api_token|access_token)=)[^&\s]+", r"\1[REDACTED]", sanitized)

    # Redact user home paths
    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home != "/":
        sanitized = sanitized.replace(home, "[USER_HOME]")

    return sanitized
