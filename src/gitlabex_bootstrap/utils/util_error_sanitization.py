# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error message sanitization utilities.

GitLab error bodies and transport exceptions are logged and copied into
error context. This module masks them before that happens, so that
tokens, session cookies and client secrets never reach process output.

Sanitization Guidelines:
    NEVER include: passwords, private tokens, session cookies, client secrets
    SAFE to include: status codes, operation names, client IDs, record IDs

Example:
    >>> from gitlabex_bootstrap.utils import sanitize_error_message
    >>> try:
    ...     raise ValueError("Login failed with password=hunter2")
    ... except Exception as e:
    ...     safe_msg = sanitize_error_message(e)
    >>> "hunter2" not in safe_msg
    True
"""

from __future__ import annotations

# Checked case-insensitively. A match redacts the whole message.
SENSITIVE_PATTERNS: tuple[str, ...] = (
    # Credentials
    "password",
    "passwd",
    # Secrets and tokens
    "secret",
    "token",
    "private-token",
    "glpat-",
    "gloas-",
    # Authentication
    "credential",
    "bearer",
    "authorization",
    # GitLab session cookie
    "_gitlab_session",
    "set-cookie",
    "cookie",
    # URLs with embedded userinfo
    "user:pass",
    "username:password",
    # Certificate and key material
    "-----begin",
    "-----end",
)

_REDACTED: str = "[REDACTED - potentially sensitive data]"


def sanitize_error_string(error_str: str, max_length: int = 500) -> str:
    """Sanitize a raw error string (e.g. an HTTP response body) for logging.

    Sanitization rules:
        1. If a sensitive pattern is present, return a generic redacted message
        2. Truncate long messages to ``max_length``

    Args:
        error_str: The error string to sanitize
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        Sanitized error message safe for logging.

    Example:
        >>> sanitize_error_string('{"message":"401 Unauthorized"}')
        '{"message":"401 Unauthorized"}'
        >>> sanitize_error_string('{"token":"glpat-abc"}')
        '[REDACTED - potentially sensitive data]'
    """
    if not error_str:
        return ""

    error_lower = error_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in error_lower:
            return _REDACTED

    if len(error_str) > max_length:
        return error_str[:max_length] + "... [truncated]"

    return error_str


def sanitize_error_message(exception: BaseException, max_length: int = 500) -> str:
    """Sanitize an exception for logging.

    Returns:
        ``"{ExceptionType}: {sanitized_message}"``; only the type survives
        when the message looks sensitive.
    """
    exception_type = type(exception).__name__
    exception_str = str(exception)

    exception_lower = exception_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in exception_lower:
            return f"{exception_type}: {_REDACTED}"

    if len(exception_str) > max_length:
        exception_str = exception_str[:max_length] + "... [truncated]"

    return f"{exception_type}: {exception_str}"


__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "sanitize_error_message",
    "sanitize_error_string",
]
