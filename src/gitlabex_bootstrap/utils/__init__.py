# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility functions for the GitLabEx OAuth bootstrap."""

from gitlabex_bootstrap.utils.util_env_file import (
    parse_env_text,
    render_env_lines,
    strip_surrounding_quotes,
)
from gitlabex_bootstrap.utils.util_error_sanitization import (
    SENSITIVE_PATTERNS,
    sanitize_error_message,
    sanitize_error_string,
)
from gitlabex_bootstrap.utils.util_log_redaction import (
    REDACTION_MASK,
    SecretRedactingFilter,
    build_run_logger,
)
from gitlabex_bootstrap.utils.util_redirect_uri import (
    expand_redirect_aliases,
    join_redirect_uris,
    split_redirect_uris,
)
from gitlabex_bootstrap.utils.util_retry import RetryExecutor
from gitlabex_bootstrap.utils.util_status_classification import classify_status

__all__: list[str] = [
    "REDACTION_MASK",
    "SENSITIVE_PATTERNS",
    "RetryExecutor",
    "SecretRedactingFilter",
    "build_run_logger",
    "classify_status",
    "expand_redirect_aliases",
    "join_redirect_uris",
    "parse_env_text",
    "render_env_lines",
    "sanitize_error_message",
    "sanitize_error_string",
    "split_redirect_uris",
    "strip_surrounding_quotes",
]
