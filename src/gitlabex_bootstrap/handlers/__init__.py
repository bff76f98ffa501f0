# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Remote API handlers for the GitLabEx OAuth bootstrap."""

from gitlabex_bootstrap.handlers.handler_gitlab_api import (
    APPLICATIONS_PATH,
    PERSONAL_ACCESS_TOKEN_PATHS,
    SESSION_PATH,
    USERS_PATH,
    VERSION_PATH,
    HandlerGitLabApi,
)

__all__: list[str] = [
    "APPLICATIONS_PATH",
    "PERSONAL_ACCESS_TOKEN_PATHS",
    "SESSION_PATH",
    "USERS_PATH",
    "VERSION_PATH",
    "HandlerGitLabApi",
]
