# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for gitlabex_bootstrap tests.

Available Utilities:
    FakeGitLab:
        - FakeGitLab: In-memory GitLab v4 API served through httpx.MockTransport
        - FakeApplication: OAuth application record held by FakeGitLab
        - GITLAB_URL, ROOT_PASSWORD, SESSION_COOKIE: Fixed values it answers to
        - APP_NAME, EXTERNAL_URL, REDIRECT_URI: Default bootstrap config values
"""

from tests.helpers.fake_gitlab import (
    APP_NAME,
    EXTERNAL_URL,
    GITLAB_URL,
    REDIRECT_URI,
    ROOT_PASSWORD,
    SESSION_COOKIE,
    FakeApplication,
    FakeGitLab,
)

__all__ = [
    "APP_NAME",
    "EXTERNAL_URL",
    "GITLAB_URL",
    "REDIRECT_URI",
    "ROOT_PASSWORD",
    "SESSION_COOKIE",
    "FakeApplication",
    "FakeGitLab",
]
