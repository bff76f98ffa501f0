#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Provision the GitLabEx OAuth application in GitLab.

Entry point for the bootstrap init container. Equivalent to
``gitlabex-bootstrap provision``.

Usage:
    python scripts/provision-gitlab-oauth.py
    python scripts/provision-gitlab-oauth.py --config /config/oauth.env --shared-dir /shared
    python scripts/provision-gitlab-oauth.py --dry-run

Environment:
    OAUTH_CONFIG_FILE     config file (default /config/oauth.env)
    SHARED_DIR            shared volume (default /shared)
    GITLAB_ROOT_PASSWORD  password of the privileged account
    GITLAB_ADMIN_TOKEN    pre-issued admin token (skips session login)
"""

from __future__ import annotations

import sys

from gitlabex_bootstrap.cli.commands import cli

if __name__ == "__main__":
    cli.main(args=["provision", *sys.argv[1:]], prog_name="provision-gitlab-oauth")
