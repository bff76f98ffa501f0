# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""GitLabEx bootstrap CLI."""

from gitlabex_bootstrap.cli.commands import cli

__all__: list[str] = ["cli"]
