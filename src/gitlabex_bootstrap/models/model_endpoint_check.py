# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Single-endpoint readiness check result, rendered by the ``check`` command."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from gitlabex_bootstrap.enums import EnumResponseClass


class ModelEndpointCheck(BaseModel):
    """Result of probing one GitLab endpoint once.

    Attributes:
        path: Endpoint path relative to the GitLab base URL
        status_code: HTTP status, or None when the request itself failed
        verdict: Classification of the answer
        detail: Short, sanitized description (version, error type, ...)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str
    status_code: int | None = None
    verdict: EnumResponseClass
    detail: str = ""


__all__ = ["ModelEndpointCheck"]
