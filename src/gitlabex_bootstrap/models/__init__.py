# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pydantic models for the GitLabEx OAuth bootstrap."""

from gitlabex_bootstrap.models.model_bootstrap_config import (
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SCOPES,
    ModelBootstrapConfig,
)
from gitlabex_bootstrap.models.model_endpoint_check import ModelEndpointCheck
from gitlabex_bootstrap.models.model_oauth_application import ModelOAuthApplication
from gitlabex_bootstrap.models.model_provisioning_result import (
    ModelProvisioningResult,
)

__all__: list[str] = [
    "DEFAULT_ADMIN_USERNAME",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_SCOPES",
    "ModelBootstrapConfig",
    "ModelEndpointCheck",
    "ModelOAuthApplication",
    "ModelProvisioningResult",
]
