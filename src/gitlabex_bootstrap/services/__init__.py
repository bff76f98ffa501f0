# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Services for the GitLabEx OAuth bootstrap pipeline."""

from gitlabex_bootstrap.services.service_artifact_publisher import (
    ARTIFACT_FILENAME,
    ServiceArtifactPublisher,
)
from gitlabex_bootstrap.services.service_bootstrap_pipeline import (
    ServiceBootstrapPipeline,
)
from gitlabex_bootstrap.services.service_config_loader import load_bootstrap_config
from gitlabex_bootstrap.services.service_credential_broker import (
    ServiceCredentialBroker,
)
from gitlabex_bootstrap.services.service_oauth_provisioner import (
    ServiceOAuthProvisioner,
    generate_client_secret,
)
from gitlabex_bootstrap.services.service_readiness_probe import ServiceReadinessProbe

__all__: list[str] = [
    "ARTIFACT_FILENAME",
    "ServiceArtifactPublisher",
    "ServiceBootstrapPipeline",
    "ServiceCredentialBroker",
    "ServiceOAuthProvisioner",
    "ServiceReadinessProbe",
    "generate_client_secret",
    "load_bootstrap_config",
]
