# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""GitLabEx OAuth bootstrap - provisions the GitLab OAuth application.

This package waits for a GitLab instance to become API-ready, idempotently
provisions the OAuth application used by the GitLabEx education platform,
and publishes the resulting client credentials as an env-style artifact
on a shared volume.

Key Components:
    - load_bootstrap_config: KEY=VALUE config parsing and validation
    - ServiceReadinessProbe: bounded, capped back-off readiness polling
    - RetryExecutor: fixed-delay retry around every remote call
    - ServiceOAuthProvisioner: lookup / create / update / recreate state machine
    - ServiceArtifactPublisher: atomic, verified artifact publication
    - ServiceBootstrapPipeline: the sequential run tying them together
"""

__version__ = "0.3.0"

__all__: list[str] = ["__version__"]
