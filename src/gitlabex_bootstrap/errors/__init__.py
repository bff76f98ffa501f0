# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""GitLabEx Bootstrap Errors Module.

Exports:
    ModelBootstrapErrorContext: Configuration model for bundled error context
    BootstrapError: Base bootstrap error class
    ConfigMissingError: Config file does not exist
    ConfigInvalidError: Required config keys absent/empty or values malformed
    ServiceUnreadyError: Readiness budget exhausted
    RemoteCallFailedError: Remote call failed after retry exhaustion
    RemoteCallRejectedError: Remote call rejected with a non-retryable status
    ProvisioningInconsistentError: Post-write verification failure
    PublishFailedError: Artifact write or verification failure

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Client secrets, admin tokens or personal access tokens
        - The privileged account's password
        - Session cookies

    SAFE to include:
        - Operation names (e.g., "lookup_application", "rotate_secret")
        - Client IDs and numeric record IDs
        - HTTP status codes, attempt counts, file paths

    Example - GOOD (sanitized)::

        raise RemoteCallFailedError(
            "Creating OAuth application failed",
            context=context,
            status_code=502,
            attempts=3,
        )
"""

from gitlabex_bootstrap.errors.bootstrap_errors import (
    BootstrapError,
    ConfigInvalidError,
    ConfigMissingError,
    ProvisioningInconsistentError,
    PublishFailedError,
    RemoteCallFailedError,
    RemoteCallRejectedError,
    ServiceUnreadyError,
)
from gitlabex_bootstrap.errors.model_bootstrap_error_context import (
    ModelBootstrapErrorContext,
)

__all__: list[str] = [
    "BootstrapError",
    "ConfigInvalidError",
    "ConfigMissingError",
    "ModelBootstrapErrorContext",
    "ProvisioningInconsistentError",
    "PublishFailedError",
    "RemoteCallFailedError",
    "RemoteCallRejectedError",
    "ServiceUnreadyError",
]
