# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bootstrap-Specific Error Classes.

Error Hierarchy:
    Exception
    └── BootstrapError (base bootstrap error)
        ├── ConfigMissingError
        ├── ConfigInvalidError
        ├── ServiceUnreadyError
        ├── RemoteCallFailedError
        │   └── RemoteCallRejectedError
        ├── ProvisioningInconsistentError
        └── PublishFailedError

All errors:
    - Are terminal at the top level (the CLI maps them to exit status 1)
    - Support proper error chaining with `raise ... from e`
    - Carry structured context via ModelBootstrapErrorContext
    - Never embed passwords, tokens or client secrets in their message
"""

from typing import Optional
from uuid import UUID

from gitlabex_bootstrap.enums import EnumBootstrapStage
from gitlabex_bootstrap.errors.model_bootstrap_error_context import (
    ModelBootstrapErrorContext,
)


class BootstrapError(Exception):
    """Base error class for the OAuth bootstrap run.

    Structured Fields (via ModelBootstrapErrorContext):
        stage: Pipeline stage that failed
        operation: Operation being performed
        target_name: Target resource/endpoint name
        correlation_id: Run correlation ID

    Example:
        >>> context = ModelBootstrapErrorContext(
        ...     stage=EnumBootstrapStage.PUBLICATION,
        ...     operation="write_artifact",
        ... )
        >>> raise BootstrapError("Write failed", context=context, path="/shared")
    """

    default_stage: Optional[EnumBootstrapStage] = None

    def __init__(
        self,
        message: str,
        context: Optional[ModelBootstrapErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize BootstrapError with structured fields.

        Args:
            message: Human-readable error message
            context: Bundled bootstrap context (stage, operation, etc.)
            **extra_context: Additional non-sensitive context information
        """
        super().__init__(message)
        self.message = message
        if context is None:
            context = ModelBootstrapErrorContext(stage=self.default_stage)
        elif context.stage is None and self.default_stage is not None:
            context = context.model_copy(update={"stage": self.default_stage})
        self.context = context
        self.extra_context: dict[str, object] = dict(extra_context)

    @property
    def stage(self) -> Optional[EnumBootstrapStage]:
        return self.context.stage

    @property
    def correlation_id(self) -> Optional[UUID]:
        return self.context.correlation_id

    def bind_correlation(self, correlation_id: UUID) -> None:
        """Attach the run's correlation ID unless one is already set."""
        if self.context.correlation_id is None:
            self.context = self.context.model_copy(
                update={"correlation_id": correlation_id}
            )

    def __str__(self) -> str:
        parts = [self.message]
        if self.context.operation:
            parts.append(f"operation={self.context.operation}")
        for key, value in self.extra_context.items():
            parts.append(f"{key}={value}")
        return " | ".join(parts)


class ConfigMissingError(BootstrapError):
    """Raised when the config file does not exist."""

    default_stage = EnumBootstrapStage.CONFIG


class ConfigInvalidError(BootstrapError):
    """Raised when required config keys are absent or empty, or a value is malformed.

    Example:
        >>> raise ConfigInvalidError(
        ...     "Missing required config keys",
        ...     missing_keys="GITLAB_OAUTH_APP_NAME",
        ... )
    """

    default_stage = EnumBootstrapStage.CONFIG


class ServiceUnreadyError(BootstrapError):
    """Raised when the readiness probe exhausts its attempt budget."""

    default_stage = EnumBootstrapStage.READINESS


class RemoteCallFailedError(BootstrapError):
    """Raised when a remote call fails after retry exhaustion.

    Extra context conventionally includes ``attempts`` and ``last_status``.
    """

    default_stage = EnumBootstrapStage.PROVISIONING

    def __init__(
        self,
        message: str,
        context: Optional[ModelBootstrapErrorContext] = None,
        status_code: Optional[int] = None,
        **extra_context: object,
    ) -> None:
        """Initialize RemoteCallFailedError.

        Args:
            message: Human-readable error message
            context: Bundled bootstrap context
            status_code: Last HTTP status received, if any
            **extra_context: Additional context information
        """
        if status_code is not None:
            extra_context.setdefault("last_status", status_code)
        super().__init__(message, context=context, **extra_context)
        self.status_code = status_code


class RemoteCallRejectedError(RemoteCallFailedError):
    """Raised when the remote answers with a non-retryable status.

    The retry executor re-raises this immediately. A 401/403 rejection is
    what triggers the administrative fallback path in the provisioner.
    """

    @property
    def is_auth_rejection(self) -> bool:
        return self.status_code in (401, 403)


class ProvisioningInconsistentError(BootstrapError):
    """Raised when post-write verification finds the remote record in the wrong state."""

    default_stage = EnumBootstrapStage.PROVISIONING


class PublishFailedError(BootstrapError):
    """Raised when the artifact cannot be written or fails read-back verification."""

    default_stage = EnumBootstrapStage.PUBLICATION


__all__ = [
    "BootstrapError",
    "ConfigInvalidError",
    "ConfigMissingError",
    "ProvisioningInconsistentError",
    "PublishFailedError",
    "RemoteCallFailedError",
    "RemoteCallRejectedError",
    "ServiceUnreadyError",
]
