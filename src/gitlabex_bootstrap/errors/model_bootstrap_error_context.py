# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bootstrap Error Context Configuration Model.

This module defines the configuration model for bootstrap error context,
encapsulating common structured fields to reduce __init__ parameter count
while keeping them strongly typed.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gitlabex_bootstrap.enums import EnumBootstrapStage


class ModelBootstrapErrorContext(BaseModel):
    """Configuration model for bootstrap error context.

    Attributes:
        stage: Pipeline stage that failed (config, readiness, ...)
        operation: Operation being performed (lookup_application, ...)
        target_name: Target resource or endpoint name
        correlation_id: Run correlation ID for tying log lines together

    Example:
        >>> context = ModelBootstrapErrorContext(
        ...     stage=EnumBootstrapStage.PROVISIONING,
        ...     operation="create_application",
        ...     target_name="gitlab",
        ... )
        >>> raise RemoteCallFailedError("Create failed", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    stage: Optional[EnumBootstrapStage] = Field(
        default=None,
        description="Pipeline stage that raised the error",
    )
    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed when the error occurred",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource or endpoint name",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Run correlation ID",
    )


__all__ = ["ModelBootstrapErrorContext"]
