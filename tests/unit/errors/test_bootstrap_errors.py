# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the bootstrap error hierarchy."""

from __future__ import annotations

from uuid import uuid4

import pytest

from gitlabex_bootstrap.enums import EnumBootstrapStage
from gitlabex_bootstrap.errors import (
    BootstrapError,
    ConfigInvalidError,
    ConfigMissingError,
    ModelBootstrapErrorContext,
    ProvisioningInconsistentError,
    PublishFailedError,
    RemoteCallFailedError,
    RemoteCallRejectedError,
    ServiceUnreadyError,
)

pytestmark = [pytest.mark.unit]


class TestErrorHierarchy:
    """Every error is a BootstrapError and carries its default stage."""

    @pytest.mark.parametrize(
        ("error_cls", "stage"),
        [
            (ConfigMissingError, EnumBootstrapStage.CONFIG),
            (ConfigInvalidError, EnumBootstrapStage.CONFIG),
            (ServiceUnreadyError, EnumBootstrapStage.READINESS),
            (RemoteCallFailedError, EnumBootstrapStage.PROVISIONING),
            (RemoteCallRejectedError, EnumBootstrapStage.PROVISIONING),
            (ProvisioningInconsistentError, EnumBootstrapStage.PROVISIONING),
            (PublishFailedError, EnumBootstrapStage.PUBLICATION),
        ],
    )
    def test_default_stage(
        self, error_cls: type[BootstrapError], stage: EnumBootstrapStage
    ) -> None:
        error = error_cls("boom")
        assert isinstance(error, BootstrapError)
        assert error.stage is stage

    def test_explicit_stage_is_kept(self) -> None:
        context = ModelBootstrapErrorContext(
            stage=EnumBootstrapStage.CREDENTIALS, operation="login"
        )
        error = RemoteCallFailedError("login failed", context=context)
        assert error.stage is EnumBootstrapStage.CREDENTIALS

    def test_default_stage_fills_partial_context(self) -> None:
        context = ModelBootstrapErrorContext(operation="write_artifact")
        error = PublishFailedError("cannot write", context=context)
        assert error.stage is EnumBootstrapStage.PUBLICATION
        assert error.context.operation == "write_artifact"
        # The caller's context is frozen and left untouched.
        assert context.stage is None

    def test_rejected_is_a_failed_call(self) -> None:
        assert issubclass(RemoteCallRejectedError, RemoteCallFailedError)


class TestErrorRendering:
    """Tests for __str__ and extra context."""

    def test_str_includes_operation_and_extra_context(self) -> None:
        error = RemoteCallFailedError(
            "create_application failed after 3 attempts",
            context=ModelBootstrapErrorContext(operation="create_application"),
            status_code=502,
            attempts=3,
        )
        text = str(error)
        assert text.startswith("create_application failed after 3 attempts")
        assert "operation=create_application" in text
        assert "last_status=502" in text
        assert "attempts=3" in text

    def test_plain_message(self) -> None:
        assert str(ConfigMissingError("Config file not found")) == (
            "Config file not found"
        )


class TestRemoteCallErrors:
    """Tests for status handling on remote call errors."""

    @pytest.mark.parametrize(
        ("status", "is_auth"), [(401, True), (403, True), (404, False)]
    )
    def test_auth_rejection(self, status: int, is_auth: bool) -> None:
        error = RemoteCallRejectedError("rejected", status_code=status)
        assert error.is_auth_rejection is is_auth
        assert error.status_code == status

    def test_missing_status(self) -> None:
        error = RemoteCallFailedError("timeout")
        assert error.status_code is None
        assert "last_status" not in error.extra_context


class TestErrorContext:
    """Tests for ModelBootstrapErrorContext."""

    def test_bind_correlation_fills_missing_id(self) -> None:
        correlation_id = uuid4()
        error = PublishFailedError(
            "write failed",
            context=ModelBootstrapErrorContext(operation="write_artifact"),
        )
        error.bind_correlation(correlation_id)
        assert error.correlation_id == correlation_id
        assert error.context.operation == "write_artifact"
        assert error.stage is EnumBootstrapStage.PUBLICATION

    def test_bind_correlation_keeps_existing_id(self) -> None:
        original = uuid4()
        error = ServiceUnreadyError(
            "not ready",
            context=ModelBootstrapErrorContext(correlation_id=original),
        )
        error.bind_correlation(uuid4())
        assert error.correlation_id == original

    def test_error_exposes_correlation_id(self) -> None:
        correlation_id = uuid4()
        error = ServiceUnreadyError(
            "not ready",
            context=ModelBootstrapErrorContext(correlation_id=correlation_id),
        )
        assert error.correlation_id == correlation_id

    def test_context_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValueError):
            ModelBootstrapErrorContext(password="x")  # type: ignore[call-arg]
