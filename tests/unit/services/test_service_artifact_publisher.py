# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for ServiceArtifactPublisher.

Tests cover:
- Fixed key order and content, parsed back to the written values
- 0644 mode regardless of umask
- Subdirectory creation below an existing shared root
- Missing shared root, write failures, and read-back mismatches
- The secret never appearing in log output
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import SecretStr

from gitlabex_bootstrap.enums import EnumBootstrapStage, EnumProvisioningAction
from gitlabex_bootstrap.errors import PublishFailedError
from gitlabex_bootstrap.models import ModelProvisioningResult
from gitlabex_bootstrap.services.service_artifact_publisher import (
    ARTIFACT_FILENAME,
    ServiceArtifactPublisher,
)
from gitlabex_bootstrap.utils.util_env_file import parse_env_text

pytestmark = [pytest.mark.unit]

SECRET = "5f0d2c9a41b7e3d8"  # noqa: S105


@pytest.fixture
def result() -> ModelProvisioningResult:
    return ModelProvisioningResult(
        client_id="a1b2c3d4",
        client_secret=SecretStr(SECRET),
        redirect_uri="http://localhost:4000/auth/gitlab/callback",
        redirect_uris=(
            "http://localhost:4000/auth/gitlab/callback",
            "http://127.0.0.1:4000/auth/gitlab/callback",
        ),
        external_url="http://localhost:8080",
        internal_url="http://gitlab:8080",
        scopes=("api", "read_user", "email"),
        record_id=3,
        action=EnumProvisioningAction.CREATED,
    )


class TestRender:
    """Tests for render."""

    def test_fixed_key_order(self, result: ModelProvisioningResult) -> None:
        assert ServiceArtifactPublisher.render(result) == (
            "GITLAB_CLIENT_ID=a1b2c3d4\n"
            f"GITLAB_CLIENT_SECRET={SECRET}\n"
            "GITLAB_REDIRECT_URI=http://localhost:4000/auth/gitlab/callback\n"
            "GITLAB_EXTERNAL_URL=http://localhost:8080\n"
            "GITLAB_INTERNAL_URL=http://gitlab:8080\n"
            'GITLAB_SCOPES="api read_user email"\n'
        )


class TestPublish:
    """Tests for publish."""

    def test_round_trip(self, tmp_path: Path, result: ModelProvisioningResult) -> None:
        path = ServiceArtifactPublisher(tmp_path).publish(result)

        assert path == tmp_path / ARTIFACT_FILENAME
        assert parse_env_text(path.read_text(encoding="utf-8")) == {
            "GITLAB_CLIENT_ID": "a1b2c3d4",
            "GITLAB_CLIENT_SECRET": SECRET,
            "GITLAB_REDIRECT_URI": "http://localhost:4000/auth/gitlab/callback",
            "GITLAB_EXTERNAL_URL": "http://localhost:8080",
            "GITLAB_INTERNAL_URL": "http://gitlab:8080",
            "GITLAB_SCOPES": "api read_user email",
        }

    def test_mode_is_0644_under_restrictive_umask(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        previous = os.umask(0o077)
        try:
            path = ServiceArtifactPublisher(tmp_path).publish(result)
        finally:
            os.umask(previous)

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_overwrites_previous_artifact(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        stale = tmp_path / ARTIFACT_FILENAME
        stale.write_text("GITLAB_CLIENT_ID=old\nEXTRA=1\n", encoding="utf-8")

        ServiceArtifactPublisher(tmp_path).publish(result)

        values = parse_env_text(stale.read_text(encoding="utf-8"))
        assert values["GITLAB_CLIENT_ID"] == "a1b2c3d4"
        assert "EXTRA" not in values
        assert not (tmp_path / f"{ARTIFACT_FILENAME}.tmp").exists()

    def test_creates_subdirectory(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        publisher = ServiceArtifactPublisher(tmp_path, subdirectory="gitlabex/oauth")

        path = publisher.publish(result)

        assert path == tmp_path / "gitlabex" / "oauth" / ARTIFACT_FILENAME
        assert path.is_file()

    def test_missing_shared_root(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        missing = tmp_path / "not-mounted"
        publisher = ServiceArtifactPublisher(missing, subdirectory="x")

        with pytest.raises(PublishFailedError) as exc_info:
            publisher.publish(result)

        assert exc_info.value.stage is EnumBootstrapStage.PUBLICATION
        assert not missing.exists()

    def test_shared_root_is_a_file(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        not_a_dir = tmp_path / "shared"
        not_a_dir.write_text("", encoding="utf-8")

        with pytest.raises(PublishFailedError, match="not a directory"):
            ServiceArtifactPublisher(not_a_dir).publish(result)

    def test_write_failure(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        with patch(
            "gitlabex_bootstrap.services.service_artifact_publisher.os.write",
            side_effect=OSError(28, "No space left on device"),
        ):
            with pytest.raises(PublishFailedError, match="No space left"):
                ServiceArtifactPublisher(tmp_path).publish(result)

        assert not (tmp_path / f"{ARTIFACT_FILENAME}.tmp").exists()
        assert not (tmp_path / ARTIFACT_FILENAME).exists()

    def test_read_back_mismatch(
        self, tmp_path: Path, result: ModelProvisioningResult
    ) -> None:
        publisher = ServiceArtifactPublisher(tmp_path)

        with patch.object(
            ServiceArtifactPublisher, "render", return_value="GITLAB_CLIENT_ID=other\n"
        ):
            with pytest.raises(PublishFailedError, match="expected client id"):
                publisher.publish(result)

    def test_secret_not_logged(
        self,
        tmp_path: Path,
        result: ModelProvisioningResult,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.DEBUG):
            ServiceArtifactPublisher(tmp_path).publish(result)

        assert SECRET not in caplog.text
        assert "a1b2c3d4" in caplog.text
        assert "0o644" in caplog.text
