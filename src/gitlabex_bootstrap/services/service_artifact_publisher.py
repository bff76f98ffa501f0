# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Credentials Artifact Publisher Service.

Writes the provisioning result to ``gitlab-oauth.env`` on the shared
volume, where the GitLabEx backend picks it up at start-up.

Contract:
    - The shared root (the volume mount point) must already exist; it is
      never created. Nested subdirectories below it are created on demand.
    - The file is rendered with a fixed key order and fully overwritten
      on every run.
    - The write is atomic: a sibling ``.tmp`` file is written and then
      ``os.replace``-d over the target. The final mode is 0644 regardless
      of the process umask.
    - The file is read back and must contain the expected
      ``GITLAB_CLIENT_ID=`` line before success is reported.
    - The secret is never logged; only the path, client id and mode are.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from gitlabex_bootstrap.errors import ModelBootstrapErrorContext, PublishFailedError
from gitlabex_bootstrap.models import ModelProvisioningResult
from gitlabex_bootstrap.utils.util_env_file import parse_env_text, render_env_lines

ARTIFACT_FILENAME: str = "gitlab-oauth.env"
ARTIFACT_MODE: int = 0o644
DEFAULT_SHARED_ROOT: Path = Path("/shared")

ARTIFACT_KEY_CLIENT_ID = "GITLAB_CLIENT_ID"
ARTIFACT_KEY_CLIENT_SECRET = "GITLAB_CLIENT_SECRET"  # noqa: S105
ARTIFACT_KEY_REDIRECT_URI = "GITLAB_REDIRECT_URI"
ARTIFACT_KEY_EXTERNAL_URL = "GITLAB_EXTERNAL_URL"
ARTIFACT_KEY_INTERNAL_URL = "GITLAB_INTERNAL_URL"
ARTIFACT_KEY_SCOPES = "GITLAB_SCOPES"


class ServiceArtifactPublisher:
    """Atomic, verified publication of the OAuth credentials artifact."""

    def __init__(
        self,
        shared_root: Path | str = DEFAULT_SHARED_ROOT,
        subdirectory: str | None = None,
        filename: str = ARTIFACT_FILENAME,
        logger: logging.Logger | None = None,
    ) -> None:
        self._shared_root = Path(shared_root)
        self._subdirectory = subdirectory or None
        self._filename = filename
        self._logger = logger or logging.getLogger(__name__)

    @property
    def destination_dir(self) -> Path:
        if self._subdirectory:
            return self._shared_root / self._subdirectory
        return self._shared_root

    @property
    def artifact_path(self) -> Path:
        return self.destination_dir / self._filename

    def _error(self, message: str, operation: str, **extra: object) -> PublishFailedError:
        return PublishFailedError(
            message,
            context=ModelBootstrapErrorContext(
                operation=operation,
                target_name=str(self.artifact_path),
            ),
            **extra,
        )

    @staticmethod
    def render(result: ModelProvisioningResult) -> str:
        """Render the fixed-schema artifact content."""
        return render_env_lines(
            {
                ARTIFACT_KEY_CLIENT_ID: result.client_id,
                ARTIFACT_KEY_CLIENT_SECRET: result.client_secret.get_secret_value(),
                ARTIFACT_KEY_REDIRECT_URI: result.redirect_uri,
                ARTIFACT_KEY_EXTERNAL_URL: result.external_url,
                ARTIFACT_KEY_INTERNAL_URL: result.internal_url,
                ARTIFACT_KEY_SCOPES: result.scopes_text,
            },
            quoted=frozenset({ARTIFACT_KEY_SCOPES}),
        )

    def _ensure_destination(self) -> Path:
        if not self._shared_root.is_dir():
            raise self._error(
                f"Shared volume {self._shared_root} does not exist or is not a directory",
                "ensure_destination",
            )
        destination = self.destination_dir
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise self._error(
                f"Cannot create artifact directory {destination}: {e.strerror}",
                "ensure_destination",
            ) from e
        return destination

    def _write_atomic(self, content: str) -> None:
        path = self.artifact_path
        tmp = path.with_name(path.name + ".tmp")
        try:
            fd = os.open(str(tmp), os.O_CREAT | os.O_WRONLY | os.O_TRUNC, ARTIFACT_MODE)
            try:
                os.write(fd, content.encode("utf-8"))
                os.fsync(fd)
            finally:
                os.close(fd)
            # os.open applies the umask; force the documented mode.
            os.chmod(tmp, ARTIFACT_MODE)
            tmp.replace(path)  # atomic on POSIX
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise self._error(
                f"Cannot write artifact {path}: {e.strerror}",
                "write_artifact",
            ) from e

    def _verify(self, result: ModelProvisioningResult) -> None:
        path = self.artifact_path
        expected = f"{ARTIFACT_KEY_CLIENT_ID}={result.client_id}"
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise self._error(
                f"Cannot read back artifact {path}: {e.strerror}",
                "verify_artifact",
            ) from e
        if expected not in content:
            raise self._error(
                "Artifact read-back does not contain the expected client id",
                "verify_artifact",
                client_id=result.client_id,
            )
        if parse_env_text(content).get(ARTIFACT_KEY_CLIENT_ID) != result.client_id:
            raise self._error(
                "Artifact client id does not parse back to the provisioned value",
                "verify_artifact",
                client_id=result.client_id,
            )

    def publish(self, result: ModelProvisioningResult) -> Path:
        """Write and verify the artifact.

        Returns:
            The path of the published file.

        Raises:
            PublishFailedError: Missing shared volume, write failure, or a
                read-back that does not match.
        """
        self._ensure_destination()
        self._write_atomic(self.render(result))
        self._verify(result)

        path = self.artifact_path
        mode = stat.S_IMODE(path.stat().st_mode)
        self._logger.info(
            "Published OAuth credentials for client %s to %s (mode %s)",
            result.client_id,
            path,
            oct(mode),
        )
        return path


__all__ = [
    "ARTIFACT_FILENAME",
    "ARTIFACT_KEY_CLIENT_ID",
    "ARTIFACT_KEY_CLIENT_SECRET",
    "ARTIFACT_KEY_EXTERNAL_URL",
    "ARTIFACT_KEY_INTERNAL_URL",
    "ARTIFACT_KEY_REDIRECT_URI",
    "ARTIFACT_KEY_SCOPES",
    "ARTIFACT_MODE",
    "DEFAULT_SHARED_ROOT",
    "ServiceArtifactPublisher",
]
