# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bootstrap Pipeline Service.

Runs one bootstrap, strictly in sequence:

    ConfigLoader -> ServiceReadinessProbe (gate)
        -> ServiceOAuthProvisioner (RetryExecutor per remote call)
        -> ServiceArtifactPublisher

Any stage failure raises a typed ``BootstrapError`` and nothing downstream
runs. The CLI maps the error to exit status 1.

Each run builds its own logger with a ``SecretRedactingFilter`` and injects
it into every component, so redaction state is scoped to the run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from uuid import UUID, uuid4

import httpx

from gitlabex_bootstrap.enums import EnumBootstrapStage
from gitlabex_bootstrap.errors import (
    BootstrapError,
    ConfigInvalidError,
    ModelBootstrapErrorContext,
    ServiceUnreadyError,
)
from gitlabex_bootstrap.handlers.handler_gitlab_api import HandlerGitLabApi
from gitlabex_bootstrap.models import ModelBootstrapConfig, ModelProvisioningResult
from gitlabex_bootstrap.services.service_artifact_publisher import (
    DEFAULT_SHARED_ROOT,
    ServiceArtifactPublisher,
)
from gitlabex_bootstrap.services.service_config_loader import (
    KEY_ADMIN_TOKEN,
    KEY_ROOT_PASSWORD,
    load_bootstrap_config,
)
from gitlabex_bootstrap.services.service_credential_broker import (
    ServiceCredentialBroker,
)
from gitlabex_bootstrap.services.service_oauth_provisioner import (
    ServiceOAuthProvisioner,
)
from gitlabex_bootstrap.services.service_readiness_probe import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_WARMUP_SECONDS,
    ServiceReadinessProbe,
)
from gitlabex_bootstrap.utils.util_log_redaction import (
    SecretRedactingFilter,
    build_run_logger,
)
from gitlabex_bootstrap.utils.util_redirect_uri import expand_redirect_aliases
from gitlabex_bootstrap.utils.util_retry import RetryExecutor

DEFAULT_CONFIG_PATH: Path = Path("/config/oauth.env")
DEFAULT_RETRY_MAX: int = 3
DEFAULT_RETRY_DELAY_SECONDS: float = 5.0


class ServiceBootstrapPipeline:
    """One sequential bootstrap run.

    Attributes:
        _config_path: KEY=VALUE config file
        _shared_root: Shared volume mount point
        _overrides: Environment-provided credential values
        _http_client: Optional injected httpx client (not closed by the pipeline)
    """

    def __init__(
        self,
        config_path: Path | str = DEFAULT_CONFIG_PATH,
        shared_root: Path | str = DEFAULT_SHARED_ROOT,
        subdirectory: str | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        warmup_seconds: float = DEFAULT_WARMUP_SECONDS,
        retry_max: int = DEFAULT_RETRY_MAX,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
        overrides: Mapping[str, str] | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config_path = Path(config_path)
        self._shared_root = Path(shared_root)
        self._subdirectory = subdirectory
        self._max_attempts = max_attempts
        self._warmup_seconds = warmup_seconds
        self._retry_max = retry_max
        self._retry_delay = retry_delay
        self._overrides = dict(overrides or {})
        self._http_client = http_client
        self._sleep = sleep

    def load_config(self) -> ModelBootstrapConfig:
        config = load_bootstrap_config(self._config_path, self._overrides)
        if not config.has_credentials:
            raise ConfigInvalidError(
                f"No GitLab credentials available: set {KEY_ADMIN_TOKEN} or "
                f"{KEY_ROOT_PASSWORD} in the config file or the environment",
                context=ModelBootstrapErrorContext(
                    stage=EnumBootstrapStage.CONFIG,
                    operation="validate_credentials",
                    target_name=str(self._config_path),
                ),
            )
        return config

    def plan(self) -> dict[str, object]:
        """Describe what a run would do, without any network access."""
        config = self.load_config()
        publisher = ServiceArtifactPublisher(self._shared_root, self._subdirectory)
        return {
            "gitlab_internal_url": config.internal_url,
            "gitlab_external_url": config.external_url,
            "app_name": config.app_name,
            "redirect_uris": list(expand_redirect_aliases(config.redirect_uri)),
            "scopes": config.scopes_text,
            "force_recreate": config.force_recreate,
            "credentials": "admin token" if config.admin_token else "session login",
            "artifact_path": str(publisher.artifact_path),
        }

    def run(self) -> ModelProvisioningResult:
        """Execute the whole bootstrap.

        Raises:
            ConfigMissingError, ConfigInvalidError: Bad or missing config.
            ServiceUnreadyError: GitLab never became ready.
            RemoteCallFailedError: A remote call failed after retries.
            ProvisioningInconsistentError: A write did not persist.
            PublishFailedError: The artifact could not be written or verified.

        Every raised error carries the run's correlation ID.
        """
        run_logger, redactor = build_run_logger()
        correlation_id = uuid4()
        run_logger.info("Starting GitLab OAuth bootstrap (run %s)", correlation_id)
        try:
            return self._run_stages(correlation_id, run_logger, redactor)
        except BootstrapError as e:
            e.bind_correlation(correlation_id)
            raise

    def _run_stages(
        self,
        correlation_id: UUID,
        run_logger: logging.Logger,
        redactor: SecretRedactingFilter,
    ) -> ModelProvisioningResult:
        config = self.load_config()
        publisher = ServiceArtifactPublisher(
            self._shared_root, self._subdirectory, logger=run_logger
        )

        owns_client = self._http_client is None
        client = self._http_client or httpx.Client(
            timeout=httpx.Timeout(config.http_timeout_seconds),
            verify=config.tls_verify,
        )
        try:
            probe = ServiceReadinessProbe(
                config.internal_url,
                client,
                warmup_seconds=self._warmup_seconds,
                sleep=self._sleep,
                logger=run_logger,
            )
            if not probe.wait_until_ready(self._max_attempts):
                raise ServiceUnreadyError(
                    f"GitLab at {config.internal_url} was not ready after "
                    f"{self._max_attempts} attempts",
                    context=ModelBootstrapErrorContext(
                        stage=EnumBootstrapStage.READINESS,
                        operation="wait_until_ready",
                        target_name=config.internal_url,
                        correlation_id=correlation_id,
                    ),
                    attempts=self._max_attempts,
                )

            api = HandlerGitLabApi(config.internal_url, client, logger=run_logger)
            retry = RetryExecutor(
                max_retries=self._retry_max,
                delay=self._retry_delay,
                sleep=self._sleep,
                logger=run_logger,
            )
            broker = ServiceCredentialBroker(
                config, api, retry, redactor=redactor, logger=run_logger
            )
            provisioner = ServiceOAuthProvisioner(
                config, api, broker, retry, redactor=redactor, logger=run_logger
            )
            result = provisioner.provision()
        finally:
            if owns_client:
                client.close()

        path = publisher.publish(result)

        run_logger.info("GitLab OAuth bootstrap complete (run %s)", correlation_id)
        run_logger.info("  GITLAB_CLIENT_ID=%s", result.client_id)
        run_logger.info("  GITLAB_CLIENT_SECRET=<written to %s>", path)
        run_logger.info("  redirect URIs: %s", ", ".join(result.redirect_uris))
        run_logger.info("  action: %s", result.action.value)
        return result


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ServiceBootstrapPipeline",
]
