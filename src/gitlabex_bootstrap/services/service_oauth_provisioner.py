# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""OAuth Application Provisioner Service.

Idempotently provisions the GitLab OAuth application used by GitLabEx and
captures its plaintext secret exactly once.

State Machine (EnumProvisioningState):
    1. Lookup by display name (exact, case-sensitive): ABSENT or PRESENT
    2. PRESENT + force_recreate: delete, verify the record is gone, then ABSENT
    3. PRESENT: update redirect URIs and scopes, rotate the secret: PROVISIONED
    4. ABSENT: create with a generated secret, confidential: PROVISIONED
    5. Re-query by record id; a missing record is FAILED
       (``ProvisioningInconsistentError``)

Secrets:
    GitLab hashes application secrets and never returns the plaintext on a
    later lookup, so a reused record always has its secret rotated. The
    provisioner generates 32 random bytes (hex encoded) and sends them; if
    the create/rotate response carries its own ``secret`` that value is
    authoritative. Either way the plaintext is registered with the run's
    redaction filter before anything can log it.

Fallback:
    When the primary credentials cannot be obtained, or the applications
    API rejects them (401/403), the state machine is rerun once from
    Lookup with the broker's administrative fallback token. When that
    also fails the run fails with ``RemoteCallFailedError``.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable

from pydantic import SecretStr

from gitlabex_bootstrap.enums import (
    EnumBootstrapStage,
    EnumProvisioningAction,
    EnumProvisioningState,
)
from gitlabex_bootstrap.errors import (
    ModelBootstrapErrorContext,
    ProvisioningInconsistentError,
    RemoteCallFailedError,
    RemoteCallRejectedError,
)
from gitlabex_bootstrap.handlers.handler_gitlab_api import HandlerGitLabApi
from gitlabex_bootstrap.models import (
    ModelBootstrapConfig,
    ModelOAuthApplication,
    ModelProvisioningResult,
)
from gitlabex_bootstrap.services.service_credential_broker import (
    ServiceCredentialBroker,
)
from gitlabex_bootstrap.utils.util_log_redaction import SecretRedactingFilter
from gitlabex_bootstrap.utils.util_redirect_uri import (
    expand_redirect_aliases,
    join_redirect_uris,
)
from gitlabex_bootstrap.utils.util_retry import RetryExecutor

CLIENT_SECRET_BYTES: int = 32


def generate_client_secret() -> str:
    """Return a new client secret: 32 random bytes, hex encoded."""
    return secrets.token_hex(CLIENT_SECRET_BYTES)


class ServiceOAuthProvisioner:
    """Look up, create, update or recreate the GitLabEx OAuth application.

    Attributes:
        state: Current EnumProvisioningState, for diagnostics and tests
    """

    def __init__(
        self,
        config: ModelBootstrapConfig,
        api: HandlerGitLabApi,
        broker: ServiceCredentialBroker,
        retry: RetryExecutor,
        redactor: SecretRedactingFilter | None = None,
        secret_factory: Callable[[], str] = generate_client_secret,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._api = api
        self._broker = broker
        self._retry = retry
        self._redactor = redactor or SecretRedactingFilter()
        self._secret_factory = secret_factory
        self._logger = logger or logging.getLogger(__name__)
        self.state: EnumProvisioningState | None = None

    def _context(self, operation: str) -> ModelBootstrapErrorContext:
        return ModelBootstrapErrorContext(
            stage=EnumBootstrapStage.PROVISIONING,
            operation=operation,
            target_name=self._config.app_name,
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def provision(self) -> ModelProvisioningResult:
        """Run the state machine, falling back to admin context once if needed.

        Raises:
            RemoteCallFailedError: Both the primary and fallback paths failed,
                or a remote call failed for a reason other than auth.
            ProvisioningInconsistentError: A write did not durably persist.
        """
        primary_error: RemoteCallFailedError | None = None
        try:
            token = self._broker.primary_token()
        except RemoteCallFailedError as e:
            primary_error = e
            self._logger.warning("Primary credentials unavailable: %s", e)
        else:
            self._api.use_token(token)
            try:
                return self._run()
            except RemoteCallRejectedError as e:
                if not e.is_auth_rejection:
                    raise
                primary_error = e
                self._logger.warning(
                    "Primary credentials rejected by GitLab (status %s)",
                    e.status_code,
                )

        try:
            self._api.use_token(self._broker.fallback_token())
            return self._run()
        except RemoteCallFailedError as e:
            self.state = EnumProvisioningState.FAILED
            self._logger.error("Administrative fallback failed: %s", e)
            raise RemoteCallFailedError(
                "OAuth application provisioning failed on both the primary "
                "and the administrative fallback path",
                context=self._context("provision"),
                status_code=e.status_code,
                primary_error=str(primary_error),
            ) from e

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _run(self) -> ModelProvisioningResult:
        redirect_uris = expand_redirect_aliases(self._config.redirect_uri)
        if len(redirect_uris) > 1:
            self._logger.info(
                "Registering loopback alias redirect URIs: %s", ", ".join(redirect_uris)
            )

        existing = self._lookup()
        action = EnumProvisioningAction.CREATED
        if existing is not None and self._config.force_recreate:
            self._destroy(existing)
            existing = None
            action = EnumProvisioningAction.RECREATED

        if existing is not None:
            app, secret = self._update_and_rotate(existing, redirect_uris)
            action = EnumProvisioningAction.UPDATED
        else:
            app, secret = self._create(redirect_uris)

        self._verify(app)
        self.state = EnumProvisioningState.PROVISIONED
        self._logger.info(
            "OAuth application %r %s (client id %s, record %d)",
            app.name or self._config.app_name,
            action.value,
            app.client_id,
            app.record_id,
        )
        return ModelProvisioningResult(
            client_id=app.client_id,
            client_secret=SecretStr(secret),
            redirect_uri=self._config.redirect_uri,
            redirect_uris=app.redirect_uris or redirect_uris,
            external_url=self._config.external_url,
            internal_url=self._config.internal_url,
            scopes=self._config.scopes,
            record_id=app.record_id,
            action=action,
        )

    def _lookup(self) -> ModelOAuthApplication | None:
        applications = self._retry.execute(
            "lookup_application", self._api.list_applications
        )
        matches = sorted(
            (app for app in applications if app.name == self._config.app_name),
            key=lambda app: app.record_id,
        )
        if not matches:
            self.state = EnumProvisioningState.ABSENT
            self._logger.info(
                "No OAuth application named %r exists", self._config.app_name
            )
            return None
        if len(matches) > 1:
            self._logger.warning(
                "%d OAuth applications are named %r; using record %d",
                len(matches),
                self._config.app_name,
                matches[0].record_id,
            )
        self.state = EnumProvisioningState.PRESENT
        self._logger.info(
            "Found OAuth application %r (client id %s, record %d)",
            self._config.app_name,
            matches[0].client_id,
            matches[0].record_id,
        )
        return matches[0]

    def _destroy(self, app: ModelOAuthApplication) -> None:
        self._logger.info(
            "Force-recreate is set; deleting OAuth application record %d",
            app.record_id,
        )
        self._retry.execute(
            "delete_application", lambda: self._api.delete_application(app.record_id)
        )
        remaining = self._retry.execute(
            "verify_deletion", lambda: self._api.get_application(app.record_id)
        )
        if remaining is not None:
            self.state = EnumProvisioningState.FAILED
            raise ProvisioningInconsistentError(
                "OAuth application still exists after deletion",
                context=self._context("verify_deletion"),
                record_id=app.record_id,
            )
        self.state = EnumProvisioningState.ABSENT

    def _new_secret(self) -> str:
        secret = self._secret_factory()
        self._redactor.register(secret)
        return secret

    def _captured_secret(self, app: ModelOAuthApplication, sent: str) -> str:
        if app.secret is not None:
            issued = app.secret.get_secret_value()
            self._redactor.register(issued)
            return issued
        return sent

    def _create(
        self, redirect_uris: tuple[str, ...]
    ) -> tuple[ModelOAuthApplication, str]:
        secret = self._new_secret()
        self._logger.info("Creating OAuth application %r", self._config.app_name)
        app = self._retry.execute(
            "create_application",
            lambda: self._api.create_application(
                name=self._config.app_name,
                redirect_uri=join_redirect_uris(redirect_uris),
                scopes=self._config.scopes_text,
                secret=secret,
                confidential=True,
            ),
        )
        return app, self._captured_secret(app, secret)

    def _update_and_rotate(
        self,
        existing: ModelOAuthApplication,
        redirect_uris: tuple[str, ...],
    ) -> tuple[ModelOAuthApplication, str]:
        record_id = existing.record_id
        self._logger.info(
            "Updating redirect URIs and scopes on record %d", record_id
        )
        self._retry.execute(
            "update_application",
            lambda: self._api.update_application(
                record_id,
                {
                    "redirect_uri": join_redirect_uris(redirect_uris),
                    "scopes": self._config.scopes_text,
                },
                "update_application",
            ),
        )

        secret = self._new_secret()
        self._logger.info("Rotating the client secret on record %d", record_id)
        app = self._retry.execute(
            "rotate_client_secret",
            lambda: self._api.update_application(
                record_id, {"secret": secret}, "rotate_client_secret"
            ),
        )
        return app, self._captured_secret(app, secret)

    def _verify(self, app: ModelOAuthApplication) -> None:
        persisted = self._retry.execute(
            "verify_application", lambda: self._api.get_application(app.record_id)
        )
        if persisted is None or persisted.client_id != app.client_id:
            self.state = EnumProvisioningState.FAILED
            raise ProvisioningInconsistentError(
                "OAuth application is missing after provisioning",
                context=self._context("verify_application"),
                record_id=app.record_id,
                client_id=app.client_id,
            )


__all__ = [
    "CLIENT_SECRET_BYTES",
    "ServiceOAuthProvisioner",
    "generate_client_secret",
]
