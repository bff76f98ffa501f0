# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""GitLab Credential Broker Service.

Obtains the token the provisioner sends to the applications API.

Primary path:
    1. A pre-issued admin token from config (``GITLAB_ADMIN_TOKEN``), or
    2. a session login with the privileged account's password followed by
       a personal access token from ``/personal_access_tokens`` or
       ``/user/personal_access_tokens``, tried in that order.

Administrative fallback:
    Session login, enumeration of ``/users`` to find the designated admin
    account, then a token issued through ``/users/{id}/personal_access_tokens``
    so that application calls run in that account's administrative context.

Every remote call goes through the ``RetryExecutor``. Each token is
registered with the run's ``SecretRedactingFilter`` as soon as it exists.
"""

from __future__ import annotations

import logging

from gitlabex_bootstrap.enums import EnumBootstrapStage
from gitlabex_bootstrap.errors import (
    ModelBootstrapErrorContext,
    RemoteCallFailedError,
)
from gitlabex_bootstrap.handlers.handler_gitlab_api import (
    PERSONAL_ACCESS_TOKEN_PATHS,
    HandlerGitLabApi,
)
from gitlabex_bootstrap.models import ModelBootstrapConfig
from gitlabex_bootstrap.utils.util_log_redaction import SecretRedactingFilter
from gitlabex_bootstrap.utils.util_retry import RetryExecutor


class ServiceCredentialBroker:
    """Resolves primary and fallback credentials for the applications API."""

    def __init__(
        self,
        config: ModelBootstrapConfig,
        api: HandlerGitLabApi,
        retry: RetryExecutor,
        redactor: SecretRedactingFilter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._api = api
        self._retry = retry
        self._redactor = redactor or SecretRedactingFilter()
        self._logger = logger or logging.getLogger(__name__)
        if config.admin_password is not None:
            self._redactor.register(config.admin_password.get_secret_value())
        if config.admin_token is not None:
            self._redactor.register(config.admin_token.get_secret_value())

    def _error(self, message: str, operation: str) -> RemoteCallFailedError:
        return RemoteCallFailedError(
            message,
            context=ModelBootstrapErrorContext(
                stage=EnumBootstrapStage.CREDENTIALS,
                operation=operation,
                target_name=self._api.base_url,
            ),
        )

    def _ensure_session(self) -> None:
        if self._api.has_session:
            return
        if self._config.admin_password is None:
            raise self._error(
                "No privileged account password configured for a GitLab session",
                "login",
            )
        password = self._config.admin_password.get_secret_value()
        username = self._config.admin_username
        self._logger.info("Logging in to GitLab as %s", username)
        self._retry.execute("login", lambda: self._api.login(username, password))

    def _issued(self, token: str) -> str:
        self._redactor.register(token)
        return token

    def primary_token(self) -> str:
        """Return the token for the primary path.

        Raises:
            RemoteCallFailedError: No token could be obtained.
        """
        if self._config.admin_token is not None:
            self._logger.info("Using the configured admin token")
            return self._config.admin_token.get_secret_value()

        self._ensure_session()
        for path in PERSONAL_ACCESS_TOKEN_PATHS:
            try:
                token = self._retry.execute(
                    "create_personal_access_token",
                    lambda path=path: self._api.create_personal_access_token(path),
                )
            except RemoteCallFailedError as e:
                self._logger.warning("Token endpoint %s failed: %s", path, e)
                continue
            self._logger.info("Personal access token issued via %s", path)
            return self._issued(token)

        raise self._error(
            "No personal access token endpoint issued a token",
            "create_personal_access_token",
        )

    def fallback_token(self) -> str:
        """Return a token issued in the designated admin account's context.

        Raises:
            RemoteCallFailedError: Login, user lookup or token issuance failed.
        """
        self._logger.info(
            "Trying the administrative fallback via account %s",
            self._config.admin_username,
        )
        self._ensure_session()
        users = self._retry.execute("list_users", self._api.list_users)
        admin = next(
            (u for u in users if u.get("username") == self._config.admin_username),
            None,
        )
        if admin is None or admin.get("id") is None:
            raise self._error(
                f"Administrative account {self._config.admin_username!r} not found",
                "list_users",
            )
        user_id = int(str(admin["id"]))
        self._logger.info(
            "Found administrative account %s (id %d)",
            self._config.admin_username,
            user_id,
        )
        token = self._retry.execute(
            "create_user_access_token",
            lambda: self._api.create_user_access_token(user_id),
        )
        self._logger.info("Administrative access token issued")
        return self._issued(token)


__all__ = ["ServiceCredentialBroker"]
