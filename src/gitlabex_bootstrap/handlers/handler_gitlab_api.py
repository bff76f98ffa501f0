# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""GitLab REST API Handler - the remote calls the OAuth bootstrap needs.

Synchronous ``httpx`` client over the GitLab v4 API:

    - ``POST /api/v4/session``: password login, yields a session cookie
    - ``POST /api/v4/personal_access_tokens`` and
      ``POST /api/v4/user/personal_access_tokens``: session-issued tokens
    - ``GET /api/v4/users`` and
      ``POST /api/v4/users/{id}/personal_access_tokens``: admin-context tokens
    - ``GET/POST /api/v4/applications`` and
      ``GET/PUT/DELETE /api/v4/applications/{id}``: OAuth application CRUD

Error Mapping:
    Every response is classified with ``classify_status``:
    - READY: the response is returned
    - NOT_READY (408/425/429/5xx): ``RemoteCallFailedError`` (retryable)
    - FATAL (other 4xx): ``RemoteCallRejectedError`` (not retried)
    Transport failures (connect, read, timeout) raise ``RemoteCallFailedError``.

The handler does not retry by itself; callers wrap each method in a
``RetryExecutor`` under an operation name.

Security:
    Tokens and cookies are never logged. Response bodies are passed through
    ``sanitize_error_string`` before they enter an error message.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Literal

import httpx

from gitlabex_bootstrap.enums import EnumResponseClass
from gitlabex_bootstrap.errors import (
    ModelBootstrapErrorContext,
    RemoteCallFailedError,
    RemoteCallRejectedError,
)
from gitlabex_bootstrap.models import ModelOAuthApplication
from gitlabex_bootstrap.utils.util_error_sanitization import (
    sanitize_error_message,
    sanitize_error_string,
)
from gitlabex_bootstrap.utils.util_status_classification import classify_status

API_PREFIX: str = "/api/v4"
VERSION_PATH: str = f"{API_PREFIX}/version"
SESSION_PATH: str = f"{API_PREFIX}/session"
USERS_PATH: str = f"{API_PREFIX}/users"
APPLICATIONS_PATH: str = f"{API_PREFIX}/applications"

# Tried in order after a session login.
PERSONAL_ACCESS_TOKEN_PATHS: tuple[str, ...] = (
    f"{API_PREFIX}/personal_access_tokens",
    f"{API_PREFIX}/user/personal_access_tokens",
)

ACCESS_TOKEN_NAME: str = "GitLabEx Init Token"
ACCESS_TOKEN_SCOPES: tuple[str, ...] = ("api",)

_PAGE_SIZE: int = 100
_MAX_PAGES: int = 50

AuthMode = Literal["token", "session", "none"]


def _token_expiry_date() -> str:
    """Tokens issued for the bootstrap expire tomorrow (UTC)."""
    return (datetime.now(UTC).date() + timedelta(days=1)).isoformat()


class HandlerGitLabApi:
    """Thin GitLab v4 API client for OAuth application provisioning.

    Attributes:
        _base_url: GitLab base URL (no trailing slash)
        _client: Shared synchronous httpx client
        _token: Token sent as ``PRIVATE-TOKEN`` for authenticated calls
        _session_cookie: Cookie header captured from the session login
        _logger: Run-scoped logger
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.Client,
        logger: logging.Logger | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = http_client
        self._token: str | None = None
        self._session_cookie: str | None = None
        self._logger = logger or logging.getLogger(__name__)

    def __repr__(self) -> str:
        """Mask credentials to prevent accidental exposure in logs/tracebacks."""
        auth = "token" if self._token else "session" if self._session_cookie else "none"
        return f"<{type(self).__name__} base_url={self._base_url} auth={auth}>"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def has_session(self) -> bool:
        return self._session_cookie is not None

    def use_token(self, token: str) -> None:
        """Authenticate subsequent application calls with ``token``."""
        self._token = token

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, auth: AuthMode) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if auth == "token":
            if not self._token:
                raise RemoteCallRejectedError(
                    "No access token available for an authenticated call",
                    context=ModelBootstrapErrorContext(target_name=self._base_url),
                    status_code=401,
                )
            headers["PRIVATE-TOKEN"] = self._token
        elif auth == "session":
            if not self._session_cookie:
                raise RemoteCallRejectedError(
                    "No GitLab session established",
                    context=ModelBootstrapErrorContext(target_name=self._base_url),
                    status_code=401,
                )
            headers["Cookie"] = self._session_cookie
        return headers

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        auth: AuthMode = "token",
        json: dict[str, object] | None = None,
        params: dict[str, object] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """Send one request and map the outcome onto the error taxonomy.

        Returns:
            The response on 2xx, or None on 404 when ``allow_not_found`` is set.
        """
        url = f"{self._base_url}{path}"
        context = ModelBootstrapErrorContext(
            operation=operation,
            target_name=f"{method} {path}",
        )
        headers = self._headers(auth)
        self._logger.debug("%s %s (%s)", method, path, operation)
        try:
            response = self._client.request(
                method, url, headers=headers, json=json, params=params
            )
        except httpx.TimeoutException as e:
            raise RemoteCallFailedError(
                f"Timed out calling GitLab {method} {path}",
                context=context,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteCallFailedError(
                f"Transport error calling GitLab {method} {path}: "
                f"{sanitize_error_message(e)}",
                context=context,
            ) from e

        if allow_not_found and response.status_code == 404:
            return None

        verdict = classify_status(response.status_code)
        if verdict is EnumResponseClass.READY:
            return response

        body = sanitize_error_string(response.text, max_length=200)
        message = f"GitLab {method} {path} returned {response.status_code}: {body}"
        if verdict is EnumResponseClass.NOT_READY:
            raise RemoteCallFailedError(
                message, context=context, status_code=response.status_code
            )
        raise RemoteCallRejectedError(
            message, context=context, status_code=response.status_code
        )

    @staticmethod
    def _json_object(response: httpx.Response, operation: str) -> dict[str, object]:
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteCallFailedError(
                "GitLab returned a non-JSON response",
                context=ModelBootstrapErrorContext(operation=operation),
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise RemoteCallFailedError(
                "GitLab returned an unexpected JSON payload",
                context=ModelBootstrapErrorContext(operation=operation),
                status_code=response.status_code,
            )
        return data

    def _paginate(
        self, path: str, operation: str, *, auth: AuthMode
    ) -> list[dict[str, object]]:
        """Collect every page of a list endpoint, following ``X-Next-Page``."""
        items: list[dict[str, object]] = []
        page = 1
        for _ in range(_MAX_PAGES):
            response = self._request(
                "GET",
                path,
                operation,
                auth=auth,
                params={"per_page": _PAGE_SIZE, "page": page},
            )
            assert response is not None
            try:
                data = response.json()
            except ValueError as e:
                raise RemoteCallFailedError(
                    "GitLab returned a non-JSON list response",
                    context=ModelBootstrapErrorContext(operation=operation),
                    status_code=response.status_code,
                ) from e
            if not isinstance(data, list):
                raise RemoteCallFailedError(
                    "GitLab returned an unexpected list payload",
                    context=ModelBootstrapErrorContext(operation=operation),
                    status_code=response.status_code,
                )
            items.extend(item for item in data if isinstance(item, dict))
            next_page = response.headers.get("X-Next-Page", "").strip()
            if not next_page.isdigit():
                break
            page = int(next_page)
        else:
            # Stopping here would hide records past the last page.
            raise RemoteCallRejectedError(
                f"GitLab listing at {path} exceeds {_MAX_PAGES} pages of {_PAGE_SIZE}",
                context=ModelBootstrapErrorContext(operation=operation, target_name=path),
                max_pages=_MAX_PAGES,
            )
        return items

    # ------------------------------------------------------------------
    # Session and token issuance
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> dict[str, object]:
        """Establish a GitLab session and keep its cookie for session-scoped calls.

        Returns:
            The user payload GitLab answers with (id, username, ...).
        """
        response = self._request(
            "POST",
            SESSION_PATH,
            "login",
            auth="none",
            json={"login": username, "password": password},
        )
        assert response is not None
        user = self._json_object(response, "login")
        cookies = "; ".join(f"{name}={value}" for name, value in response.cookies.items())
        if not cookies:
            raise RemoteCallFailedError(
                "GitLab session login returned no session cookie",
                context=ModelBootstrapErrorContext(operation="login"),
                status_code=response.status_code,
            )
        self._session_cookie = cookies
        self._logger.info(
            "Logged in to GitLab as %s (user id %s)",
            user.get("username", username),
            user.get("id"),
        )
        return user

    def _token_from(self, response: httpx.Response, operation: str) -> str:
        token = self._json_object(response, operation).get("token")
        if not isinstance(token, str) or not token:
            raise RemoteCallFailedError(
                "GitLab token response carried no token",
                context=ModelBootstrapErrorContext(operation=operation),
                status_code=response.status_code,
            )
        return token

    def create_personal_access_token(self, path: str) -> str:
        """Issue a personal access token for the logged-in user via ``path``."""
        response = self._request(
            "POST",
            path,
            "create_personal_access_token",
            auth="session",
            json={
                "name": ACCESS_TOKEN_NAME,
                "scopes": list(ACCESS_TOKEN_SCOPES),
                "expires_at": _token_expiry_date(),
            },
        )
        assert response is not None
        return self._token_from(response, "create_personal_access_token")

    def list_users(self) -> list[dict[str, object]]:
        return self._paginate(USERS_PATH, "list_users", auth="session")

    def create_user_access_token(self, user_id: int) -> str:
        """Issue a token in the administrative context of ``user_id``."""
        response = self._request(
            "POST",
            f"{USERS_PATH}/{user_id}/personal_access_tokens",
            "create_user_access_token",
            auth="session",
            json={
                "name": ACCESS_TOKEN_NAME,
                "scopes": list(ACCESS_TOKEN_SCOPES),
                "expires_at": _token_expiry_date(),
            },
        )
        assert response is not None
        return self._token_from(response, "create_user_access_token")

    # ------------------------------------------------------------------
    # OAuth applications
    # ------------------------------------------------------------------

    def list_applications(self) -> list[ModelOAuthApplication]:
        return [
            ModelOAuthApplication.from_api(item)
            for item in self._paginate(
                APPLICATIONS_PATH, "list_applications", auth="token"
            )
        ]

    def get_application(self, record_id: int) -> ModelOAuthApplication | None:
        """Fetch one application by record id; None when GitLab answers 404."""
        response = self._request(
            "GET",
            f"{APPLICATIONS_PATH}/{record_id}",
            "get_application",
            allow_not_found=True,
        )
        if response is None:
            return None
        return ModelOAuthApplication.from_api(
            self._json_object(response, "get_application")
        )

    def create_application(
        self,
        name: str,
        redirect_uri: str,
        scopes: str,
        secret: str,
        confidential: bool = True,
    ) -> ModelOAuthApplication:
        response = self._request(
            "POST",
            APPLICATIONS_PATH,
            "create_application",
            json={
                "name": name,
                "redirect_uri": redirect_uri,
                "scopes": scopes,
                "confidential": confidential,
                "secret": secret,
            },
        )
        assert response is not None
        return ModelOAuthApplication.from_api(
            self._json_object(response, "create_application")
        )

    def update_application(
        self, record_id: int, fields: dict[str, object], operation: str
    ) -> ModelOAuthApplication:
        response = self._request(
            "PUT",
            f"{APPLICATIONS_PATH}/{record_id}",
            operation,
            json=fields,
        )
        assert response is not None
        return ModelOAuthApplication.from_api(self._json_object(response, operation))

    def delete_application(self, record_id: int) -> bool:
        """Delete an application. Returns False when it was already gone."""
        response = self._request(
            "DELETE",
            f"{APPLICATIONS_PATH}/{record_id}",
            "delete_application",
            allow_not_found=True,
        )
        return response is not None


__all__ = [
    "ACCESS_TOKEN_NAME",
    "APPLICATIONS_PATH",
    "PERSONAL_ACCESS_TOKEN_PATHS",
    "SESSION_PATH",
    "USERS_PATH",
    "VERSION_PATH",
    "HandlerGitLabApi",
]
