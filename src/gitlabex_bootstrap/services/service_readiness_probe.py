# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""GitLab Readiness Probe Service.

GitLab accepts TCP connections long before its API layer answers, so a
single connect check gives false negatives. This probe sleeps through
the boot phase, then polls ``GET /api/v4/version`` unauthenticated with a
progressive but capped back-off until the API answers.

Verdicts (via ``classify_status`` with ``auth_proves_liveness``):
    - 2xx with a parseable ``version`` field: ready
    - 401: ready (the API is up and enforces auth)
    - anything else, or a transport error: not ready, keep polling

Back-off:
    Failed attempt ``n`` (1-based) waits ``min(base + n * step, cap)``
    seconds. Defaults: 10 + 2n, capped at 30.

The ``check`` CLI command reuses ``check_once`` to probe the health and
readiness endpoints once each.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import httpx

from gitlabex_bootstrap.enums import EnumResponseClass
from gitlabex_bootstrap.handlers.handler_gitlab_api import VERSION_PATH
from gitlabex_bootstrap.models import ModelEndpointCheck
from gitlabex_bootstrap.utils.util_error_sanitization import (
    sanitize_error_message,
    sanitize_error_string,
)
from gitlabex_bootstrap.utils.util_status_classification import classify_status

HEALTH_PATH: str = "/-/health"
READINESS_PATH: str = "/-/readiness"

DEFAULT_WARMUP_SECONDS: float = 60.0
DEFAULT_BACKOFF_BASE_SECONDS: float = 10.0
DEFAULT_BACKOFF_STEP_SECONDS: float = 2.0
DEFAULT_BACKOFF_CAP_SECONDS: float = 30.0
DEFAULT_MAX_ATTEMPTS: int = 60


class ServiceReadinessProbe:
    """Bounded readiness polling for the GitLab API.

    Attributes:
        _base_url: GitLab base URL (no trailing slash)
        _client: Shared synchronous httpx client
        _warmup: Seconds slept before the first check
        _backoff_base: Base of the back-off formula
        _backoff_step: Per-attempt increment
        _backoff_cap: Upper bound on a single wait
        _sleep: Blocking sleep function, injectable for tests
        _logger: Run-scoped logger
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.Client,
        warmup_seconds: float = DEFAULT_WARMUP_SECONDS,
        backoff_base: float = DEFAULT_BACKOFF_BASE_SECONDS,
        backoff_step: float = DEFAULT_BACKOFF_STEP_SECONDS,
        backoff_cap: float = DEFAULT_BACKOFF_CAP_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = http_client
        self._warmup = warmup_seconds
        self._backoff_base = backoff_base
        self._backoff_step = backoff_step
        self._backoff_cap = backoff_cap
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    def backoff_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt ``attempt`` (1-based)."""
        return min(self._backoff_base + attempt * self._backoff_step, self._backoff_cap)

    def check_once(self, path: str = VERSION_PATH) -> ModelEndpointCheck:
        """Probe ``path`` once without credentials.

        The version endpoint additionally needs a parseable ``version``
        field in its 2xx body to count as ready.
        """
        url = f"{self._base_url}{path}"
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            return ModelEndpointCheck(
                path=path,
                verdict=EnumResponseClass.NOT_READY,
                detail=sanitize_error_message(e, max_length=120),
            )

        status = response.status_code
        verdict = classify_status(status, auth_proves_liveness=True)
        if verdict is not EnumResponseClass.READY:
            return ModelEndpointCheck(
                path=path,
                status_code=status,
                # A FATAL answer from an unauthenticated probe still only
                # means "not ready yet" to the polling loop.
                verdict=EnumResponseClass.NOT_READY,
                detail=sanitize_error_string(response.text, max_length=120),
            )
        if status == 401:
            return ModelEndpointCheck(
                path=path,
                status_code=status,
                verdict=EnumResponseClass.READY,
                detail="API requires authentication, endpoint is available",
            )
        if path != VERSION_PATH:
            return ModelEndpointCheck(
                path=path,
                status_code=status,
                verdict=EnumResponseClass.READY,
                detail=sanitize_error_string(response.text.strip(), max_length=120),
            )

        try:
            version = response.json().get("version")
        except (ValueError, AttributeError):
            version = None
        if not version:
            return ModelEndpointCheck(
                path=path,
                status_code=status,
                verdict=EnumResponseClass.NOT_READY,
                detail="version payload not parseable",
            )
        return ModelEndpointCheck(
            path=path,
            status_code=status,
            verdict=EnumResponseClass.READY,
            detail=f"GitLab {version}",
        )

    def check_api_version(self) -> bool:
        result = self.check_once(VERSION_PATH)
        if result.verdict is EnumResponseClass.READY:
            self._logger.info("GitLab API answered: %s", result.detail)
            return True
        self._logger.warning(
            "GitLab API version check failed: status=%s %s",
            result.status_code if result.status_code is not None else "n/a",
            result.detail,
        )
        return False

    def wait_until_ready(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> bool:
        """Block until the GitLab API answers or ``max_attempts`` checks fail.

        Returns:
            True once a check succeeds, False when the budget is exhausted.
        """
        self._logger.info(
            "Waiting for GitLab at %s (warm-up %.0fs, up to %d attempts)",
            self._base_url,
            self._warmup,
            max_attempts,
        )
        if self._warmup > 0:
            self._sleep(self._warmup)

        for attempt in range(1, max_attempts + 1):
            if self.check_api_version():
                self._logger.info("GitLab is ready after %d attempt(s)", attempt)
                return True
            if attempt == max_attempts:
                break
            wait = self.backoff_for(attempt)
            self._logger.warning(
                "Attempt %d/%d: GitLab not ready, retrying in %.0fs",
                attempt,
                max_attempts,
                wait,
            )
            self._sleep(wait)

        self._logger.error(
            "GitLab did not become ready within %d attempts", max_attempts
        )
        return False


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_WARMUP_SECONDS",
    "HEALTH_PATH",
    "READINESS_PATH",
    "ServiceReadinessProbe",
]
