# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bounded, fixed-delay retry for remote operations.

Every remote call the provisioner makes goes through ``RetryExecutor``
under its own operation name, so the log trail shows which call was
retried and which one finally failed.

Failure Classification:
    - ``RemoteCallRejectedError``: fatal, re-raised immediately
    - any other ``Exception``: retryable until the budget is spent

On exhaustion the last failure surfaces as ``RemoteCallFailedError``
chained to it, carrying the operation name, attempt count and, when
known, the last HTTP status.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from gitlabex_bootstrap.errors import (
    BootstrapError,
    ModelBootstrapErrorContext,
    RemoteCallFailedError,
    RemoteCallRejectedError,
)
from gitlabex_bootstrap.utils.util_error_sanitization import sanitize_error_message

T = TypeVar("T")

_DEFAULT_MAX_RETRIES: int = 3
_DEFAULT_DELAY_SECONDS: float = 5.0


def _describe_failure(error: Exception) -> str:
    """Render a failure for logs. Bootstrap errors are sanitized when raised."""
    if isinstance(error, BootstrapError):
        return f"{type(error).__name__}: {error}"
    return sanitize_error_message(error)


class RetryExecutor:
    """Runs callables with bounded retries and a fixed delay between attempts.

    Attributes:
        _max_retries: Total attempts per operation (not retries after the first)
        _delay: Seconds slept between attempts
        _sleep: Blocking sleep function, injectable for tests
        _logger: Run-scoped logger
    """

    def __init__(
        self,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        delay: float = _DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._max_retries = max_retries
        self._delay = delay
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def execute(
        self,
        operation_name: str,
        fn: Callable[[], T],
        max_retries: int | None = None,
        delay: float | None = None,
    ) -> T:
        """Invoke ``fn`` until it succeeds or the attempt budget is spent.

        Args:
            operation_name: Name used in log lines and error context.
            fn: Zero-argument callable performing the remote operation.
            max_retries: Per-call override of the total attempt count.
            delay: Per-call override of the fixed delay.

        Returns:
            Whatever ``fn`` returns on its first successful attempt.

        Raises:
            RemoteCallRejectedError: Immediately, when ``fn`` raises one.
            RemoteCallFailedError: After ``max_retries`` failed attempts.
        """
        attempts_allowed = self._max_retries if max_retries is None else max_retries
        wait = self._delay if delay is None else delay
        attempt = 0
        while True:
            attempt += 1
            try:
                return fn()
            except RemoteCallRejectedError:
                self._logger.error(
                    "%s - rejected on attempt %d/%d, not retrying",
                    operation_name,
                    attempt,
                    attempts_allowed,
                )
                raise
            except Exception as e:
                safe = _describe_failure(e)
                if attempt < attempts_allowed:
                    self._logger.warning(
                        "%s - attempt %d/%d failed: %s; retrying in %.1fs",
                        operation_name,
                        attempt,
                        attempts_allowed,
                        safe,
                        wait,
                    )
                    self._sleep(wait)
                    continue
                self._logger.error(
                    "%s - failed after %d attempts: %s",
                    operation_name,
                    attempt,
                    safe,
                )
                context = ModelBootstrapErrorContext(operation=operation_name)
                raise RemoteCallFailedError(
                    f"{operation_name} failed after {attempt} attempts",
                    context=context,
                    status_code=getattr(e, "status_code", None),
                    attempts=attempt,
                    last_error=safe,
                ) from e


__all__: list[str] = ["RetryExecutor"]
