# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Run-scoped log redaction for generated secrets.

``SecretRedactingFilter`` is attached to the run logger that the pipeline
injects into every component. Each secret is registered the moment it is
generated or received, and every later record on that logger has the
value masked, whether it appears in the format string or the arguments.
"""

from __future__ import annotations

import logging

REDACTION_MASK: str = "***"


class SecretRedactingFilter(logging.Filter):
    """Logging filter that masks registered secret values.

    Example:
        >>> log = logging.getLogger("demo")
        >>> redactor = SecretRedactingFilter()
        >>> log.addFilter(redactor)
        >>> redactor.register("s3cr3t-value")
    """

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._secrets: set[str] = set()

    def register(self, secret: str | None) -> None:
        if secret:
            self._secrets.add(secret)

    def redact(self, text: str) -> str:
        # Longest first so a secret containing another is masked whole.
        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, REDACTION_MASK)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def build_run_logger(
    name: str = "gitlabex_bootstrap.run",
) -> tuple[logging.Logger, SecretRedactingFilter]:
    """Create the logger for one bootstrap run together with its redactor.

    Any redactor left over from a previous run on the same logger name is
    replaced, so secrets never accumulate across runs in one process.
    """
    run_logger = logging.getLogger(name)
    for existing in list(run_logger.filters):
        if isinstance(existing, SecretRedactingFilter):
            run_logger.removeFilter(existing)
    redactor = SecretRedactingFilter()
    run_logger.addFilter(redactor)
    return run_logger, redactor


__all__: list[str] = [
    "REDACTION_MASK",
    "SecretRedactingFilter",
    "build_run_logger",
]
