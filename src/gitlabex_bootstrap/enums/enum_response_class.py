# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HTTP Response Classification Enumeration.

Defines the verdicts produced by ``classify_status`` and consumed
identically by the readiness probe and the GitLab API handler.
"""

from enum import Enum


class EnumResponseClass(str, Enum):
    """Classification of a remote HTTP status code.

    Attributes:
        READY: The call succeeded (or, for liveness probing, the API layer
            answered with an auth challenge).
        NOT_READY: A transient condition; the call may be retried.
        FATAL: Retrying cannot change the outcome.
    """

    READY = "ready"
    NOT_READY = "not_ready"
    FATAL = "fatal"


__all__ = ["EnumResponseClass"]
