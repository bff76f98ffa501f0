# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HTTP status classification shared by the readiness probe and API handler.

A single mapping from status code to ``EnumResponseClass`` keeps the probe
and the provisioner in agreement about what counts as transient.

Mapping:
    - 2xx: READY
    - 401: READY when probing liveness (the API layer answered and enforces
      auth), otherwise FATAL
    - 408, 425, 429, 5xx: NOT_READY (transient, retry)
    - anything else: FATAL
"""

from __future__ import annotations

from gitlabex_bootstrap.enums import EnumResponseClass

_TRANSIENT_CLIENT_STATUSES: frozenset[int] = frozenset({408, 425, 429})


def classify_status(
    status_code: int,
    *,
    auth_proves_liveness: bool = False,
) -> EnumResponseClass:
    """Classify an HTTP status code.

    Args:
        status_code: The HTTP status code received.
        auth_proves_liveness: Treat 401 as READY. Only the readiness probe
            sets this; for authenticated calls a 401 is a rejection.

    Returns:
        The response class for the status.

    Example:
        >>> classify_status(200)
        <EnumResponseClass.READY: 'ready'>
        >>> classify_status(401, auth_proves_liveness=True)
        <EnumResponseClass.READY: 'ready'>
        >>> classify_status(401)
        <EnumResponseClass.FATAL: 'fatal'>
        >>> classify_status(502)
        <EnumResponseClass.NOT_READY: 'not_ready'>
    """
    if 200 <= status_code < 300:
        return EnumResponseClass.READY
    if status_code == 401 and auth_proves_liveness:
        return EnumResponseClass.READY
    if status_code in _TRANSIENT_CLIENT_STATUSES or status_code >= 500:
        return EnumResponseClass.NOT_READY
    return EnumResponseClass.FATAL


__all__: list[str] = ["classify_status"]
