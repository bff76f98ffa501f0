# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for HTTP status classification."""

from __future__ import annotations

import pytest

from gitlabex_bootstrap.enums import EnumResponseClass
from gitlabex_bootstrap.utils.util_status_classification import classify_status

pytestmark = [pytest.mark.unit]


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_success_is_ready(status: int) -> None:
    assert classify_status(status) is EnumResponseClass.READY


@pytest.mark.parametrize("status", [408, 425, 429, 500, 502, 503, 504])
def test_transient_is_not_ready(status: int) -> None:
    assert classify_status(status) is EnumResponseClass.NOT_READY


@pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422])
def test_other_client_errors_are_fatal(status: int) -> None:
    assert classify_status(status) is EnumResponseClass.FATAL


def test_unauthorized_proves_liveness_only_when_asked() -> None:
    assert classify_status(401, auth_proves_liveness=True) is EnumResponseClass.READY
    assert classify_status(401) is EnumResponseClass.FATAL


def test_liveness_flag_does_not_change_other_statuses() -> None:
    assert classify_status(403, auth_proves_liveness=True) is EnumResponseClass.FATAL
    verdict = classify_status(502, auth_proves_liveness=True)
    assert verdict is EnumResponseClass.NOT_READY
