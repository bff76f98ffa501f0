"""Pytest configuration and shared fixtures for gitlabex_bootstrap tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest
from pydantic import SecretStr

from gitlabex_bootstrap.models import ModelBootstrapConfig
from tests.helpers.fake_gitlab import (
    APP_NAME,
    EXTERNAL_URL,
    GITLAB_URL,
    REDIRECT_URI,
    ROOT_PASSWORD,
    FakeGitLab,
)

DEFAULT_CONFIG_VALUES: dict[str, str] = {
    "GITLAB_INTERNAL_URL": GITLAB_URL,
    "GITLAB_EXTERNAL_URL": EXTERNAL_URL,
    "GITLAB_OAUTH_REDIRECT_URI": REDIRECT_URI,
    "GITLAB_OAUTH_APP_NAME": APP_NAME,
}


@pytest.fixture
def fake_gitlab() -> FakeGitLab:
    """Fresh in-memory GitLab for each test."""
    return FakeGitLab()


@pytest.fixture
def gitlab_client(fake_gitlab: FakeGitLab) -> Iterator[httpx.Client]:
    """httpx client whose transport is the fake GitLab."""
    client = fake_gitlab.client()
    yield client
    client.close()


@pytest.fixture
def sleeps() -> list[float]:
    """Recorder used as an injected sleep function (``sleeps.append``)."""
    return []


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a KEY=VALUE config file.

    Keyword arguments override the defaults; passing None drops the key.
    """

    def _write(filename: str = "oauth.env", **values: str | None) -> Path:
        merged: dict[str, str | None] = {**DEFAULT_CONFIG_VALUES, **values}
        lines = ["# GitLabEx OAuth bootstrap"]
        lines.extend(
            f"{key}={value}" for key, value in merged.items() if value is not None
        )
        path = tmp_path / filename
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config() -> Callable[..., ModelBootstrapConfig]:
    """Factory for a validated config pointing at the fake GitLab."""

    def _make(**overrides: object) -> ModelBootstrapConfig:
        fields: dict[str, object] = {
            "internal_url": GITLAB_URL,
            "external_url": EXTERNAL_URL,
            "redirect_uri": REDIRECT_URI,
            "app_name": APP_NAME,
            "admin_password": SecretStr(ROOT_PASSWORD),
        }
        fields.update(overrides)
        return ModelBootstrapConfig(**fields)

    return _make
