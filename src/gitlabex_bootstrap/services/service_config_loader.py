# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bootstrap config loading.

Reads the line-oriented KEY=VALUE file mounted into the bootstrap
container and turns it into an immutable ``ModelBootstrapConfig``.
Validation happens once, here; nothing downstream re-parses flags.

No network access. The only side effect is reading the file.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import SecretStr, ValidationError

from gitlabex_bootstrap.enums import EnumBootstrapStage
from gitlabex_bootstrap.errors import (
    ConfigInvalidError,
    ConfigMissingError,
    ModelBootstrapErrorContext,
)
from gitlabex_bootstrap.models import (
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SCOPES,
    ModelBootstrapConfig,
)
from gitlabex_bootstrap.utils.util_env_file import parse_env_text

logger = logging.getLogger(__name__)

KEY_INTERNAL_URL = "GITLAB_INTERNAL_URL"
KEY_EXTERNAL_URL = "GITLAB_EXTERNAL_URL"
KEY_REDIRECT_URI = "GITLAB_OAUTH_REDIRECT_URI"
KEY_APP_NAME = "GITLAB_OAUTH_APP_NAME"
KEY_SCOPES = "GITLAB_OAUTH_SCOPES"
KEY_FORCE_RECREATE = "GITLAB_OAUTH_FORCE_RECREATE"
KEY_ADMIN_USERNAME = "GITLAB_ADMIN_USERNAME"
KEY_ROOT_PASSWORD = "GITLAB_ROOT_PASSWORD"  # noqa: S105
KEY_ADMIN_TOKEN = "GITLAB_ADMIN_TOKEN"  # noqa: S105
KEY_TLS_VERIFY = "GITLAB_TLS_VERIFY"
KEY_HTTP_TIMEOUT = "GITLAB_HTTP_TIMEOUT"

REQUIRED_KEYS: tuple[str, ...] = (
    KEY_INTERNAL_URL,
    KEY_EXTERNAL_URL,
    KEY_REDIRECT_URI,
    KEY_APP_NAME,
)

# Keys whose values may be supplied by the process environment.
CREDENTIAL_KEYS: tuple[str, ...] = (KEY_ROOT_PASSWORD, KEY_ADMIN_TOKEN)


def parse_flag(raw: str | None, *, default: bool) -> bool:
    """Parse a boolean config string.

    ``"true"`` (any case, surrounding whitespace ignored) is True and
    ``"false"`` is False; an absent or empty value gives ``default``.
    Any other value is False, matching the shell scripts this config is
    shared with.
    """
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() == "true"


def _optional(values: Mapping[str, str], key: str) -> str | None:
    value = values.get(key, "").strip()
    return value or None


def _context(operation: str, path: Path) -> ModelBootstrapErrorContext:
    return ModelBootstrapErrorContext(
        stage=EnumBootstrapStage.CONFIG,
        operation=operation,
        target_name=str(path),
    )


def load_bootstrap_config(
    path: Path | str,
    overrides: Mapping[str, str] | None = None,
) -> ModelBootstrapConfig:
    """Load and validate the bootstrap config file.

    Args:
        path: Path to the KEY=VALUE file.
        overrides: Values used for keys the file leaves absent or empty
            (the CLI passes environment-provided credentials here).

    Returns:
        The validated, immutable config.

    Raises:
        ConfigMissingError: The file does not exist.
        ConfigInvalidError: A required key is absent or empty, or a value
            fails validation.
    """
    path = Path(path)
    if not path.is_file():
        logger.error("Config file not found: %s", path)
        raise ConfigMissingError(
            f"Config file not found: {path}",
            context=_context("load_config", path),
        )

    values = parse_env_text(path.read_text(encoding="utf-8"))
    for key, value in (overrides or {}).items():
        if value and not values.get(key, "").strip():
            values[key] = value

    missing = [key for key in REQUIRED_KEYS if not values.get(key, "").strip()]
    if missing:
        logger.error("Missing required config keys: %s", ", ".join(missing))
        raise ConfigInvalidError(
            f"Missing required config keys: {', '.join(missing)}",
            context=_context("validate_config", path),
            missing_keys=",".join(missing),
        )

    scopes_raw = _optional(values, KEY_SCOPES)
    timeout_raw = _optional(values, KEY_HTTP_TIMEOUT)
    password = _optional(values, KEY_ROOT_PASSWORD)
    token = _optional(values, KEY_ADMIN_TOKEN)

    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_HTTP_TIMEOUT_SECONDS
    except ValueError as e:
        raise ConfigInvalidError(
            f"{KEY_HTTP_TIMEOUT} must be a number, got {timeout_raw!r}",
            context=_context("validate_config", path),
        ) from e

    try:
        config = ModelBootstrapConfig(
            internal_url=values[KEY_INTERNAL_URL].strip(),
            external_url=values[KEY_EXTERNAL_URL].strip(),
            redirect_uri=values[KEY_REDIRECT_URI].strip(),
            app_name=values[KEY_APP_NAME].strip(),
            scopes=tuple(scopes_raw.split()) if scopes_raw else DEFAULT_SCOPES,
            force_recreate=parse_flag(values.get(KEY_FORCE_RECREATE), default=False),
            admin_username=_optional(values, KEY_ADMIN_USERNAME)
            or DEFAULT_ADMIN_USERNAME,
            admin_password=SecretStr(password) if password else None,
            admin_token=SecretStr(token) if token else None,
            tls_verify=parse_flag(values.get(KEY_TLS_VERIFY), default=True),
            http_timeout_seconds=timeout,
        )
    except ValidationError as e:
        # include_input=False keeps credential values out of the message.
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors(include_input=False, include_url=False)
        )
        raise ConfigInvalidError(
            f"Invalid bootstrap config: {problems}",
            context=_context("validate_config", path),
        ) from e

    logger.info(
        "Loaded bootstrap config from %s (app=%r, force_recreate=%s)",
        path,
        config.app_name,
        config.force_recreate,
    )
    return config


__all__ = [
    "CREDENTIAL_KEYS",
    "KEY_ADMIN_TOKEN",
    "KEY_ADMIN_USERNAME",
    "KEY_APP_NAME",
    "KEY_EXTERNAL_URL",
    "KEY_FORCE_RECREATE",
    "KEY_HTTP_TIMEOUT",
    "KEY_INTERNAL_URL",
    "KEY_REDIRECT_URI",
    "KEY_ROOT_PASSWORD",
    "KEY_SCOPES",
    "KEY_TLS_VERIFY",
    "REQUIRED_KEYS",
    "load_bootstrap_config",
    "parse_flag",
]
