# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bootstrap Configuration Model.

Immutable, validated view of the KEY=VALUE config file. Built once by
``load_bootstrap_config`` and read-only for the rest of the run.

Credential fields are wrapped in ``SecretStr`` so that the model's repr,
validation errors and accidental log formatting never expose them.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

DEFAULT_SCOPES: tuple[str, ...] = ("api", "read_user", "email")
DEFAULT_ADMIN_USERNAME: str = "root"
DEFAULT_HTTP_TIMEOUT_SECONDS: float = 30.0


class ModelBootstrapConfig(BaseModel):
    """Validated bootstrap configuration.

    Attributes:
        internal_url: GitLab base URL reachable from inside the deployment
        external_url: GitLab base URL as seen by browsers
        redirect_uri: OAuth callback URI registered on the application
        app_name: Display name, the natural key used for lookup
        scopes: OAuth scopes granted to the application
        force_recreate: Destroy and recreate an existing application
        admin_username: Designated administrative account for the fallback path
        admin_password: Privileged account password (session login)
        admin_token: Pre-issued admin personal access token
        tls_verify: Verify TLS certificates for https GitLab URLs
        http_timeout_seconds: Per-request timeout
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    internal_url: str = Field(min_length=1)
    external_url: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    app_name: str = Field(min_length=1)
    scopes: tuple[str, ...] = Field(default=DEFAULT_SCOPES, min_length=1)
    force_recreate: bool = False
    admin_username: str = Field(default=DEFAULT_ADMIN_USERNAME, min_length=1)
    admin_password: SecretStr | None = None
    admin_token: SecretStr | None = None
    tls_verify: bool = True
    http_timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)

    @field_validator("internal_url", "external_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"must start with 'http://' or 'https://', got: {v!r}")
        return v.rstrip("/")

    @field_validator("redirect_uri")
    @classmethod
    def validate_redirect_uri(cls, v: str) -> str:
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"must be an absolute http(s) URI with a host, got: {v!r}")
        try:
            parts.port  # noqa: B018
        except ValueError as e:
            raise ValueError(f"has an invalid port: {v!r}") from e
        if any(c.isspace() for c in v):
            raise ValueError("must not contain whitespace")
        return v

    @property
    def scopes_text(self) -> str:
        """Scopes in the space-separated form GitLab expects."""
        return " ".join(self.scopes)

    @property
    def has_credentials(self) -> bool:
        return self.admin_token is not None or self.admin_password is not None


__all__ = [
    "DEFAULT_ADMIN_USERNAME",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_SCOPES",
    "ModelBootstrapConfig",
]
