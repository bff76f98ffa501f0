# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""OAuth Application Model.

Local representation of a GitLab OAuth application record. The plaintext
secret is only populated from create and rotate responses; GitLab stores
the secret hashed and never returns it on later lookups.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from gitlabex_bootstrap.utils.util_redirect_uri import split_redirect_uris


class ModelOAuthApplication(BaseModel):
    """GitLab OAuth application record.

    Attributes:
        record_id: Numeric resource id used in ``/applications/{id}`` paths
        client_id: OAuth client id (GitLab ``application_id``)
        name: Display name, the natural lookup key
        redirect_uris: Accepted callback URIs
        scopes: Granted scopes
        confidential: Whether the client is confidential
        secret: Plaintext secret, only known at create/rotate time
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    record_id: int
    client_id: str = Field(min_length=1)
    name: str
    redirect_uris: tuple[str, ...] = ()
    scopes: tuple[str, ...] = ()
    confidential: bool = True
    secret: SecretStr | None = None

    @classmethod
    def from_api(cls, data: dict[str, object]) -> ModelOAuthApplication:
        """Build from a GitLab ``/api/v4/applications`` payload.

        GitLab names the fields ``id``, ``application_id``,
        ``application_name`` and ``callback_url``; the callback field holds
        every redirect URI separated by newlines.
        """
        callback = str(data.get("callback_url") or data.get("redirect_uri") or "")
        raw_scopes = data.get("scopes") or ""
        if isinstance(raw_scopes, (list, tuple)):
            scopes = tuple(str(s) for s in raw_scopes)
        else:
            scopes = tuple(str(raw_scopes).split())
        secret = data.get("secret")
        return cls(
            record_id=int(str(data["id"])),
            client_id=str(data["application_id"]),
            name=str(data.get("application_name") or data.get("name") or ""),
            redirect_uris=split_redirect_uris(callback),
            scopes=scopes,
            confidential=bool(data.get("confidential", True)),
            secret=SecretStr(str(secret)) if secret else None,
        )


__all__ = ["ModelOAuthApplication"]
