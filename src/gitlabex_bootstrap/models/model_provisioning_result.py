# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Provisioning Result Model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from gitlabex_bootstrap.enums import EnumProvisioningAction


class ModelProvisioningResult(BaseModel):
    """Outcome of a provisioning run, ready for publication.

    The secret is captured exactly once, at create or rotate time, and is
    held as ``SecretStr`` so that it only ever leaves the process through
    the artifact file.

    Attributes:
        client_id: OAuth client id
        client_secret: Plaintext secret (masked in repr)
        redirect_uri: The configured redirect URI
        redirect_uris: Every URI registered, aliases included
        external_url: GitLab URL as seen by browsers
        internal_url: GitLab URL as seen inside the deployment
        scopes: Granted scopes
        record_id: Numeric id of the provisioned record
        action: What the provisioner did
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    client_id: str = Field(min_length=1)
    client_secret: SecretStr
    redirect_uri: str
    redirect_uris: tuple[str, ...] = ()
    external_url: str
    internal_url: str
    scopes: tuple[str, ...]
    record_id: int
    action: EnumProvisioningAction

    @property
    def scopes_text(self) -> str:
        return " ".join(self.scopes)


__all__ = ["ModelProvisioningResult"]
