# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Redirect URI aliasing for local development hosts.

Browsers in local setups reach the platform as either ``localhost`` or
``127.0.0.1``. GitLab compares redirect URIs literally, so both forms are
registered on the same application. GitLab stores every accepted URI in
one ``redirect_uri`` string, separated by newlines.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

LOOPBACK_ALIASES: dict[str, str] = {
    "localhost": "127.0.0.1",
    "127.0.0.1": "localhost",
}

REDIRECT_URI_SEPARATOR: str = "\n"


def expand_redirect_aliases(redirect_uri: str) -> tuple[str, ...]:
    """Return the redirect URI followed by its loopback alias, if it has one.

    Only the host part is swapped; scheme, userinfo, port, path, query and
    fragment are preserved.

    Example:
        >>> expand_redirect_aliases("http://localhost:8000/cb")
        ('http://localhost:8000/cb', 'http://127.0.0.1:8000/cb')
        >>> expand_redirect_aliases("https://gitlabex.example.com/cb")
        ('https://gitlabex.example.com/cb',)
    """
    parts = urlsplit(redirect_uri)
    alias_host = LOOPBACK_ALIASES.get(parts.hostname or "")
    if alias_host is None:
        return (redirect_uri,)

    userinfo, at, _ = parts.netloc.rpartition("@")
    port = f":{parts.port}" if parts.port is not None else ""
    alias_netloc = f"{userinfo}{at}{alias_host}{port}"
    alias = urlunsplit(parts._replace(netloc=alias_netloc))
    return (redirect_uri, alias)


def join_redirect_uris(uris: tuple[str, ...]) -> str:
    """Join URIs into GitLab's single-string ``redirect_uri`` field, dropping duplicates."""
    return REDIRECT_URI_SEPARATOR.join(dict.fromkeys(uris))


def split_redirect_uris(value: str) -> tuple[str, ...]:
    return tuple(value.split())


__all__: list[str] = [
    "LOOPBACK_ALIASES",
    "REDIRECT_URI_SEPARATOR",
    "expand_redirect_aliases",
    "join_redirect_uris",
    "split_redirect_uris",
]
