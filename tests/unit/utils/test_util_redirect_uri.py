# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for loopback redirect URI aliasing."""

from __future__ import annotations

import pytest

from gitlabex_bootstrap.utils.util_redirect_uri import (
    expand_redirect_aliases,
    join_redirect_uris,
    split_redirect_uris,
)

pytestmark = [pytest.mark.unit]


class TestExpandRedirectAliases:
    """Tests for expand_redirect_aliases."""

    def test_localhost_gains_ip_alias(self) -> None:
        uri = "http://localhost:4000/auth/gitlab/callback"
        assert expand_redirect_aliases(uri) == (
            "http://localhost:4000/auth/gitlab/callback",
            "http://127.0.0.1:4000/auth/gitlab/callback",
        )

    def test_ip_gains_localhost_alias(self) -> None:
        assert expand_redirect_aliases("http://127.0.0.1:4000/cb") == (
            "http://127.0.0.1:4000/cb",
            "http://localhost:4000/cb",
        )

    def test_original_is_always_first(self) -> None:
        uris = expand_redirect_aliases("http://localhost/cb")
        assert uris[0] == "http://localhost/cb"
        assert uris[1] == "http://127.0.0.1/cb"

    def test_public_host_has_no_alias(self) -> None:
        uri = "https://gitlabex.example.com/auth/gitlab/callback"
        assert expand_redirect_aliases(uri) == (uri,)

    def test_only_host_is_swapped(self) -> None:
        uri = "https://user@localhost:8443/cb/path?state=abc#frag"
        assert expand_redirect_aliases(uri)[1] == (
            "https://user@127.0.0.1:8443/cb/path?state=abc#frag"
        )

    def test_hostname_containing_localhost_is_not_aliased(self) -> None:
        uri = "http://localhost.example.com/cb"
        assert expand_redirect_aliases(uri) == (uri,)


class TestJoinAndSplit:
    """Tests for the newline-joined redirect_uri field."""

    def test_join_uses_newlines(self) -> None:
        assert join_redirect_uris(("a", "b")) == "a\nb"

    def test_join_drops_duplicates_preserving_order(self) -> None:
        assert join_redirect_uris(("b", "a", "b")) == "b\na"

    def test_split_accepts_any_whitespace(self) -> None:
        assert split_redirect_uris("a\nb c\r\n") == ("a", "b", "c")
