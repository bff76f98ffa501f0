# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for KEY=VALUE env file parsing and rendering."""

from __future__ import annotations

import pytest

from gitlabex_bootstrap.utils.util_env_file import (
    parse_env_text,
    render_env_lines,
    strip_surrounding_quotes,
)

pytestmark = [pytest.mark.unit]


class TestStripSurroundingQuotes:
    """Tests for strip_surrounding_quotes."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('"api read_user"', "api read_user"),
            ("'single'", "single"),
            ('"mismatched\'', '"mismatched\''),
            ('"', '"'),
            ("plain", "plain"),
            ("'\"nested\"'", '"nested"'),
        ],
    )
    def test_strips_one_layer(self, raw: str, expected: str) -> None:
        assert strip_surrounding_quotes(raw) == expected


class TestParseEnvText:
    """Tests for parse_env_text."""

    def test_skips_blank_and_comment_lines(self) -> None:
        text = "\n# comment\n   \nKEY=value\n  # indented comment\n"
        assert parse_env_text(text) == {"KEY": "value"}

    def test_splits_on_first_equals_only(self) -> None:
        values = parse_env_text("URL=http://gitlab/?a=b&c=d\n")
        assert values["URL"] == "http://gitlab/?a=b&c=d"

    def test_accepts_export_prefix(self) -> None:
        assert parse_env_text("export GITLAB_INTERNAL_URL=http://gitlab\n") == {
            "GITLAB_INTERNAL_URL": "http://gitlab"
        }

    def test_strips_quotes_and_whitespace(self) -> None:
        values = parse_env_text('  SCOPES = "api read_user email"  \n')
        assert values == {"SCOPES": "api read_user email"}

    def test_ignores_lines_without_equals(self) -> None:
        assert parse_env_text("NOT_AN_ASSIGNMENT\nA=1\n") == {"A": "1"}

    def test_later_duplicates_win(self) -> None:
        assert parse_env_text("A=1\nA=2\n") == {"A": "2"}

    def test_empty_value_is_kept_as_empty_string(self) -> None:
        assert parse_env_text("A=\n") == {"A": ""}


class TestRenderEnvLines:
    """Tests for render_env_lines."""

    def test_preserves_order_and_ends_with_newline(self) -> None:
        text = render_env_lines({"B": "2", "A": "1"})
        assert text == "B=2\nA=1\n"

    def test_quotes_selected_keys(self) -> None:
        text = render_env_lines(
            {"ID": "abc", "SCOPES": "api read_user"},
            quoted=frozenset({"SCOPES"}),
        )
        assert text == 'ID=abc\nSCOPES="api read_user"\n'

    def test_rendered_text_parses_back(self) -> None:
        values = {
            "GITLAB_CLIENT_ID": "4f1c9e",
            "GITLAB_REDIRECT_URI": "http://localhost:4000/cb?x=1",
            "GITLAB_SCOPES": "api read_user email",
        }
        text = render_env_lines(values, quoted=frozenset({"GITLAB_SCOPES"}))
        assert parse_env_text(text) == values
