# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""KEY=VALUE env file parsing and rendering.

The same rules read the input config and the published artifact, so a
published file always parses back to the values that were written.
"""

from __future__ import annotations

_QUOTES: tuple[str, ...] = ("'", '"')


def strip_surrounding_quotes(value: str) -> str:
    """Strip exactly one layer of matching surrounding quotes.

    Example:
        >>> strip_surrounding_quotes('"api read_user"')
        'api read_user'
        >>> strip_surrounding_quotes("'\\"nested\\"'")
        '"nested"'
    """
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def parse_env_text(text: str) -> dict[str, str]:
    """Parse ``.env`` style text into a key-value dict.

    Skips blank lines and comment lines (starting with ``#``), accepts an
    optional ``export `` prefix, splits on the first ``=`` only, and strips
    one layer of surrounding quotes from values. Lines without ``=`` are
    ignored. Later duplicates win.

    Args:
        text: The file content.

    Returns:
        A mapping of keys to their string values.
    """
    values: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :]
        if "=" not in stripped:
            continue
        key, _, value = stripped.partition("=")
        key = key.strip()
        if key:
            values[key] = strip_surrounding_quotes(value.strip())
    return values


def render_env_lines(values: dict[str, str], quoted: frozenset[str] = frozenset()) -> str:
    """Render key-value pairs in insertion order, one ``KEY=VALUE`` per line.

    Keys in ``quoted`` get their value wrapped in double quotes.
    """
    lines = []
    for key, value in values.items():
        rendered = f'"{value}"' if key in quoted else value
        lines.append(f"{key}={rendered}")
    return "\n".join(lines) + "\n"


__all__: list[str] = [
    "parse_env_text",
    "render_env_lines",
    "strip_surrounding_quotes",
]
