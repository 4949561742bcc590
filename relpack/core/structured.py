"""Typed accessors for the untyped environment mapping.

Environment variables arrive as plain strings (or not at all). These helpers
normalize them at the boundary so the rest of the code sees `str | None` and
`bool` only.
"""

from __future__ import annotations

from typing import Mapping

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def get_str(table: Mapping[str, str], key: str) -> str | None:
    """Get a string value, stripping whitespace.

    Returns None if missing or empty after stripping.
    """
    value = table.get(key)
    if value is None:
        return None
    s = value.strip()
    return s or None


def get_flag(table: Mapping[str, str], key: str) -> bool:
    """Read a boolean-ish flag.

    Unset, empty, "0", "false", "no" and "off" (any case) are False; every
    other value is True. Pipelines usually set these to "true" or leave them
    unset.
    """
    value = get_str(table, key)
    if value is None:
        return False
    return value.lower() not in _FALSE_VALUES
