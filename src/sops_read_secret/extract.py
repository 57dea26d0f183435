# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pick a single value out of a decoded secrets tree by dotted key path.

YAML/JSON trees are walked one segment at a time, INI trees take at most a
``section.key`` pair, and dotenv maps are flat so the whole path is one key.
Dots inside key names cannot be escaped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from sops_read_secret.decoder import DEFAULT_SECTION, FormatType, Value
from sops_read_secret.errors import KeyNotFound, PathNotFound, SectionNotFound


def parse_key(key: str) -> list[str]:
    """Split a dotted key into its segments."""
    return key.split(".")


def parse_ini_key(key: str) -> tuple[str, str]:
    """Split ``section.key`` into its parts; a bare ``key`` lives in the default section."""
    if "." in key:
        section, name = key.split(".", 1)
        return section, name
    return DEFAULT_SECTION, key


def extract_key(value: Value, key: str | None) -> Value:
    """Return the sub-value of *value* at dotted path *key*.

    An empty or missing *key* returns *value* itself.

    Raises :class:`PathNotFound` when an intermediate segment is absent or not a
    mapping, and :class:`KeyNotFound` when the final segment is absent.
    """
    if not key:
        return value
    keys = parse_key(key)
    current = value
    for i, k in enumerate(keys[:-1]):
        nxt = current.get(k) if isinstance(current, Mapping) else None
        if not isinstance(nxt, Mapping):
            raise PathNotFound(i + 1, ".".join(keys[: i + 1]))
        current = nxt

    if isinstance(current, Mapping) and keys[-1] in current:
        return current[keys[-1]]
    raise KeyNotFound(key)


def extract_dotenv_key(value: Mapping[str, str], key: str | None) -> Value:
    """Look up *key* verbatim; dotenv keys are never split on dots."""
    if not key:
        return value  # type: ignore[return-value]
    if key in value:
        return value[key]
    raise KeyNotFound(key)


def extract_ini_key(value: Mapping[str, Mapping[str, str]], key: str | None) -> Value:
    """Look up ``section.key`` (or ``key`` in the default section)."""
    if not key:
        return value  # type: ignore[return-value]
    section, name = parse_ini_key(key)
    if section not in value:
        raise SectionNotFound(section)
    items = value[section]
    if name not in items:
        raise KeyNotFound(name, section)
    return items[name]


def extract_for_format(value: Value, fmt: FormatType | str, key: str | None) -> Value:
    """Apply the key lookup rule that matches *fmt*.

    Binary content has no structure, so *key* is ignored; warning the user
    about that is left to the caller.
    """
    fmt = FormatType(fmt)
    if fmt is FormatType.BINARY:
        return value
    if fmt is FormatType.DOTENV:
        return extract_dotenv_key(cast(Mapping[str, str], value), key)
    if fmt is FormatType.INI:
        return extract_ini_key(cast(Mapping[str, Mapping[str, str]], value), key)
    return extract_key(value, key)
