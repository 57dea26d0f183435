# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Turn decrypted bytes into a generic value tree, one parser per format."""

from __future__ import annotations

import configparser
import json
from enum import Enum
from typing import Any, Union

import yaml

from sops_read_secret.env_file import parse_env_text
from sops_read_secret.errors import DecodeError

# Recursive value model: dicts, lists and plain scalars as produced by the parsers.
Value = Union[str, int, float, bool, None, list[Any], dict[str, Any]]

# Name of the INI section holding keys declared before any header.
DEFAULT_SECTION = ""

# Placeholder header injected so configparser accepts keys before the first section.
_ROOT_HEADER = "\x00sops-read-secret-root\x00"

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _SecretLoader(yaml.SafeLoader):
    """SafeLoader that leaves unquoted dates and timestamps as plain strings."""


_SecretLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class FormatType(str, Enum):
    """Formats understood by both ``sops`` and the decoder."""

    YAML = "yaml"
    JSON = "json"
    BINARY = "binary"
    DOTENV = "dotenv"
    INI = "ini"

    def __str__(self) -> str:
        return self.value


FORMAT_NAMES: tuple[str, ...] = tuple(f.value for f in FormatType)


def decode(data: bytes, fmt: FormatType | str) -> Value:
    """Parse *data* according to *fmt*.

    Raises :class:`DecodeError` on any parse failure; there is no
    best-effort result.
    """
    fmt = FormatType(fmt)
    if fmt is FormatType.BINARY:
        return decode_text(data)
    if fmt in (FormatType.YAML, FormatType.JSON):
        return _decode_yaml(data, fmt)
    if fmt is FormatType.DOTENV:
        return parse_env_text(_text(data, fmt))
    return _decode_ini(data)


def decode_text(data: bytes) -> str:
    """Decode bytes as UTF-8, keeping undecodable bytes for a lossless round-trip."""
    return data.decode("utf-8", errors="surrogateescape")


def _text(data: bytes, fmt: FormatType) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(fmt.value, str(e)) from e


def _decode_yaml(data: bytes, fmt: FormatType) -> dict[str, Any]:
    # sops re-indents JSON with tabs, which YAML rejects, so JSON gets its own parser.
    try:
        if fmt is FormatType.JSON:
            text = _text(data, fmt)
            doc = json.loads(text) if text.strip() else None
        else:
            doc = yaml.load(data, Loader=_SecretLoader)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DecodeError(fmt.value, str(e)) from e
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise DecodeError(
            fmt.value,
            f"top-level {fmt.value} document must be a mapping, got {type(doc).__name__}",
        )
    return doc


def _decode_ini(data: bytes) -> dict[str, dict[str, str]]:
    parser = configparser.ConfigParser(
        interpolation=None,
        default_section="\x00defaults\x00",
        strict=False,
        inline_comment_prefixes=("#", ";"),
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        parser.read_string(f"[{_ROOT_HEADER}]\n" + _text(data, FormatType.INI))
    except configparser.Error as e:
        raise DecodeError(FormatType.INI.value, str(e)) from e

    result: dict[str, dict[str, str]] = {DEFAULT_SECTION: {}}
    for name in parser.sections():
        section = DEFAULT_SECTION if name == _ROOT_HEADER else name
        items = result.setdefault(section, {})
        for key, value in parser.items(name):
            items[key] = value if value is not None else ""
    return result
