# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exceptions raised while reading a secret.

Every failure is terminal. The CLI turns these into ``click.ClickException``
so the message lands on stderr with a non-zero exit status.
"""

from __future__ import annotations


class SopsReadError(Exception):
    """Base class for all sops-read-secret failures."""


class InputError(SopsReadError):
    """The encrypted input file could not be read."""


class DecryptError(SopsReadError):
    """``sops`` failed to decrypt the input (message passed through)."""


_FORMAT_LABELS = {"yaml": "YAML/JSON", "json": "YAML/JSON", "ini": "INI"}


class DecodeError(SopsReadError):
    """Decrypted content could not be parsed in the declared format."""

    def __init__(self, fmt: str, detail: str) -> None:
        self.format = fmt
        self.detail = detail
        super().__init__(f"Error parsing {_FORMAT_LABELS.get(fmt, fmt)}: {detail}")


class PathError(SopsReadError):
    """A requested key path does not resolve to a value."""


class PathNotFound(PathError):
    """An intermediate segment is missing or is not a mapping."""

    def __init__(self, segment_index: int, partial_path: str) -> None:
        self.segment_index = segment_index
        self.partial_path = partial_path
        super().__init__(f"key path '{partial_path}' not found")


class KeyNotFound(PathError):
    """The final key is missing (optionally within an INI section)."""

    def __init__(self, key: str, section: str | None = None) -> None:
        self.key = key
        self.section = section
        if section is None:
            msg = f"key '{key}' not found"
        else:
            msg = f"Key '{key}' not found in section '{section}'"
        super().__init__(msg)


class SectionNotFound(PathError):
    """The INI section named by the key path does not exist."""

    def __init__(self, section: str) -> None:
        self.section = section
        super().__init__(f"Section '{section}' not found in INI file")


class OutputError(SopsReadError):
    """The result could not be written."""
