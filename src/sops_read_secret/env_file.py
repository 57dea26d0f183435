# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Parse decrypted dotenv content into key-value dicts.

Handles:
  - blank lines and ``#`` comments
  - ``export KEY=VALUE`` prefix
  - ``KEY: VALUE`` as well as ``KEY=VALUE``
  - single-quoted values (literal) and double-quoted values (escapes expanded)
  - inline comments after unquoted values
  - values with ``=`` in them (only first separator splits)

Lines that are not assignments are a parse error, not skipped.
"""

from __future__ import annotations

import re

from sops_read_secret.errors import DecodeError

_LINE_RE = re.compile(
    r"""
    ^\s*
    (?:export\s+)?      # optional export prefix
    ([\w.-]+)           # key
    \s*[=:]\s*          # separator
    (.*)                # raw value (parsed below)
    $
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "\\": "\\", "$": "$"}
_ESCAPE_RE = re.compile(r"\\(.)")


def parse_env_text(text: str) -> dict[str, str]:
    """Return an ordered dict of key-value pairs parsed from *text*."""
    result: dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        m = _LINE_RE.match(stripped)
        if m is None:
            raise DecodeError("dotenv", f"line {lineno}: expected KEY=VALUE, got {stripped!r}")
        key = m.group(1)
        raw = m.group(2).strip()
        result[key] = _unquote(raw, lineno)
    return result


def _unquote(raw: str, lineno: int) -> str:
    """Strip surrounding quotes and handle inline comments."""
    if raw[:1] in ("'", '"'):
        quote = raw[0]
        end = _closing_quote(raw, quote)
        if end < 0:
            raise DecodeError("dotenv", f"line {lineno}: unterminated {quote} quoted value")
        inner = raw[1:end]
        rest = raw[end + 1:].strip()
        if rest and not rest.startswith("#"):
            raise DecodeError("dotenv", f"line {lineno}: unexpected text after quoted value")
        if quote == '"':
            return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), inner)
        return inner
    # Unquoted value: strip inline comment (only when # follows whitespace)
    m = re.search(r"\s#", raw)
    if m is not None:
        raw = raw[: m.start()].rstrip()
    return raw


def _closing_quote(raw: str, quote: str) -> int:
    i = 1
    while i < len(raw):
        c = raw[i]
        if c == "\\" and quote == '"':
            i += 2
            continue
        if c == quote:
            return i
        i += 1
    return -1
