# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Serialize an extracted value and write it to stdout or a file."""

from __future__ import annotations

import datetime
import json
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

from sops_read_secret.decoder import Value
from sops_read_secret.errors import OutputError


def render(result: Value) -> bytes:
    """Return the bytes to emit for *result*.

    Strings are written verbatim and explicitly tagged dates in ISO form.
    Other scalars use their JSON spelling (``true``, ``null``, ``42``) and
    containers are pretty-printed JSON with sorted keys and two-space
    indentation. Nothing is appended.
    """
    if isinstance(result, str):
        return result.encode("utf-8", errors="surrogateescape")
    if isinstance(result, (datetime.date, datetime.time)):
        return result.isoformat().encode("utf-8")
    text = json.dumps(_jsonable(result), indent=2, sort_keys=True, ensure_ascii=False, default=str)
    return text.encode("utf-8")


def _jsonable(value: Any) -> Any:
    """Stringify mapping keys so mixed YAML key types can be sorted and dumped."""
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def write_output(data: bytes, path: str | Path | None = None, stream: BinaryIO | None = None) -> None:
    """Write *data* to *path*, creating parent directories, or to *stream* (default stdout)."""
    if path is None:
        out = stream if stream is not None else sys.stdout.buffer
        out.write(data)
        out.flush()
        return

    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"Error creating output directory: {e}") from e
    try:
        target.write_bytes(data)
    except OSError as e:
        raise OutputError(f"Error writing output: {e}") from e
