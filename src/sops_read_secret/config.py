# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

""".sops-read-secret.toml configuration loading.

Searches upward from cwd for ``.sops-read-secret.toml`` and merges with CLI flags.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sops_read_secret.decoder import FORMAT_NAMES, FormatType
from sops_read_secret.sops import DEFAULT_SOPS_BINARY, DecryptOptions

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILENAME = ".sops-read-secret.toml"
CONFIG_SECTION = "sops-read-secret"

ENV_FORMAT = "SOPS_READ_SECRET_FORMAT"
ENV_SOPS_BINARY = "SOPS_READ_SECRET_SOPS_BINARY"


@dataclass
class SopsReadConfig:
    """Resolved configuration for the current invocation."""

    format: FormatType = FormatType.YAML
    sops_binary: str = DEFAULT_SOPS_BINARY
    gnupg_home: str | None = None
    age_key_file: str | None = None
    ssh_key_path: str | None = None
    config_path: Path | None = None

    def resolve_format(self, fmt: str | None = None) -> FormatType:
        """CLI value, then ``SOPS_READ_SECRET_FORMAT``, then the config file."""
        chosen = fmt or os.environ.get(ENV_FORMAT)
        if chosen is None:
            return self.format
        return _parse_format(chosen)

    def decrypt_options(
        self,
        *,
        gnupg_home: str | None = None,
        age_key_file: str | None = None,
        ssh_key_path: str | None = None,
        sops_binary: str | None = None,
    ) -> DecryptOptions:
        """Merge CLI key-material flags over the config file values."""
        return DecryptOptions(
            gnupg_home=gnupg_home or self.gnupg_home,
            age_key_file=age_key_file or self.age_key_file,
            ssh_key_path=ssh_key_path or self.ssh_key_path,
            sops_binary=sops_binary or os.environ.get(ENV_SOPS_BINARY) or self.sops_binary,
        )


def _parse_format(value: str) -> FormatType:
    try:
        return FormatType(value.lower())
    except ValueError:
        raise ValueError(
            f"Unsupported format: {value}. Expected one of: {', '.join(FORMAT_NAMES)}"
        ) from None


def _expand(value: str | None) -> str | None:
    return os.path.expanduser(value) if value else None


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk upward from *start* (default cwd) looking for ``.sops-read-secret.toml``."""
    cur = (start or Path.cwd()).resolve()
    while True:
        candidate = cur / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if cur.parent == cur:
            return None
        cur = cur.parent


def load_config(path: Path | None = None) -> SopsReadConfig:
    """Load and return config.  Returns defaults if no file found."""
    if path is None:
        path = find_config_file()
    if path is None:
        return SopsReadConfig()

    try:
        text = path.read_text()
    except OSError as e:
        raise ValueError(f"Could not read config file {path}: {e}") from e
    raw: dict[str, Any] = tomllib.loads(text)
    section = raw.get(CONFIG_SECTION, {})
    keys = section.get("keys", {})

    return SopsReadConfig(
        format=_parse_format(section.get("format", FormatType.YAML.value)),
        sops_binary=_expand(section.get("sops_binary")) or DEFAULT_SOPS_BINARY,
        gnupg_home=_expand(keys.get("gnupg_home")),
        age_key_file=_expand(keys.get("age_key_file")),
        ssh_key_path=_expand(keys.get("ssh_key_path")),
        config_path=path,
    )
