# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Decrypt SOPS-encrypted content via the ``sops`` CLI.

Key material (GnuPG home, age key file, SSH key) is handed to ``sops``
through the environment of the child process only; the current process
environment is left untouched.

Requires the ``sops`` CLI to be installed.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from sops_read_secret.decoder import FormatType
from sops_read_secret.errors import DecryptError

DEFAULT_SOPS_BINARY = "sops"

_MISSING_SOPS = (
    "The 'sops' CLI is required to decrypt secrets. "
    "Install it from https://github.com/getsops/sops/releases "
    "or point --sops-binary at an existing executable."
)


@dataclass(frozen=True)
class DecryptOptions:
    """Key material and executable used for one decrypt call."""

    gnupg_home: str | None = None
    age_key_file: str | None = None
    ssh_key_path: str | None = None
    sops_binary: str = DEFAULT_SOPS_BINARY

    def environ(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """Return *base* (default: ``os.environ``) with key-material variables overlaid."""
        env = dict(os.environ if base is None else base)
        if self.gnupg_home:
            env["GNUPGHOME"] = self.gnupg_home
        if self.age_key_file:
            env["SOPS_AGE_KEY_FILE"] = self.age_key_file
        if self.ssh_key_path:
            env["SOPS_SSH_KEY_PATH"] = self.ssh_key_path
        return env


def find_sops(binary: str = DEFAULT_SOPS_BINARY) -> str:
    """Resolve *binary* to an executable path or raise :class:`DecryptError`."""
    resolved = shutil.which(binary)
    if resolved is None:
        raise DecryptError(_MISSING_SOPS)
    return resolved


def decrypt(data: bytes, fmt: FormatType | str, options: DecryptOptions | None = None) -> bytes:
    """Decrypt *data* (the full encrypted file) and return the plaintext bytes.

    *fmt* is passed to ``sops`` as both input and output type so the plaintext
    comes back in the same format it was encrypted from.
    """
    opts = options or DecryptOptions()
    fmt = FormatType(fmt)
    sops = find_sops(opts.sops_binary)
    with tempfile.TemporaryDirectory(prefix="sops-read-secret-") as tmp:
        src = Path(tmp) / f"encrypted.{fmt.value}"
        src.write_bytes(data)
        cmd = [
            sops,
            "--decrypt",
            "--input-type", fmt.value,
            "--output-type", fmt.value,
            str(src),
        ]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                env=opts.environ(),
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise DecryptError(stderr or f"sops exited with status {e.returncode}") from e
        except OSError as e:
            raise DecryptError(f"could not run {sops}: {e}") from e
    return result.stdout
