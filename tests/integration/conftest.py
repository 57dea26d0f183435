"""Shared fixtures for tests that run a real ``sops`` binary.

These tests are disabled by default. To run them, install ``sops`` and
``age``, create an age key, and pass the marker:

  SOPS_READ_SECRET_TEST_SOPS=1 SOPS_READ_SECRET_TEST_AGE_KEY_FILE=~/.config/sops/age/keys.txt \
      pytest -m integration_sops tests/integration/

Unit tests (tests/test_*.py) replace the decrypt call with an autouse fake,
so they never need ``sops``. Integration tests (marked integration_*) are not
mocked.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest


def _skip_unless(env_flag: str, message: str) -> None:
    if not os.environ.get(env_flag):
        pytest.skip(
            f"{message} Set {env_flag}=1 and install sops to run."
        )


def _age_recipient(key_file: Path) -> str:
    for line in key_file.read_text().splitlines():
        if line.startswith("# public key:"):
            return line.split(":", 1)[1].strip()
    pytest.skip(f"No '# public key:' line found in {key_file}.")


@pytest.fixture(scope="module")
def age_key_file() -> Path:
    """Require SOPS_READ_SECRET_TEST_SOPS=1, a sops binary and an age key file."""
    _skip_unless(
        "SOPS_READ_SECRET_TEST_SOPS",
        "sops integration tests are disabled by default.",
    )
    if shutil.which("sops") is None:
        pytest.skip("sops is not on PATH.")
    raw = os.environ.get("SOPS_READ_SECRET_TEST_AGE_KEY_FILE")
    if not raw:
        pytest.skip("Set SOPS_READ_SECRET_TEST_AGE_KEY_FILE to an age identity file.")
    path = Path(raw).expanduser()
    if not path.is_file():
        pytest.skip(f"Age key file {path} does not exist.")
    return path


@pytest.fixture()
def encrypt(age_key_file: Path, tmp_path: Path) -> Callable[[str, str, bytes], Path]:
    """Return a helper that writes *plaintext* and encrypts it in place with sops."""
    recipient = _age_recipient(age_key_file)

    def _encrypt(name: str, fmt: str, plaintext: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(plaintext)
        subprocess.run(
            [
                "sops", "--encrypt", "--in-place",
                "--age", recipient,
                "--input-type", fmt, "--output-type", fmt,
                str(path),
            ],
            check=True,
            capture_output=True,
        )
        return path

    return _encrypt
