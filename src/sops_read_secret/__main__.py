# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Entry point for the CLI (run via ``sops-read-secret`` or ``python -m sops_read_secret``)."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the CLI."""
    try:
        from sops_read_secret.cli import cli
    except ImportError:
        sys.stderr.write("sops-read-secret CLI dependencies missing. Install with: pip install sops-read-secret\n")
        sys.exit(1)
    cli()


if __name__ == "__main__":
    main()
