# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""sops-read-secret -- decrypt a SOPS file and read one secret out of it."""

__all__ = ["__version__"]
__version__ = "0.1.0"
