# Copyright (c) 2026 Ramin Firoozye
# SPDX-License-Identifier: AGPL-3.0-or-later

"""sops-read-secret CLI -- decrypt a SOPS file and print it or one of its values.

Structured results are printed as indented JSON, single values as raw text.
Diagnostics go to stderr through the shared ``console``; the result itself is
written to stdout (or ``--output``) as raw bytes.
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from sops_read_secret import __version__
from sops_read_secret.config import load_config
from sops_read_secret.decoder import FORMAT_NAMES, FormatType, decode
from sops_read_secret.errors import InputError, PathError, SopsReadError
from sops_read_secret.extract import extract_for_format
from sops_read_secret.output import render, write_output
from sops_read_secret.sops import decrypt

console = Console(stderr=True)


def _read_encrypted(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise InputError(f"Error reading sops file: {e}") from e


def _extract_error(fmt: FormatType, key: str, e: PathError) -> str:
    if fmt is FormatType.DOTENV:
        return f"Key '{key}' not found in dotenv file"
    if fmt is FormatType.INI:
        return str(e)
    return f"Error extracting key '{key}': {e}"


@click.command()
@click.option("--file", "sops_file", required=True, help="Path to the sops encrypted file.")
@click.option("--key", "-k", default=None, help="Key to extract, dotted for nesting (e.g. db.password).")
@click.option(
    "--format", "fmt",
    type=click.Choice(FORMAT_NAMES, case_sensitive=False),
    default=None,
    help="Format of the sops file. Default: SOPS_READ_SECRET_FORMAT or config, else yaml.",
)
@click.option("--gnupg-home", default=None, help="GPG home directory (sets GNUPGHOME for sops).")
@click.option("--age-key-file", default=None, help="Age key file path (sets SOPS_AGE_KEY_FILE for sops).")
@click.option("--ssh-key-path", default=None, help="SSH key path (sets SOPS_SSH_KEY_PATH for sops).")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (default: stdout).",
)
@click.option("--sops-binary", default=None, help="sops executable. Default: SOPS_READ_SECRET_SOPS_BINARY or config, else sops.")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: nearest .sops-read-secret.toml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.version_option(__version__)
def cli(
    sops_file: str,
    key: str | None,
    fmt: str | None,
    gnupg_home: str | None,
    age_key_file: str | None,
    ssh_key_path: str | None,
    output: str | None,
    sops_binary: str | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Decrypt a sops encrypted file and print it, or a single key from it."""
    try:
        cfg = load_config(config_path)
        fmt_type = cfg.resolve_format(fmt)
    except ValueError as e:
        raise click.ClickException(str(e))
    options = cfg.decrypt_options(
        gnupg_home=gnupg_home,
        age_key_file=age_key_file,
        ssh_key_path=ssh_key_path,
        sops_binary=sops_binary,
    )
    if verbose and cfg.config_path is not None:
        console.print(f"[dim]Using config {escape(str(cfg.config_path))}[/dim]")

    try:
        data = _read_encrypted(sops_file)
        if verbose:
            console.print(f"[dim]Decrypting {escape(sops_file)} as {fmt_type} with {escape(options.sops_binary)}[/dim]")
        try:
            plaintext = decrypt(data, fmt_type, options)
        except SopsReadError as e:
            raise click.ClickException(f"Error decrypting file: {e}")

        value = decode(plaintext, fmt_type)
        if fmt_type is FormatType.BINARY and key:
            console.print("[yellow]Warning: --key is ignored for binary format[/yellow]")
        try:
            result = extract_for_format(value, fmt_type, key)
        except PathError as e:
            raise click.ClickException(_extract_error(fmt_type, key or "", e))

        payload = render(result)
        write_output(payload, output, stream=click.get_binary_stream("stdout"))
    except SopsReadError as e:
        raise click.ClickException(str(e))

    if verbose and output:
        console.print(f"[green]Wrote {len(payload)} byte(s) to {escape(output)}[/green]")
