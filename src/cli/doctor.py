"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.credentials import load_access_token, read_service_account_info
from adapters.http_client import build_async_client
from cli.ui_components import print_error
from core.config import AppSettings, get_user_env_file, load_settings
from core.errors import CredentialError, GplayError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        # Sin token la API responde 401/403/404: basta con que conteste.
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_credentials(cred_file: Path, settings: AppSettings) -> list[tuple[str, bool, str]]:
    rows: list[tuple[str, bool, str]] = []
    try:
        info = read_service_account_info(cred_file)
    except CredentialError as exc:
        rows.append(("Key file", False, str(exc)))
        return rows
    rows.append(("Key file", True, str(info.get("client_email") or cred_file)))

    try:
        token = load_access_token(cred_file, settings)
    except GplayError as exc:
        rows.append(("Token exchange", False, str(exc)))
        return rows
    expiry = token.expiry.isoformat() if token.expiry else "unknown expiry"
    rows.append(("Token exchange", True, f"token valid until {expiry}"))
    return rows


@app.command()
def run(
    cred_file: Optional[Path] = typer.Option(
        None,
        "--cred-file",
        "-c",
        metavar="JSON-FILE",
        help="Service account key file to check (defaults to GPLAY_CRED_FILE).",
    ),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = load_settings()
    except GplayError as exc:
        print_error(_console, exc)
        raise typer.Exit(code=exc.exit_code) from exc

    table = Table(title="gplay Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("Edit URL", "OK", settings.edit_url)
    table.add_row("Timeouts", "OK", f"{settings.http_timeout_seconds:g}s / upload {settings.upload_timeout_seconds:g}s")

    failed = False
    resolved = cred_file or settings.cred_file
    if resolved is None:
        table.add_row("Credentials", "FAIL", "No key file: pass --cred-file or set GPLAY_CRED_FILE")
        failed = True
    else:
        for name, ok, detail in _check_credentials(resolved, settings):
            table.add_row(name, "OK" if ok else "FAIL", detail)
            failed = failed or not ok

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings.edit_url, settings))
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)
    failed = failed or not ok_http

    _console.print(table)

    if failed:
        _console.print(
            "\n[yellow]Note:[/yellow] Service account keys need the Android Publisher API enabled "
            "and the account invited in the Play Console."
        )
        raise typer.Exit(code=1)
