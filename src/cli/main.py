"""CLI principal (Typer).

Por qué Typer:
- Subcomandos y flags tipados con validación antes de cualquier I/O.
- Errores de uso (flags ausentes, subcomando desconocido) salen con exit 2.

Toda la orquestación vive en `core.services.publishing`; aquí solo se
resuelven flags/config, se imprime y se fija el exit code.
"""

from __future__ import annotations

import asyncio
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console

from adapters.credentials import load_access_token
from adapters.publisher_api import AndroidPublisherClient
from cli import doctor
from cli.ui_components import (
    build_bundles_table,
    build_tracks_table,
    print_error,
    print_info,
    print_warning,
)
from core.config import AppSettings, load_settings
from core.domain.models import AccessToken
from core.errors import GplayError
from core.services.publishing import (
    RELEASE_STATUSES,
    PublishContext,
    PublishHooks,
    list_bundles,
    list_tracks,
    upload_bundle,
    validate_bundle_file,
)

T = TypeVar("T")

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Google Play publishing tool: list bundles and tracks, upload bundles.",
)
app.add_typer(doctor.app, name="doctor")

# stdout: resultados. stderr: progreso, warnings y errores.
_console = Console(soft_wrap=True)
_err_console = Console(stderr=True, soft_wrap=True)


def _configure_consoles(*, no_color: bool) -> None:
    global _console, _err_console
    _console = Console(soft_wrap=True, no_color=no_color)
    _err_console = Console(stderr=True, soft_wrap=True, no_color=no_color)


def _package_version() -> str:
    try:
        return version("gplay")
    except PackageNotFoundError:
        return "0.0.0+local"


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"gplay {_package_version()}")
        raise typer.Exit()


@app.callback()
def main(
    no_color: bool = typer.Option(
        False,
        "--no-color",
        envvar="NO_CLI_COLOR",
        help="Disable colors in output.",
    ),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    _configure_consoles(no_color=no_color)


CredFileOption = typer.Option(
    None,
    "--cred-file",
    "-c",
    metavar="JSON-FILE",
    help="Google API service account key file (fallback: GPLAY_CRED_FILE, GOOGLE_APPLICATION_CREDENTIALS).",
)
PackageNameOption = typer.Option(
    ...,
    "--package-name",
    "-n",
    metavar="PACKAGE-NAME",
    help="Google Play package name.",
)
TimeoutOption = typer.Option(
    None,
    "--timeout",
    "-t",
    min=1,
    metavar="TIMEOUT-SECS",
    help="Request timeout in seconds.",
)


def _resolve_cred_file(cred_file: Optional[Path], settings: AppSettings) -> Path:
    resolved = cred_file or settings.cred_file
    if resolved is None:
        raise typer.BadParameter(
            "missing credentials file (pass --cred-file or set GPLAY_CRED_FILE)",
            param_hint="'--cred-file' / '-c'",
        )
    return resolved


def _hooks() -> PublishHooks:
    return PublishHooks(
        info=lambda msg: print_info(_err_console, msg),
        warning=lambda msg: print_warning(_err_console, msg),
    )


def _settings() -> AppSettings:
    try:
        return load_settings()
    except GplayError as exc:
        raise _fail(exc) from exc


def _request_token(cred_file: Path, settings: AppSettings, *, timeout_seconds: Optional[float] = None) -> AccessToken:
    print_info(_err_console, "Requesting OAuth token with Android Publisher scope")
    return load_access_token(cred_file, settings, timeout_seconds=timeout_seconds)


def _run(action: Callable[[], Awaitable[T]]) -> T:
    """Ejecuta la cadena async y traduce `GplayError` a mensaje + exit code."""

    try:
        return asyncio.run(action())
    except GplayError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=exc.exit_code) from exc


def _fail(exc: GplayError) -> typer.Exit:
    print_error(_err_console, exc)
    return typer.Exit(code=exc.exit_code)


@app.command("upload")
def upload_cmd(
    package_name: str = PackageNameOption,
    bundle_file: Path = typer.Option(
        ...,
        "--bundle-file",
        "-b",
        metavar="AAB-FILE",
        help="The bundle file to upload.",
    ),
    track_name: str = typer.Option(
        ...,
        "--track-name",
        metavar="NAME",
        help="The name of the track to add the bundle to.",
    ),
    cred_file: Optional[Path] = CredFileOption,
    timeout: Optional[float] = TimeoutOption,
    release_status: str = typer.Option(
        "draft",
        "--release-status",
        metavar="STATUS",
        help=f"Status of the new release ({', '.join(RELEASE_STATUSES)}).",
    ),
) -> None:
    """Upload a new bundle and assign it to a track."""

    settings = _settings()
    cred_path = _resolve_cred_file(cred_file, settings)
    if release_status not in RELEASE_STATUSES:
        raise typer.BadParameter(
            f"expected one of: {', '.join(RELEASE_STATUSES)}",
            param_hint="'--release-status'",
        )

    try:
        validate_bundle_file(bundle_file)
        token = _request_token(cred_path, settings)
    except GplayError as exc:
        raise _fail(exc) from exc

    async def action():
        async with AndroidPublisherClient(token, settings, upload_timeout_seconds=timeout) as api:
            ctx = PublishContext(api=api, package_name=package_name, hooks=_hooks())
            return await upload_bundle(
                ctx,
                bundle_file=bundle_file,
                track_name=track_name,
                release_status=release_status,
            )

    result = _run(action)
    _console.print(str(result.version_code), highlight=False)


@app.command("list-bundles")
def list_bundles_cmd(
    package_name: str = PackageNameOption,
    cred_file: Optional[Path] = CredFileOption,
    timeout: Optional[float] = TimeoutOption,
) -> None:
    """List uploaded bundle versions."""

    settings = _settings()
    cred_path = _resolve_cred_file(cred_file, settings)
    try:
        token = _request_token(cred_path, settings, timeout_seconds=timeout)
    except GplayError as exc:
        raise _fail(exc) from exc

    async def action():
        async with AndroidPublisherClient(token, settings, timeout_seconds=timeout) as api:
            return await list_bundles(PublishContext(api=api, package_name=package_name, hooks=_hooks()))

    bundles = _run(action)
    if not bundles:
        print_warning(_err_console, f"no bundles uploaded for {package_name}")
        return
    _console.print(build_bundles_table(bundles))


@app.command("list-tracks")
def list_tracks_cmd(
    package_name: str = PackageNameOption,
    cred_file: Optional[Path] = CredFileOption,
    timeout: Optional[float] = TimeoutOption,
) -> None:
    """List available release tracks."""

    settings = _settings()
    cred_path = _resolve_cred_file(cred_file, settings)
    try:
        token = _request_token(cred_path, settings, timeout_seconds=timeout)
    except GplayError as exc:
        raise _fail(exc) from exc

    async def action():
        async with AndroidPublisherClient(token, settings, timeout_seconds=timeout) as api:
            return await list_tracks(PublishContext(api=api, package_name=package_name, hooks=_hooks()))

    tracks = _run(action)
    _console.print(build_tracks_table(tracks))


def run() -> None:
    app(prog_name="gplay")
