"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/mensajes en múltiples comandos (y en doctor).
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.domain.models import Bundle, Track
from core.errors import GplayError


def build_bundles_table(bundles: list[Bundle]) -> Table:
    """Tabla de bundles en el orden devuelto por el servicio."""

    table = Table(title="Bundles")
    table.add_column("Version", style="cyan", no_wrap=True, justify="right")
    table.add_column("SHA-256", style="dim", overflow="fold")
    for bundle in bundles:
        table.add_row(str(bundle.version_code), bundle.sha256 or "-")
    return table


def build_tracks_table(tracks: list[Track]) -> Table:
    """Tabla de tracks con las version codes de cada release."""

    table = Table(title="Tracks")
    table.add_column("Track", style="cyan", no_wrap=True)
    table.add_column("Release", style="white")
    table.add_column("Status", style="green")
    table.add_column("Version codes", style="magenta")
    for track in tracks:
        if not track.releases:
            table.add_row(track.name, "-", "-", "-")
            continue
        for release in track.releases:
            table.add_row(
                track.name,
                release.name or "-",
                release.status,
                ", ".join(release.version_codes or []) or "-",
            )
    return table


def print_info(console: Console, message: str) -> None:
    console.print(Text(message, style="dim"))


def print_warning(console: Console, message: str) -> None:
    console.print(Text(f"warning: {message}", style="yellow"))


def print_error(console: Console, error: GplayError) -> None:
    console.print(Text(f"error: {error}", style="bold red"))
    if error.hint:
        console.print(Text(f"hint: {error.hint}", style="yellow"))
