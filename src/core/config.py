"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/credenciales) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import InvalidInput


ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "gplay"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "gplay"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "gplay"
    return Path.home() / ".config" / "gplay"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.

    Los flags de la CLI tienen prioridad; estos valores son el fallback.
    """

    model_config = SettingsConfigDict(
        env_prefix="GPLAY_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    cred_file: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("GPLAY_CRED_FILE", "GOOGLE_APPLICATION_CREDENTIALS", "cred_file"),
        description="Ruta al JSON de la service account (fallback de --cred-file).",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request JSON y para el intercambio de token (segundos).",
    )
    upload_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Timeout de la subida del bundle (segundos); bundles grandes necesitan más.",
    )
    edit_url: str = Field(
        default="https://androidpublisher.googleapis.com/androidpublisher/v3/applications",
        min_length=8,
        description="Base URL de los recursos de edición.",
    )
    upload_url: str = Field(
        default="https://androidpublisher.googleapis.com/upload/androidpublisher/v3/applications",
        min_length=8,
        description="Base URL para subidas (uploadType=media).",
    )
    user_agent: str = Field(
        default="gplay/1.0 (+https://github.com/jlyonsmith/gplay)",
        min_length=1,
        description="User-Agent para las peticiones a la API.",
    )


def load_settings() -> AppSettings:
    """Construye `AppSettings` traduciendo valores inválidos a `InvalidInput`.

    Un `GPLAY_HTTP_TIMEOUT_SECONDS=abc` en el entorno o en un `.env` debe
    salir como error de uso legible, no como traceback de pydantic.
    """

    try:
        return AppSettings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidInput(f"invalid configuration ({problems})") from exc
