"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los recursos de la Android Publisher API usan camelCase; los alias mantienen
  el wire format verbatim y los nombres Python en snake_case.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class AccessToken(BaseModel):
    """Bearer token de corta duración derivado de la service account.

    Vive solo durante una invocación; nunca se persiste.
    """

    token: str = Field(
        ...,
        min_length=1,
        description="Token OAuth2 opaco.",
    )
    expiry: datetime | None = Field(
        default=None,
        description="Expiración (UTC) reportada por el endpoint de tokens.",
    )


class AppEdit(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Identificador de la edición (transacción) abierta.",
    )
    expiry_time_seconds: str | None = Field(
        default=None,
        alias="expiryTimeSeconds",
        description="Momento (epoch) en que el servicio descarta la edición.",
    )


class Bundle(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version_code: int = Field(
        ...,
        alias="versionCode",
        description="Version code asignado por el servicio.",
    )
    sha1: str | None = Field(default=None)
    sha256: str | None = Field(default=None)


class BundlesListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # El servicio omite la clave cuando no hay bundles.
    bundles: list[Bundle] = Field(default_factory=list)


class TrackRelease(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = Field(default=None)
    status: str = Field(
        ...,
        description="draft | inProgress | halted | completed.",
    )
    version_codes: list[str] | None = Field(
        default=None,
        alias="versionCodes",
        description="Version codes (strings en el wire format).",
    )


class Track(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(
        ...,
        alias="track",
        min_length=1,
        description="Nombre del canal (internal, alpha, beta, production...).",
    )
    releases: list[TrackRelease] = Field(default_factory=list)


class TracksListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tracks: list[Track] = Field(default_factory=list)


class RemoteErrorDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    reason: str | None = None
    message: str | None = None


class RemoteError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int | None = None
    message: str = Field(..., description="Mensaje del servicio, se muestra verbatim.")
    status: str | None = Field(default=None, description="Código canónico (p.ej. ALREADY_EXISTS).")
    errors: list[RemoteErrorDetail] = Field(default_factory=list)

    def remote_code(self) -> str | None:
        if self.status:
            return self.status
        for detail in self.errors:
            if detail.reason:
                return detail.reason
        return None


class RemoteErrorBody(BaseModel):
    """Cuerpo de error estándar de las APIs de Google: `{"error": {...}}`."""

    model_config = ConfigDict(extra="ignore")

    error: RemoteError


class UploadResult(BaseModel):
    """Resultado de una subida completa (upload + assign + commit)."""

    version_code: int
    sha256: str | None = None
    track: str
    edit_id: str
