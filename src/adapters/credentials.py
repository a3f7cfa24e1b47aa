"""Cargador de credenciales (service account -> bearer token).

Responsabilidad:
- Leer el JSON de la service account.
- Intercambiarlo por un access token con el scope de Android Publisher.
- Traducir rechazos a `CredentialError` y fallos de red a `RequestTimeoutError`/`NetworkError`.

Sin caché: cada invocación hace su propio intercambio.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
from google.auth import exceptions as google_exceptions
from google.auth import transport as google_transport
from google.oauth2 import service_account

from adapters.http_client import HttpxAuthRequest
from core.config import ANDROID_PUBLISHER_SCOPE, AppSettings
from core.domain.models import AccessToken
from core.errors import CredentialError, NetworkError, RequestTimeoutError


def read_service_account_info(cred_file: Path) -> dict[str, Any]:
    try:
        raw = cred_file.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CredentialError(f"credentials file not found: {cred_file}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CredentialError(f"unable to read credentials file {cred_file}: {exc}") from exc

    try:
        info = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CredentialError(f"credentials file {cred_file} is not valid JSON: {exc}") from exc
    if not isinstance(info, dict):
        raise CredentialError(f"credentials file {cred_file} must contain a JSON object")
    return info


def _transport_cause(exc: BaseException) -> httpx.TransportError | None:
    """Busca el error de httpx en la cadena de causas de un `TransportError`."""

    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, httpx.TransportError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def load_access_token(
    cred_file: Path,
    settings: AppSettings | None = None,
    *,
    timeout_seconds: float | None = None,
    request: google_transport.Request | None = None,
) -> AccessToken:
    """Devuelve un `AccessToken` válido para la Android Publisher API.

    `request` permite inyectar el transport de google-auth (tests); por
    defecto se usa `HttpxAuthRequest` con `timeout_seconds` (o el timeout HTTP
    de la config). Fallos de transporte salen como `RequestTimeoutError` o
    `NetworkError`; solo un rechazo real del endpoint es `CredentialError`.
    """

    settings = settings or AppSettings()
    info = read_service_account_info(cred_file)

    try:
        credentials = service_account.Credentials.from_service_account_info(
            info,
            scopes=[ANDROID_PUBLISHER_SCOPE],
        )
    except (ValueError, KeyError) as exc:
        raise CredentialError(f"malformed service account key in {cred_file}: {exc}") from exc

    try:
        credentials.refresh(request or HttpxAuthRequest(settings, timeout_seconds=timeout_seconds))
    except google_exceptions.TransportError as exc:
        cause = _transport_cause(exc)
        if isinstance(cause, httpx.TimeoutException):
            raise RequestTimeoutError(f"token exchange for {cred_file} timed out: {cause}") from exc
        if cause is not None:
            raise NetworkError(f"token exchange for {cred_file} failed: {cause}") from exc
        raise CredentialError(f"token exchange rejected for {cred_file}: {exc}") from exc
    except google_exceptions.GoogleAuthError as exc:
        raise CredentialError(f"token exchange rejected for {cred_file}: {exc}") from exc

    if not credentials.token:
        raise CredentialError(f"token exchange for {cred_file} returned no access token")
    return AccessToken(token=credentials.token, expiry=credentials.expiry)
