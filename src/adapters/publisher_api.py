"""Cliente de la Android Publisher API (v3) sobre httpx.

Responsabilidad:
- Construir requests verbatim contra los endpoints de edits/bundles/tracks.
- Adjuntar el bearer token y el timeout correspondiente a cada llamada.
- Traducir respuestas no-2xx y fallos de transporte a la taxonomía del Core.

Las subidas son "simple upload" (`uploadType=media`): una sola request con el
payload completo, sin chunks ni reanudación.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import (
    AccessToken,
    AppEdit,
    Bundle,
    BundlesListResponse,
    RemoteErrorBody,
    Track,
    TracksListResponse,
)
from core.errors import ApiError, NetworkError, RequestTimeoutError
from core.interfaces.publisher import PublisherApi

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def api_error_from_response(response: httpx.Response) -> ApiError:
    """Construye un `ApiError` a partir del cuerpo de error de Google.

    Si el cuerpo no tiene la forma `{"error": {...}}`, se usa el reason phrase.
    """

    try:
        body = RemoteErrorBody.model_validate_json(response.content)
    except (ValidationError, ValueError):
        message = response.reason_phrase or f"HTTP {response.status_code}"
        return ApiError(response.status_code, message)
    return ApiError(response.status_code, body.error.message, code=body.error.remote_code())


class AndroidPublisherClient(PublisherApi):
    """Implementación httpx de `PublisherApi`.

    Se usa como async context manager: el `httpx.AsyncClient` vive lo que dura
    el comando.
    """

    def __init__(
        self,
        token: AccessToken,
        settings: AppSettings | None = None,
        *,
        timeout_seconds: float | None = None,
        upload_timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._token = token
        self._timeout = timeout_seconds or self._settings.http_timeout_seconds
        self._upload_timeout = upload_timeout_seconds or self._settings.upload_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AndroidPublisherClient":
        self._client = build_async_client(
            self._settings,
            token=self._token.token,
            timeout_seconds=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _edit_url(self, package_name: str, suffix: str = "") -> str:
        return f"{self._settings.edit_url}/{package_name}/edits{suffix}"

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("AndroidPublisherClient must be used as an async context manager")
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"{method} {url} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

        if not response.is_success:
            raise api_error_from_response(response)
        return response

    @staticmethod
    def _parse(response: httpx.Response, model: type[_ModelT]) -> _ModelT:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise ApiError(
                response.status_code,
                f"unexpected {model.__name__} payload from {response.request.url}: {exc}",
            ) from exc

    async def open_edit(self, package_name: str) -> AppEdit:
        response = await self._send("POST", self._edit_url(package_name), json={})
        return self._parse(response, AppEdit)

    async def list_bundles(self, package_name: str, edit_id: str) -> list[Bundle]:
        response = await self._send("GET", self._edit_url(package_name, f"/{edit_id}/bundles"))
        return self._parse(response, BundlesListResponse).bundles

    async def list_tracks(self, package_name: str, edit_id: str) -> list[Track]:
        response = await self._send("GET", self._edit_url(package_name, f"/{edit_id}/tracks"))
        return self._parse(response, TracksListResponse).tracks

    async def upload_bundle(self, package_name: str, edit_id: str, data: bytes) -> Bundle:
        url = f"{self._settings.upload_url}/{package_name}/edits/{edit_id}/bundles"
        response = await self._send(
            "POST",
            url,
            params={"uploadType": "media"},
            content=data,
            headers={"Content-Type": "application/octet-stream"},
            timeout=httpx.Timeout(self._upload_timeout),
        )
        return self._parse(response, Bundle)

    async def assign_track(
        self,
        package_name: str,
        edit_id: str,
        track_name: str,
        version_code: int,
        *,
        release_status: str = "draft",
    ) -> Track:
        payload = {
            "track": track_name,
            "releases": [
                {
                    "status": release_status,
                    "versionCodes": [str(version_code)],
                }
            ],
        }
        response = await self._send(
            "PUT",
            self._edit_url(package_name, f"/{edit_id}/tracks/{track_name}"),
            json=payload,
        )
        return self._parse(response, Track)

    async def commit_edit(self, package_name: str, edit_id: str) -> AppEdit:
        response = await self._send("POST", self._edit_url(package_name, f"/{edit_id}:commit"))
        return self._parse(response, AppEdit)

    async def delete_edit(self, package_name: str, edit_id: str) -> None:
        await self._send("DELETE", self._edit_url(package_name, f"/{edit_id}"))
