"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y auth para todas las llamadas a la API.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
- google-auth necesita un transport propio; lo implementamos sobre httpx para
  no arrastrar un segundo stack HTTP.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
from google.auth import exceptions as google_exceptions
from google.auth import transport as google_transport

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    token: str | None = None,
    timeout_seconds: float | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las operaciones se comporten igual.
    - `transport` permite sustituir la red por un stub en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds or settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class _HttpxAuthResponse(google_transport.Response):
    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    @property
    def data(self) -> bytes:
        return self._response.content


class HttpxAuthRequest(google_transport.Request):
    """Transport de google-auth sobre un `httpx.Client` síncrono.

    El intercambio de token ocurre una vez por invocación, antes de la cadena
    asíncrona de llamadas a la API.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._timeout = timeout_seconds or self._settings.http_timeout_seconds
        self._transport = transport

    def __call__(
        self,
        url: str,
        method: str = "GET",
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> google_transport.Response:
        try:
            with httpx.Client(
                timeout=httpx.Timeout(timeout or self._timeout),
                headers={"User-Agent": self._settings.user_agent},
                transport=self._transport,
            ) as client:
                response = client.request(method, url, content=body, headers=dict(headers or {}))
        except httpx.HTTPError as exc:
            raise google_exceptions.TransportError(exc) from exc
        return _HttpxAuthResponse(response)
