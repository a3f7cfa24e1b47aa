"""Taxonomía de errores del Core.

Por qué aquí:
- Los adaptadores traducen excepciones de librerías (httpx, google-auth) a
  estos tipos; la CLI solo conoce `GplayError`.
- Cada tipo lleva su propio exit code para pipelines de CI.
"""

from __future__ import annotations


class GplayError(Exception):
    """Base de todos los errores que la CLI reporta al operador."""

    exit_code = 1
    # Indicación opcional para el operador (se imprime tras el mensaje).
    hint: str | None = None


class InvalidInput(GplayError):
    """Flags inválidos, ficheros ausentes/vacíos o track desconocido."""

    exit_code = 2


class CredentialError(GplayError):
    """La clave de service account no se pudo leer o fue rechazada."""

    exit_code = 3


class ApiError(GplayError):
    """Respuesta no-2xx del servicio remoto.

    `message` se conserva tal cual lo devuelve el servicio.
    """

    exit_code = 4

    def __init__(self, status: int, message: str, *, code: str | None = None) -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.code:
            return f"HTTP {self.status} ({self.code}): {self.message}"
        return f"HTTP {self.status}: {self.message}"


class RequestTimeoutError(GplayError, TimeoutError):
    """Una llamada de red excedió el timeout configurado."""

    exit_code = 5


class NetworkError(GplayError):
    """Fallo de transporte (DNS, conexión rechazada, TLS...)."""

    exit_code = 6
