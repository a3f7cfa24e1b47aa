"""Contrato del cliente de publicación.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Los servicios (edición, subida, listados) se prueban con un fake en memoria
  sin acoplar el Core al cliente httpx concreto.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import AppEdit, Bundle, Track


@runtime_checkable
class PublisherApi(Protocol):
    """Operaciones tipadas sobre la Android Publisher API.

    Reglas de diseño:
    - Todas son asíncronas porque hacen I/O (HTTP).
    - Errores remotos salen como `ApiError`; nunca se reintenta.
    """

    async def open_edit(self, package_name: str) -> AppEdit: ...

    async def list_bundles(self, package_name: str, edit_id: str) -> list[Bundle]: ...

    async def list_tracks(self, package_name: str, edit_id: str) -> list[Track]: ...

    async def upload_bundle(self, package_name: str, edit_id: str, data: bytes) -> Bundle: ...

    async def assign_track(
        self,
        package_name: str,
        edit_id: str,
        track_name: str,
        version_code: int,
        *,
        release_status: str = "draft",
    ) -> Track: ...

    async def commit_edit(self, package_name: str, edit_id: str) -> AppEdit: ...

    async def delete_edit(self, package_name: str, edit_id: str) -> None: ...
