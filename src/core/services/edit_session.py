"""Edit session lifecycle.

An edit is the remote transaction that groups uploads and track changes. The
publisher only applies them on commit. This module keeps the local view of
that lifecycle explicit:

    UNINITIATED -> OPENED -> COMMITTED
                         \\-> DISCARDED   (read-only listings)

There is no abort transition for a failed upload: the edit is simply left open
and the service expires it on its own.
"""

from __future__ import annotations

from enum import Enum

from core.errors import InvalidInput
from core.interfaces.publisher import PublisherApi


class EditState(str, Enum):
    UNINITIATED = "uninitiated"
    OPENED = "opened"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class EditSession:
    """Tracks a single edit for one package during one command."""

    def __init__(self, api: PublisherApi, package_name: str) -> None:
        self._api = api
        self.package_name = package_name
        self.state = EditState.UNINITIATED
        self._edit_id: str | None = None

    @property
    def edit_id(self) -> str:
        if self.state is not EditState.OPENED or self._edit_id is None:
            raise InvalidInput(f"edit session for {self.package_name} is {self.state.value}, not opened")
        return self._edit_id

    async def open(self) -> str:
        if self.state is not EditState.UNINITIATED:
            raise InvalidInput(f"edit session for {self.package_name} was already {self.state.value}")
        edit = await self._api.open_edit(self.package_name)
        self._edit_id = edit.id
        self.state = EditState.OPENED
        return edit.id

    async def commit(self) -> None:
        edit_id = self.edit_id
        await self._api.commit_edit(self.package_name, edit_id)
        self.state = EditState.COMMITTED

    async def discard(self) -> None:
        """Delete the edit without applying anything (listings only)."""

        edit_id = self.edit_id
        await self._api.delete_edit(self.package_name, edit_id)
        self.state = EditState.DISCARDED
