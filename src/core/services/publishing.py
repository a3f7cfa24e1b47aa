"""Publishing orchestration: bundle upload and read-only listings.

The CLI delegates every API sequence to these helpers so that side effects
(printing, colors) stay in the CLI layer and the call chain can be exercised
against a fake `PublisherApi` in tests.

Upload sequence:
    open edit -> check track -> upload bundle -> assign track -> commit

Nothing here retries. A failure after the bundle was uploaded leaves that
version in an uncommitted edit; the error carries a hint for the operator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from core.domain.models import Bundle, Track, UploadResult
from core.errors import GplayError, InvalidInput
from core.interfaces.publisher import PublisherApi
from core.services.edit_session import EditSession

RELEASE_STATUSES: tuple[str, ...] = ("draft", "inProgress", "halted", "completed")


@dataclass
class PublishHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    info: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None

    def emit_info(self, message: str) -> None:
        if self.info:
            self.info(message)

    def emit_warning(self, message: str) -> None:
        if self.warning:
            self.warning(message)


@dataclass
class PublishContext:
    """Per-invocation state passed through the call chain."""

    api: PublisherApi
    package_name: str
    hooks: PublishHooks = field(default_factory=PublishHooks)

    def new_session(self) -> EditSession:
        return EditSession(self.api, self.package_name)


def validate_bundle_file(bundle_file: Path) -> None:
    """Reject missing, non-regular or empty bundle files without reading them."""

    if not bundle_file.exists():
        raise InvalidInput(f"bundle file not found: {bundle_file}")
    if not bundle_file.is_file():
        raise InvalidInput(f"bundle path is not a regular file: {bundle_file}")
    if bundle_file.stat().st_size == 0:
        raise InvalidInput(f"bundle file is empty: {bundle_file}")


def read_bundle_file(bundle_file: Path) -> bytes:
    validate_bundle_file(bundle_file)
    try:
        data = bundle_file.read_bytes()
    except OSError as exc:
        raise InvalidInput(f"unable to read bundle file {bundle_file}: {exc}") from exc
    if not data:
        raise InvalidInput(f"bundle file is empty: {bundle_file}")
    return data


def _require_track(tracks: list[Track], track_name: str, package_name: str) -> None:
    names = [t.name for t in tracks]
    if track_name not in names:
        available = ", ".join(names) if names else "none"
        raise InvalidInput(
            f"track '{track_name}' is not available for {package_name} (available: {available})"
        )


async def upload_bundle(
    ctx: PublishContext,
    *,
    bundle_file: Path,
    track_name: str,
    release_status: str = "draft",
) -> UploadResult:
    if release_status not in RELEASE_STATUSES:
        raise InvalidInput(
            f"invalid release status '{release_status}' (expected one of: {', '.join(RELEASE_STATUSES)})"
        )
    # Validated before any network call.
    data = read_bundle_file(bundle_file)
    ctx.hooks.emit_info(f"Read bundle file '{bundle_file}' ({len(data)} bytes)")

    session = ctx.new_session()
    edit_id = await session.open()
    ctx.hooks.emit_info(f"Opened edit {edit_id}")

    tracks = await ctx.api.list_tracks(ctx.package_name, edit_id)
    _require_track(tracks, track_name, ctx.package_name)

    ctx.hooks.emit_info("Uploading bundle...")
    bundle = await ctx.api.upload_bundle(ctx.package_name, edit_id, data)
    ctx.hooks.emit_info(f"Version {bundle.version_code} [{bundle.sha256 or '-'}] uploaded")

    try:
        await ctx.api.assign_track(
            ctx.package_name,
            edit_id,
            track_name,
            bundle.version_code,
            release_status=release_status,
        )
        ctx.hooks.emit_info(f"Assigned version {bundle.version_code} to track '{track_name}'")
        ctx.hooks.emit_info("Committing upload")
        await session.commit()
    except GplayError as exc:
        exc.hint = (
            f"version {bundle.version_code} was uploaded to edit {edit_id} but the edit was not "
            "committed; inspect the Play Console before uploading again"
        )
        raise

    return UploadResult(
        version_code=bundle.version_code,
        sha256=bundle.sha256,
        track=track_name,
        edit_id=edit_id,
    )


async def list_bundles(ctx: PublishContext) -> list[Bundle]:
    """Bundles of the package in service order. The edit is discarded, never committed."""

    session = ctx.new_session()
    edit_id = await session.open()
    bundles = await ctx.api.list_bundles(ctx.package_name, edit_id)
    await session.discard()
    return bundles


async def list_tracks(ctx: PublishContext) -> list[Track]:
    """Tracks of the package in service order. The edit is discarded, never committed."""

    session = ctx.new_session()
    edit_id = await session.open()
    tracks = await ctx.api.list_tracks(ctx.package_name, edit_id)
    await session.discard()
    return tracks
