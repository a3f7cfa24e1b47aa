from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from core.config import AppSettings
from core.domain.models import AppEdit, Bundle, Track
from core.errors import ApiError

EDIT_URL = "https://play.test/androidpublisher/v3/applications"
UPLOAD_URL = "https://play.test/upload/androidpublisher/v3/applications"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in (
        "GPLAY_CRED_FILE",
        "GOOGLE_APPLICATION_CREDENTIALS",
        "GPLAY_HTTP_TIMEOUT_SECONDS",
        "GPLAY_UPLOAD_TIMEOUT_SECONDS",
        "GPLAY_EDIT_URL",
        "GPLAY_UPLOAD_URL",
        "NO_CLI_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    # Ni el .env del proyecto ni el del usuario deben influir.
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        edit_url=EDIT_URL,
        upload_url=UPLOAD_URL,
        http_timeout_seconds=5,
        upload_timeout_seconds=10,
    )


class FakePublisherApi:
    """In-memory PublisherApi recording every call in order."""

    def __init__(self, tracks: list[str] | None = None, next_version: int = 42) -> None:
        self.calls: list[str] = []
        self.track_names = tracks if tracks is not None else ["internal", "alpha", "production"]
        self.next_version = next_version
        self.uploaded: list[bytes] = []
        self.assigned: list[tuple[str, int, str]] = []
        self.failures: dict[str, Exception] = {}
        self._edits = 0

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    async def open_edit(self, package_name: str) -> AppEdit:
        self._record("open_edit")
        self._edits += 1
        return AppEdit(id=f"edit-{self._edits}")

    async def list_bundles(self, package_name: str, edit_id: str) -> list[Bundle]:
        self._record("list_bundles")
        return [Bundle(version_code=3, sha256="c3"), Bundle(version_code=1, sha256="a1")]

    async def list_tracks(self, package_name: str, edit_id: str) -> list[Track]:
        self._record("list_tracks")
        return [Track(name=name) for name in self.track_names]

    async def upload_bundle(self, package_name: str, edit_id: str, data: bytes) -> Bundle:
        self._record("upload_bundle")
        if data in self.uploaded:
            raise ApiError(409, "APK specifies a version code that has already been used.", code="ALREADY_EXISTS")
        self.uploaded.append(data)
        version = self.next_version
        self.next_version += 1
        return Bundle(version_code=version, sha256="f" * 64)

    async def assign_track(
        self,
        package_name: str,
        edit_id: str,
        track_name: str,
        version_code: int,
        *,
        release_status: str = "draft",
    ) -> Track:
        self._record("assign_track")
        self.assigned.append((track_name, version_code, release_status))
        return Track(name=track_name)

    async def commit_edit(self, package_name: str, edit_id: str) -> AppEdit:
        self._record("commit_edit")
        return AppEdit(id=edit_id)

    async def delete_edit(self, package_name: str, edit_id: str) -> None:
        self._record("delete_edit")


@pytest.fixture
def fake_api() -> FakePublisherApi:
    return FakePublisherApi()


class PlayService:
    """`httpx.MockTransport` handler emulating the edits endpoints."""

    def __init__(self, tracks: tuple[str, ...] = ("internal", "production")) -> None:
        self.requests: list[httpx.Request] = []
        self.tracks = list(tracks)
        self.used_versions: set[int] = set()
        self.next_version = 7
        self.upload_error: Callable[[httpx.Request], httpx.Response] | None = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]

    @staticmethod
    def _json(status: int, payload: Any) -> httpx.Response:
        return httpx.Response(status, content=json.dumps(payload).encode(), headers={"Content-Type": "application/json"})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path.endswith("/edits"):
            return self._json(200, {"id": "edit-1", "expiryTimeSeconds": "1700000000"})
        if request.method == "GET" and path.endswith("/bundles"):
            return self._json(200, {"kind": "androidpublisher#bundlesListResponse", "bundles": [
                {"versionCode": 5, "sha1": "s1", "sha256": "aa"},
                {"versionCode": 6, "sha1": "s2", "sha256": "bb"},
            ]})
        if request.method == "GET" and path.endswith("/tracks"):
            return self._json(200, {"kind": "androidpublisher#tracksListResponse", "tracks": [
                {"track": name, "releases": [{"status": "completed", "versionCodes": ["5"]}]}
                for name in self.tracks
            ]})
        if request.method == "POST" and path.startswith("/upload/"):
            if self.upload_error is not None:
                return self.upload_error(request)
            version = self.next_version
            if version in self.used_versions:
                return self._json(409, {"error": {
                    "code": 409,
                    "message": "APK specifies a version code that has already been used.",
                    "status": "ALREADY_EXISTS",
                }})
            self.used_versions.add(version)
            return self._json(200, {"versionCode": version, "sha1": "x", "sha256": "deadbeef"})
        if request.method == "PUT" and "/tracks/" in path:
            return self._json(200, json.loads(request.content))
        if request.method == "POST" and path.endswith(":commit"):
            return self._json(200, {"id": "edit-1"})
        if request.method == "DELETE":
            return httpx.Response(204)
        return self._json(404, {"error": {"code": 404, "message": f"no route for {path}", "status": "NOT_FOUND"}})


@pytest.fixture
def play_service() -> PlayService:
    return PlayService()
