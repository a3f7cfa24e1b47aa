from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir, load_settings
from core.domain.models import RemoteErrorBody, Track
from core.errors import ApiError, CredentialError, InvalidInput, NetworkError, RequestTimeoutError


def test_defaults_point_at_android_publisher() -> None:
    settings = AppSettings(_env_file=None)

    assert settings.edit_url == "https://androidpublisher.googleapis.com/androidpublisher/v3/applications"
    assert settings.upload_url.startswith("https://androidpublisher.googleapis.com/upload/")
    assert settings.upload_timeout_seconds == 300
    assert settings.cred_file is None


def test_cred_file_env_fallbacks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/keys/adc.json")
    assert AppSettings(_env_file=None).cred_file == Path("/keys/adc.json")

    monkeypatch.setenv("GPLAY_CRED_FILE", "/keys/play.json")
    assert AppSettings(_env_file=None).cred_file == Path("/keys/play.json")


def test_dotenv_in_working_directory(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("GPLAY_UPLOAD_TIMEOUT_SECONDS=900\n", encoding="utf-8")

    assert AppSettings().upload_timeout_seconds == 900


def test_timeouts_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPLAY_HTTP_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)


def test_load_settings_reports_invalid_field(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPLAY_HTTP_TIMEOUT_SECONDS", "abc")

    with pytest.raises(InvalidInput, match="http_timeout_seconds") as excinfo:
        load_settings()
    assert isinstance(excinfo.value.__cause__, ValidationError)
    assert excinfo.value.exit_code == 2


def test_user_config_dir_honours_xdg(tmp_path: Path) -> None:
    assert get_user_config_dir() == tmp_path / "xdg" / "gplay"


def test_track_wire_format() -> None:
    track = Track.model_validate(
        {
            "track": "production",
            "releases": [
                {"name": "1.2", "status": "completed", "versionCodes": ["10", "11"]},
                {"status": "draft"},
            ],
        }
    )

    assert track.name == "production"
    assert [release.version_codes for release in track.releases] == [["10", "11"], None]
    assert track.model_dump(by_alias=True, exclude_none=True)["track"] == "production"


def test_remote_error_code_prefers_status() -> None:
    body = RemoteErrorBody.model_validate(
        {"error": {"code": 409, "message": "dup", "status": "ALREADY_EXISTS", "errors": [{"reason": "conflict"}]}}
    )

    assert body.error.remote_code() == "ALREADY_EXISTS"


def test_exit_codes_are_distinct() -> None:
    codes = {
        InvalidInput("x").exit_code,
        CredentialError("x").exit_code,
        ApiError(500, "x").exit_code,
        RequestTimeoutError("x").exit_code,
        NetworkError("x").exit_code,
    }

    assert len(codes) == 5
    assert 0 not in codes
    assert isinstance(RequestTimeoutError("x"), TimeoutError)
