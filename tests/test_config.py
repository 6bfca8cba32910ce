"""Tests for settings loading."""

import json
from pathlib import Path

import pytest

from agency_finance.config import Settings, get_data_dir, load_settings


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("AGENCY_DATA_DIR", str(tmp_path))
    for name in (
        "AGENCY_DATABASE_URL", "AGENCY_LOG_LEVEL", "AGENCY_MONTH_LOCALE",
        "AGENCY_DAY_OVERFLOW", "AGENCY_OPEN_ENDED_CAP", "AGENCY_FRONTEND_DIST",
        "AGENCY_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestLoadSettings:
    def test_defaults(self, data_dir: Path) -> None:
        settings = load_settings()

        assert get_data_dir() == data_dir
        assert settings.month_locale == "pt-BR"
        assert settings.day_overflow == "roll"
        assert settings.open_ended_cap == 12
        assert settings.resolved_database_url() == f"sqlite:///{data_dir / 'agency.db'}"

    def test_settings_file(self, data_dir: Path) -> None:
        (data_dir / "settings.json").write_text(json.dumps({"month_locale": "en-US", "open_ended_cap": 6}))

        settings = load_settings()
        assert settings.month_locale == "en-US"
        assert settings.open_ended_cap == 6

    def test_env_overrides_file(self, data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (data_dir / "settings.json").write_text(json.dumps({"day_overflow": "roll"}))
        monkeypatch.setenv("AGENCY_DAY_OVERFLOW", "clamp")
        monkeypatch.setenv("AGENCY_OPEN_ENDED_CAP", "24")
        monkeypatch.setenv("AGENCY_CORS_ORIGINS", "https://app.example.com, https://admin.example.com")

        settings = load_settings()
        assert settings.day_overflow == "clamp"
        assert settings.open_ended_cap == 24
        assert settings.cors_origins == ["https://app.example.com", "https://admin.example.com"]

    def test_overrides_win(self, data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENCY_DATABASE_URL", "sqlite:///env.db")

        settings = load_settings(database_url="sqlite://")
        assert settings.resolved_database_url() == "sqlite://"

    def test_unreadable_file_is_ignored(self, data_dir: Path) -> None:
        (data_dir / "settings.json").write_text("{not json")
        assert load_settings() == Settings()

    @pytest.mark.parametrize(
        "name, value",
        [
            ("AGENCY_DAY_OVERFLOW", "wrap"),
            ("AGENCY_OPEN_ENDED_CAP", "many"),
            ("AGENCY_OPEN_ENDED_CAP", "0"),
            ("AGENCY_OPEN_ENDED_CAP", "-1"),
            ("AGENCY_MONTH_LOCALE", "fr-FR"),
        ],
    )
    def test_invalid_value(self, data_dir: Path, monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
        monkeypatch.setenv(name, value)
        with pytest.raises(RuntimeError, match="Invalid settings"):
            load_settings()


class TestHealth:
    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "ok", "database": True}
