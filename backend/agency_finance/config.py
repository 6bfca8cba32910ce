import json
import os
from pathlib import Path
from typing import Literal
from pydantic import BaseModel, Field, ValidationError

ENV_PREFIX = "AGENCY_"


def get_data_dir() -> Path:
    """
    Directory holding settings.json and the default SQLite database.

    AGENCY_DATA_DIR if set (e.g. /data in Docker), else ~/.config/agency-finance.
    """
    data_dir = os.environ.get(f"{ENV_PREFIX}DATA_DIR")
    return Path(data_dir) if data_dir else Path.home() / ".config" / "agency-finance"


class Settings(BaseModel):
    """Application settings."""
    database_url: str | None = None  # None = SQLite file in the data directory
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    log_level: str = "INFO"

    # Month labels on charts ("jan. de 24" or "Jan 24")
    month_locale: Literal["pt-BR", "en-US"] = "pt-BR"

    # What a due day that does not exist in a month resolves to:
    # "roll" carries the surplus into the next month (Feb 31 -> Mar 2/3),
    # "clamp" uses the last day of the month
    day_overflow: Literal["roll", "clamp"] = "roll"

    # Maximum entries generated for an obligation without end date
    open_ended_cap: int = Field(default=12, ge=1)

    # Built frontend to serve, if present
    frontend_dist: str | None = None

    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{get_data_dir() / 'agency.db'}"


# Settings that may be overridden from the environment, e.g. AGENCY_LOG_LEVEL
_ENV_FIELDS = (
    "database_url",
    "log_level",
    "month_locale",
    "day_overflow",
    "open_ended_cap",
    "frontend_dist",
)


def _load_settings_file(path: Path) -> dict:
    """Load settings.json, ignoring a missing or unreadable file."""
    if not path.exists():
        return {}
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def load_settings(**overrides) -> Settings:
    """
    Build settings.

    Priority: overrides > env vars > settings.json > defaults.
    """
    data = _load_settings_file(get_data_dir() / "settings.json")

    for field in _ENV_FIELDS:
        value = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if value is not None:
            data[field] = value

    origins = os.environ.get(f"{ENV_PREFIX}CORS_ORIGINS")
    if origins is not None:
        data["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    data.update(overrides)
    try:
        return Settings(**data)
    except ValidationError as e:
        raise RuntimeError(f"Invalid settings: {e}") from e
