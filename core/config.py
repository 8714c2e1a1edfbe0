# core/config.py
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

APP_TITLE = "Study Tracker"
PAGE_ICON = "📚"


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = ""
    db_name: str = "study_tracker"
    mongo_timeout_ms: int = 8000
    app_tz: str = ""
    user_id: str = ""
    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def durable_enabled(self) -> bool:
        return bool(self.mongo_uri)


def _env(name: str, default: str = "") -> str:
    # the tracker historically read lower-case keys too (mongo_uri)
    return (os.getenv(name) or os.getenv(name.lower()) or default).strip()


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> Settings:
    """Build settings from the environment, then apply non-empty overrides
    (the dashboard passes its Streamlit secrets here)."""
    settings = Settings(
        mongo_uri=_env("MONGO_URI"),
        db_name=_env("DB_NAME", "study_tracker"),
        mongo_timeout_ms=int(_env("MONGO_TIMEOUT_MS", "8000")),
        app_tz=_env("APP_TZ"),
        user_id=_env("USER_ID"),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        log_format=_env("LOG_FORMAT", "text").lower(),
    )
    if not overrides:
        return settings

    keys = {
        "MONGO_URI": "mongo_uri", "DB_NAME": "db_name",
        "MONGO_TIMEOUT_MS": "mongo_timeout_ms", "APP_TZ": "app_tz",
        "USER_ID": "user_id", "LOG_LEVEL": "log_level", "LOG_FORMAT": "log_format",
    }
    changes = {}
    for key, field_name in keys.items():
        value = overrides.get(key)
        if value is None or str(value).strip() == "":
            continue
        value = str(value).strip()
        changes[field_name] = int(value) if field_name == "mongo_timeout_ms" else value
    return replace(settings, **changes)
