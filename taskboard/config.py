"""Configuration for taskboard.

Settings come from the environment (or a `.env` file in the working
directory). `load_settings()` reads the environment on every call so tests
can adjust variables with monkeypatch.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from taskboard.models.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CATEGORIES_PATH,
    DEFAULT_HTTP_TIMEOUT_SEC,
    DEFAULT_OWNER_NAME,
    DEFAULT_TASK_BY_ID_PATH,
    DEFAULT_TASKS_PATH,
)

load_dotenv()

DEFAULT_PREFERENCES_FILE = Path.home() / ".config" / "taskboard" / "preferences.json"


class Settings(BaseModel):
    """Client settings."""

    api_base_url: str = Field(DEFAULT_API_BASE_URL, description="Task store base URL")
    tasks_path: str = Field(DEFAULT_TASKS_PATH, description="Task collection path")
    task_by_id_path: str = Field(DEFAULT_TASK_BY_ID_PATH, description="Single task path template with {id}")
    categories_path: str = Field(DEFAULT_CATEGORIES_PATH, description="Category list path")
    http_timeout_sec: float = Field(DEFAULT_HTTP_TIMEOUT_SEC, description="Per-request timeout in seconds")
    owner_name: str = Field(DEFAULT_OWNER_NAME, description="Name shown in the board title")
    preferences_file: Path = Field(DEFAULT_PREFERENCES_FILE, description="Where the theme preference is kept")
    debug: bool = Field(False, description="Enable debug logging")


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_settings(preferences_file: Optional[Path] = None) -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    prefs_env = os.getenv("TASKBOARD_PREFERENCES_FILE")
    if preferences_file is None:
        preferences_file = Path(prefs_env).expanduser() if prefs_env else DEFAULT_PREFERENCES_FILE

    return Settings(
        api_base_url=_env_str("TASKBOARD_API_BASE_URL", DEFAULT_API_BASE_URL),
        tasks_path=_env_str("TASKBOARD_TASKS_PATH", DEFAULT_TASKS_PATH),
        task_by_id_path=_env_str("TASKBOARD_TASK_BY_ID_PATH", DEFAULT_TASK_BY_ID_PATH),
        categories_path=_env_str("TASKBOARD_CATEGORIES_PATH", DEFAULT_CATEGORIES_PATH),
        http_timeout_sec=_env_float("TASKBOARD_HTTP_TIMEOUT_SEC", DEFAULT_HTTP_TIMEOUT_SEC),
        owner_name=_env_str("TASKBOARD_OWNER_NAME", DEFAULT_OWNER_NAME),
        preferences_file=preferences_file,
        debug=os.getenv("DEBUG", "False").lower() == "true",
    )
