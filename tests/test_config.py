from pathlib import Path

import pytest

from taskboard.config import DEFAULT_PREFERENCES_FILE, Settings, load_settings

ENV_VARS = (
    "TASKBOARD_API_BASE_URL",
    "TASKBOARD_TASKS_PATH",
    "TASKBOARD_TASK_BY_ID_PATH",
    "TASKBOARD_CATEGORIES_PATH",
    "TASKBOARD_HTTP_TIMEOUT_SEC",
    "TASKBOARD_OWNER_NAME",
    "TASKBOARD_PREFERENCES_FILE",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment():
    settings = load_settings()
    assert settings == Settings()
    assert settings.api_base_url == "http://localhost:8000"
    assert settings.task_by_id_path == "/tasks/{id}"
    assert settings.http_timeout_sec == 10.0
    assert settings.preferences_file == DEFAULT_PREFERENCES_FILE
    assert settings.debug is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TASKBOARD_API_BASE_URL", " https://tasks.example.com ")
    monkeypatch.setenv("TASKBOARD_TASKS_PATH", "/v2/tasks")
    monkeypatch.setenv("TASKBOARD_HTTP_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("TASKBOARD_OWNER_NAME", "Alex")
    monkeypatch.setenv("DEBUG", "True")

    settings = load_settings()

    assert settings.api_base_url == "https://tasks.example.com"
    assert settings.tasks_path == "/v2/tasks"
    assert settings.http_timeout_sec == 2.5
    assert settings.owner_name == "Alex"
    assert settings.debug is True


@pytest.mark.parametrize("value", ["", "abc", "0", "-3"])
def test_invalid_timeout_falls_back_to_default(monkeypatch, value):
    monkeypatch.setenv("TASKBOARD_HTTP_TIMEOUT_SEC", value)
    assert load_settings().http_timeout_sec == 10.0


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("TASKBOARD_OWNER_NAME", "   ")
    monkeypatch.setenv("TASKBOARD_CATEGORIES_PATH", "")
    settings = load_settings()
    assert settings.owner_name == "Student"
    assert settings.categories_path == "/categories"


def test_preferences_file_from_env_and_argument(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKBOARD_PREFERENCES_FILE", str(tmp_path / "env.json"))
    assert load_settings().preferences_file == tmp_path / "env.json"
    assert load_settings(Path("/tmp/explicit.json")).preferences_file == Path("/tmp/explicit.json")
