"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from taskflow.settings import TaskflowSettings


def test_settings_defaults_follow_xdg(tmp_path: Path) -> None:
    settings = TaskflowSettings()

    assert settings.data_dir == tmp_path / "xdg" / "taskflow"
    assert settings.config_file == settings.data_dir / "config.json"
    assert settings.tasks_file == settings.data_dir / "tasks.json"
    assert settings.log_file_path == settings.data_dir / "taskflow.log"
    assert settings.log_level == "INFO"
    assert settings.github_base_url == "https://api.github.com"


def test_settings_fall_back_to_home_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("XDG_CONFIG_HOME")
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    settings = TaskflowSettings()

    assert settings.data_dir == tmp_path / "home" / ".config" / "taskflow"


def test_settings_load_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKFLOW_DATA_DIR", str(tmp_path / "custom"))
    monkeypatch.setenv("TASKFLOW_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKFLOW_GITHUB_BASE_URL", "https://ghe.example.com/api/v3/")

    settings = TaskflowSettings()

    assert settings.data_dir == tmp_path / "custom"
    assert settings.log_level == "DEBUG"
    assert settings.github_base_url == "https://ghe.example.com/api/v3"


def test_settings_load_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "TASKFLOW_LOG_FILE=logs/taskflow.log",
                "TASKFLOW_LOG_LEVEL=WARNING",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = TaskflowSettings()

    assert settings.log_file_path == Path("logs/taskflow.log")
    assert settings.log_level == "WARNING"


def test_settings_reject_unknown_log_level() -> None:
    with pytest.raises(ValidationError):
        TaskflowSettings(log_level="LOUD")
