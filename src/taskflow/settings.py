"""Process settings for TaskFlow.

Settings are loaded from:
- environment variables prefixed with `TASKFLOW_`
- and a local `.env` file (if present)

The GitHub token is not a setting: it is entered interactively on first run and
persisted in the configuration record inside the data directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "taskflow"


def default_data_dir() -> Path:
    """Per-user configuration directory, following XDG conventions."""

    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_DIR_NAME


class TaskflowSettings(BaseSettings):
    """Settings for the TaskFlow CLI.

    Environment variables:
    - TASKFLOW_DATA_DIR         (optional)
    - TASKFLOW_LOG_LEVEL        (optional)
    - TASKFLOW_LOG_FILE         (optional)
    - TASKFLOW_GITHUB_BASE_URL  (optional, GitHub Enterprise API)
    - TASKFLOW_GITHUB_WEB_URL   (optional, GitHub Enterprise web UI)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `TaskflowSettings(_env_file=path_to_env)`.
    """

    data_dir: Path = Field(
        default_factory=default_data_dir,
        description="Directory holding config.json, tasks.json and the log file",
    )

    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )
    log_file: Path | None = Field(
        default=None,
        description="Log file path (defaults to taskflow.log inside the data directory)",
    )

    github_base_url: str = Field(
        default="https://api.github.com",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )
    github_web_url: str = Field(
        default="https://github.com",
        description="GitHub web URL used when opening a project in the browser",
    )

    model_config = SettingsConfigDict(
        env_prefix="TASKFLOW_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return normalized

    @field_validator("github_base_url", "github_web_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @property
    def config_file(self) -> Path:
        """Path of the persisted configuration record."""

        return self.data_dir / "config.json"

    @property
    def tasks_file(self) -> Path:
        """Path of the persisted task record."""

        return self.data_dir / "tasks.json"

    @property
    def log_file_path(self) -> Path:
        return self.log_file or self.data_dir / "taskflow.log"
