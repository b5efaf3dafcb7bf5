"""JSON-file backed stores for the configuration and task records.

Both records are rewritten in full, pretty-printed, on every save. There is no
locking and no atomic rename: a single local process owns the files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from taskflow.models import Configuration, Task

logger = logging.getLogger(__name__)

_TASK_LIST = TypeAdapter(list[Task])


class StoreError(Exception):
    """Raised when a record cannot be read, parsed or written."""


class ConfigStoreError(StoreError):
    """The configuration record exists but cannot be used."""


class TaskStoreError(StoreError):
    """The task record exists but cannot be parsed."""


def _dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _write(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise StoreError(f"Failed to write {path}: {e}") from e


class ConfigStore:
    """Store for the credential and known repositories."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_or_create(self) -> Configuration:
        """Load the configuration, creating and persisting a default one if absent.

        Raises:
            ConfigStoreError: The record exists but is unreadable or malformed.
            StoreError: The default record could not be written.
        """
        if not self._path.exists():
            config = Configuration()
            self.save(config)
            logger.info("Created default configuration", extra={"path": str(self._path)})
            return config

        try:
            raw = self._path.read_bytes()
            config = Configuration.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise ConfigStoreError(f"Failed to parse configuration {self._path}: {e}") from e

        logger.info(
            "Configuration loaded",
            extra={
                "path": str(self._path),
                "repositories": len(config.repositories),
                "has_credential": config.credential is not None,
            },
        )
        return config

    def save(self, config: Configuration) -> None:
        _write(self._path, _dumps(config.model_dump(mode="json")))
        logger.debug("Configuration saved", extra={"path": str(self._path)})


class TaskStore:
    """Store for the ordered task list."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Task]:
        """Load all tasks in insertion order.

        A missing record is an empty list. A record that cannot be parsed raises
        `TaskStoreError`; callers decide whether to fall back to an empty list.
        """
        if not self._path.exists():
            return []

        try:
            raw = self._path.read_bytes()
            tasks = _TASK_LIST.validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise TaskStoreError(f"Failed to parse tasks {self._path}: {e}") from e

        logger.info("Tasks loaded", extra={"path": str(self._path), "count": len(tasks)})
        return tasks

    def save(self, tasks: list[Task]) -> None:
        payload = [task.model_dump(mode="json") for task in tasks]
        _write(self._path, _dumps(payload))
        logger.debug("Tasks saved", extra={"path": str(self._path), "count": len(tasks)})
