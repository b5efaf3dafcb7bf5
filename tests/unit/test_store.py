"""Unit tests for local JSON persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskflow.models import Configuration, Priority, Repository, Status, Task
from taskflow.store import ConfigStore, ConfigStoreError, StoreError, TaskStore, TaskStoreError


def _task(task_id: int, title: str, status: Status = Status.TODO) -> Task:
    return Task(
        id=task_id,
        title=title,
        description="Some détails",
        priority=Priority.MEDIUM,
        status=status,
        due_date="tomorrow",
        created_at="October 19, 2026",
    )


def test_config_store_creates_default_record(config_store: ConfigStore) -> None:
    assert not config_store.path.exists()

    config = config_store.load_or_create()

    assert config == Configuration()
    raw = json.loads(config_store.path.read_text(encoding="utf-8"))
    assert raw == {"credential": None, "repositories": []}


def test_config_store_roundtrip(config_store: ConfigStore) -> None:
    config = Configuration(
        credential="ghp_token",
        repositories=[Repository(owner="octo-org", name="octo-repo")],
    )
    config_store.save(config)

    loaded = config_store.load_or_create()

    assert loaded == config
    assert loaded.repositories[0].display_name == "octo-repo"


def test_config_store_malformed_record_is_fatal(config_store: ConfigStore) -> None:
    config_store.path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigStoreError):
        config_store.load_or_create()

    # The broken record is left untouched for the user to inspect.
    assert config_store.path.read_text(encoding="utf-8") == "{not json"


def test_config_store_invalid_utf8_is_fatal(config_store: ConfigStore) -> None:
    config_store.path.write_bytes('{"credential": "é'.encode()[:-1])

    with pytest.raises(ConfigStoreError):
        config_store.load_or_create()


def test_config_store_save_is_pretty_printed(config_store: ConfigStore) -> None:
    config_store.save(Configuration(credential="x"))

    text = config_store.path.read_text(encoding="utf-8")
    assert text == '{\n  "credential": "x",\n  "repositories": []\n}\n'


def test_task_store_missing_record_is_empty(task_store: TaskStore) -> None:
    assert task_store.load() == []


@pytest.mark.parametrize(
    "content",
    [
        b"[{broken",
        b'{"tasks": []}',
        b'[{"id": 0}]',
        # write cut off inside a multibyte character
        '[{"title": "dé'.encode()[:-1],
    ],
)
def test_task_store_malformed_record_raises(task_store: TaskStore, content: bytes) -> None:
    task_store.path.write_bytes(content)

    with pytest.raises(TaskStoreError):
        task_store.load()


def test_task_store_roundtrip_is_byte_identical(task_store: TaskStore) -> None:
    tasks = [_task(0, "Write docs"), _task(1, "Review", Status.DONE)]
    tasks[1].github_issue_number = 12

    task_store.save(tasks)
    first = task_store.path.read_bytes()

    task_store.save(task_store.load())
    second = task_store.path.read_bytes()

    assert first == second
    assert task_store.load() == tasks


def test_task_store_record_shape(task_store: TaskStore) -> None:
    task_store.save([_task(0, "Write docs")])

    raw = json.loads(task_store.path.read_text(encoding="utf-8"))
    assert raw == [
        {
            "id": 0,
            "title": "Write docs",
            "description": "Some détails",
            "priority": "Medium",
            "status": "Todo",
            "due_date": "tomorrow",
            "github_issue_number": None,
            "created_at": "October 19, 2026",
        }
    ]


def test_task_store_write_failure_raises_store_error(tmp_path: Path) -> None:
    target = tmp_path / "occupied"
    target.mkdir()

    with pytest.raises(StoreError):
        TaskStore(target).save([_task(0, "Write docs")])
