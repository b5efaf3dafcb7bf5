"""Task manager: the single owner of session state.

Local persistence always happens first and is never rolled back because of a
GitHub failure. Remote issue creation is best-effort: success attaches the
issue number to the task, failure is reported back to the caller as a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from taskflow.board import Board, build_board
from taskflow.github.client import GitHubClient, RemoteError
from taskflow.models import (
    STATUS_ORDER,
    Configuration,
    Priority,
    Repository,
    Status,
    Task,
    format_created_at,
)
from taskflow.store import ConfigStore, TaskStore, TaskStoreError

logger = logging.getLogger(__name__)

Connector = Callable[[str], GitHubClient | None]


class RemoteUnavailable(Exception):
    """Raised when an operation needs GitHub but no client (or repository) is set up."""


@dataclass(eq=False)
class RepositoryVerificationError(Exception):
    """Raised when a repository cannot be reached; it is not added."""

    owner: str
    name: str
    reason: str

    def __str__(self) -> str:
        return f"Could not access repository {self.owner}/{self.name}: {self.reason}"


@dataclass
class AppState:
    """Everything the session knows; owned by exactly one TaskManager."""

    config: Configuration
    tasks: list[Task] = field(default_factory=list)
    github: GitHubClient | None = None
    current_repository: Repository | None = None


@dataclass(frozen=True, slots=True)
class TaskCreated:
    """Outcome of adding a task."""

    task: Task
    mirror_error: str | None = None

    @property
    def mirrored(self) -> bool:
        return self.task.github_issue_number is not None


class TaskManager:
    """Task creation, status updates, repository management and GitHub mirroring."""

    def __init__(
        self,
        *,
        state: AppState,
        config_store: ConfigStore,
        task_store: TaskStore,
        connector: Connector,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._state = state
        self._config_store = config_store
        self._task_store = task_store
        self._connector = connector
        self._clock = clock

    @classmethod
    def load(
        cls,
        *,
        config_store: ConfigStore,
        task_store: TaskStore,
        connector: Connector,
        clock: Callable[[], datetime] = datetime.now,
    ) -> TaskManager:
        """Load both records and connect to GitHub when a credential is stored.

        A malformed configuration record is fatal (ConfigStoreError propagates).
        A malformed task record is logged and replaced by an empty list.
        """
        config = config_store.load_or_create()
        github = connector(config.credential) if config.credential else None

        try:
            tasks = task_store.load()
        except TaskStoreError as e:
            logger.warning(
                "Task record unreadable; starting with no tasks", extra={"error": str(e)}
            )
            tasks = []

        state = AppState(config=config, tasks=tasks, github=github)
        return cls(
            state=state,
            config_store=config_store,
            task_store=task_store,
            connector=connector,
            clock=clock,
        )

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def repositories(self) -> list[Repository]:
        return list(self._state.config.repositories)

    @property
    def current_repository(self) -> Repository | None:
        return self._state.current_repository

    @property
    def has_remote(self) -> bool:
        return self._state.github is not None

    @property
    def has_credential(self) -> bool:
        return self._state.config.credential is not None

    @property
    def can_mirror(self) -> bool:
        """True when a new task may be mirrored as a GitHub issue."""
        return self._state.github is not None and self._state.current_repository is not None

    # ---- configuration ----

    def set_credential(self, token: str) -> bool:
        """Persist a new token and reconnect. Returns True if the connection succeeded."""

        token = token.strip()
        if not token:
            raise ValueError("Token cannot be empty")

        self._state.config.credential = token
        self._config_store.save(self._state.config)

        if self._state.github is not None:
            self._state.github.close()
        self._state.github = self._connector(token)
        return self._state.github is not None

    def add_repository(self, owner: str, name: str, display_name: str | None = None) -> Repository:
        """Verify and append a repository to the configuration.

        Raises:
            RemoteUnavailable: No GitHub client; repositories are only added once verified.
            RepositoryVerificationError: GitHub could not reach the repository.
        """
        repo = Repository(owner=owner, name=name, display_name=display_name or "")

        github = self._state.github
        if github is None:
            raise RemoteUnavailable("Connect to GitHub before adding a repository")

        try:
            github.verify_repository(repo.owner, repo.name)
        except RemoteError as e:
            logger.warning(
                "Repository verification failed",
                extra={"repo": repo.full_name, "error": str(e)},
            )
            raise RepositoryVerificationError(repo.owner, repo.name, str(e)) from e

        self._state.config.repositories.append(repo)
        self._config_store.save(self._state.config)
        logger.info("Repository added", extra={"repo": repo.full_name})
        return repo

    def select_repository(self, index: int) -> Repository:
        repositories = self._state.config.repositories
        if not 0 <= index < len(repositories):
            raise IndexError(f"No repository at position {index}")

        repo = repositories[index].model_copy()
        self._state.current_repository = repo
        logger.info("Repository selected", extra={"repo": repo.full_name})
        return repo

    # ---- tasks ----

    def _next_id(self) -> int:
        return max((task.id for task in self._state.tasks), default=-1) + 1

    def add_task(
        self,
        *,
        title: str,
        description: str = "",
        priority: Priority = Priority.LOW,
        due_date: str = "",
        mirror: bool = False,
    ) -> TaskCreated:
        """Create a Todo task, optionally mirror it to GitHub, then save all tasks.

        The save is synchronous; a StoreError propagates after the task has been
        appended in memory.
        """
        task = Task(
            id=self._next_id(),
            title=title,
            description=description,
            priority=priority,
            status=Status.TODO,
            due_date=due_date,
            created_at=format_created_at(self._clock()),
        )

        mirror_error: str | None = None
        github = self._state.github
        repo = self._state.current_repository
        if mirror and github is not None and repo is not None:
            try:
                task.github_issue_number = github.create_issue(
                    repo.owner, repo.name, title=task.title, body=task.description
                )
            except RemoteError as e:
                mirror_error = str(e)
                logger.warning(
                    "Could not mirror task as GitHub issue",
                    extra={"task_id": task.id, "repo": repo.full_name, "error": mirror_error},
                )

        self._state.tasks.append(task)
        self._task_store.save(self._state.tasks)

        logger.info(
            "Task added",
            extra={
                "task_id": task.id,
                "title": task.title,
                "github_issue_number": task.github_issue_number,
            },
        )
        return TaskCreated(task=task, mirror_error=mirror_error)

    def list_tasks(self) -> list[Task]:
        return list(self._state.tasks)

    def update_status(self, index: int, status: Status) -> Task:
        """Set the status of the task at `index` in the listing and save all tasks."""

        tasks = self._state.tasks
        if not 0 <= index < len(tasks):
            raise IndexError(f"No task at position {index}")

        task = tasks[index]
        previous = task.status
        task.status = status
        self._task_store.save(tasks)

        logger.info(
            "Task status updated",
            extra={"task_id": task.id, "from": previous.value, "to": status.value},
        )
        return task

    def board(self) -> Board:
        return build_board(self._state.tasks)

    # ---- project ----

    def _require_remote(self) -> tuple[GitHubClient, Repository]:
        github = self._state.github
        repo = self._state.current_repository
        if github is None:
            raise RemoteUnavailable("Not connected to GitHub")
        if repo is None:
            raise RemoteUnavailable("No repository selected")
        return github, repo

    def project_url(self) -> str:
        github, repo = self._require_remote()
        return github.projects_url(repo.owner, repo.name)

    def create_tracking_issue(self) -> int:
        """Create one GitHub issue describing the board columns.

        Advisory only: nothing is stored locally. RemoteError propagates.
        """
        github, repo = self._require_remote()
        board = self.board()

        lines = [
            f"Task board for **{repo.display_name}**, tracked with TaskFlow.",
            "",
            "## Columns",
            "",
        ]
        lines.extend(f"- {status.label} ({len(board[status])})" for status in STATUS_ORDER)
        body = "\n".join(lines) + "\n"

        number = github.create_issue(
            repo.owner, repo.name, title=f"TaskFlow board: {repo.display_name}", body=body
        )
        logger.info(
            "Tracking issue created", extra={"repo": repo.full_name, "issue_number": number}
        )
        return number

    def close(self) -> None:
        if self._state.github is not None:
            self._state.github.close()
            self._state.github = None
