#!/usr/bin/env python3
"""Programmatic task creation example.

This demonstrates using the TaskFlow components directly, without the menu:

* load settings from the environment / `.env`
* load the stored configuration and tasks
* add a task, mirroring it as a GitHub issue when a token and repository exist
* print the status board

The repository is passed as an argument and must already be in `config.json`
(add it once through the interactive `taskflow` menu).
"""

from __future__ import annotations

import argparse
import functools
from collections.abc import Sequence

from rich.console import Console

from taskflow.board import render_board
from taskflow.github.client import GitHubClient
from taskflow.logging import configure_logging
from taskflow.manager import TaskManager
from taskflow.models import Priority
from taskflow.settings import TaskflowSettings
from taskflow.store import ConfigStore, TaskStore


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Add a task (programmatic example).")
    parser.add_argument("--repo", default=None, help='Known repository in the form "owner/repo"')
    parser.add_argument("--title", required=True, help="Task title")
    parser.add_argument("--description", default="", help="Task description")
    parser.add_argument(
        "--priority",
        choices=[p.value for p in Priority],
        default=Priority.LOW.value,
        help="Task priority",
    )
    parser.add_argument("--due", default="", help="Free-form due date")
    parser.add_argument("--issue", action="store_true", help="Also create a GitHub issue")
    args = parser.parse_args(argv)
    if args.issue and not args.repo:
        parser.error("--issue needs --repo to know where to create the issue")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = TaskflowSettings()
    configure_logging(settings.log_level, settings.log_file_path)

    manager = TaskManager.load(
        config_store=ConfigStore(settings.config_file),
        task_store=TaskStore(settings.tasks_file),
        connector=functools.partial(GitHubClient.connect, base_url=settings.github_base_url),
    )

    try:
        if args.repo:
            names = [repo.full_name for repo in manager.repositories]
            if args.repo not in names:
                print(f"Unknown repository {args.repo}; known: {', '.join(names) or 'none'}")
                return 1
            manager.select_repository(names.index(args.repo))

        result = manager.add_task(
            title=args.title,
            description=args.description,
            priority=Priority(args.priority),
            due_date=args.due,
            mirror=args.issue,
        )
    finally:
        manager.close()

    print(f"Added task {result.task.id}: {result.task.title}")
    if result.mirrored:
        print(f"GitHub issue: #{result.task.github_issue_number}")
    elif result.mirror_error:
        print(f"GitHub issue not created: {result.mirror_error}")
    elif args.issue:
        print("GitHub issue not created: not connected to GitHub")
    print(f"Persisted to: {settings.tasks_file}")

    render_board(manager.board(), Console())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
