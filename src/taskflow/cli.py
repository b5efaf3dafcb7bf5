"""Interactive CLI entrypoint for TaskFlow.

All prompting lives here; the TaskManager only receives plain values. Local
save failures abort the current menu action and return to the menu, remote
failures are shown as warnings.
"""

from __future__ import annotations

import argparse
import functools
import logging
import sys
import webbrowser
from collections.abc import Callable, Sequence
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from taskflow import __version__
from taskflow.board import PRIORITY_MARKS, STATUS_STYLES, render_board
from taskflow.github.client import GitHubClient, RemoteError
from taskflow.logging import configure_logging
from taskflow.manager import (
    Connector,
    RemoteUnavailable,
    RepositoryVerificationError,
    TaskManager,
)
from taskflow.models import STATUS_ORDER, Priority, Status
from taskflow.settings import TaskflowSettings
from taskflow.store import ConfigStore, StoreError, TaskStore

logger = logging.getLogger(__name__)

STATUS_ICONS: dict[Status, str] = {
    Status.TODO: "🆕",
    Status.IN_PROGRESS: "🔄",
    Status.NEEDS_HELP: "🆘",
    Status.DONE: "✅",
}

TOKEN_HELP = (
    "1. Go to: https://github.com/settings/tokens\n"
    "2. Click 'Generate new token (classic)'\n"
    "3. Select: repo, workflow, read:org\n"
    "4. Copy the token and paste it here"
)


def choose(console: Console, prompt: str, options: Sequence[str], *, default: int = 0) -> int:
    """Show a numbered list and return the 0-based index picked by the user."""

    for idx, option in enumerate(options, start=1):
        console.print(f"  [bold]{idx}[/bold]. {escape(option)}")
    picked = IntPrompt.ask(
        prompt,
        console=console,
        choices=[str(i) for i in range(1, len(options) + 1)],
        default=default + 1,
        show_choices=False,
    )
    return picked - 1


def _ask_non_empty(console: Console, prompt: str, *, password: bool = False) -> str:
    while True:
        value = Prompt.ask(prompt, console=console, password=password).strip()
        if value:
            return value
        console.print("[red]This value cannot be empty[/red]")


# ---- repositories ----


def prompt_add_repository(manager: TaskManager, console: Console) -> bool:
    console.print("\n[bold]Let's add a GitHub repository:[/bold]")
    owner = _ask_non_empty(console, "Repository owner (username or organization)")
    name = _ask_non_empty(console, "Repository name")
    display_name = Prompt.ask("Display name for this project", console=console, default=name)

    try:
        with console.status("Verifying repository access..."):
            repo = manager.add_repository(owner, name, display_name)
    except RemoteUnavailable:
        console.print(
            "[yellow]⚠️  Not connected to GitHub; the repository was not added.[/yellow]"
        )
        return False
    except RepositoryVerificationError:
        console.print(
            "[yellow]⚠️  Could not access repository. "
            "Please check the details and your permissions.[/yellow]"
        )
        return False

    console.print(f"[green]✅ Repository verified: {escape(repo.describe())}[/green]")
    return True


def prompt_select_repository(manager: TaskManager, console: Console) -> None:
    while not manager.repositories:
        console.print("[yellow]No repositories configured. Let's add one![/yellow]")
        if prompt_add_repository(manager, console):
            break
        if not Confirm.ask("Try adding a repository again?", console=console, default=True):
            console.print("[yellow]Continuing without a repository.[/yellow]")
            return

    choices = [repo.describe() for repo in manager.repositories]
    idx = choose(console, "Select repository to work with", choices)
    repo = manager.select_repository(idx)
    console.print(f"\n[bold]🎯 Now working with:[/bold] {escape(repo.display_name)}")


def first_time_setup(manager: TaskManager, console: Console) -> None:
    console.print("\n[bold blue]👋 Looks like this is your first time here![/bold blue]")
    console.print("Let's get you set up...")

    if not manager.has_credential:
        console.print("\n[bold]First, you'll need a GitHub token.[/bold]")
        console.print(TOKEN_HELP)
        token = _ask_non_empty(console, "Enter your GitHub token", password=True)
        connected = manager.set_credential(token)
        _report_connection(console, connected)

    prompt_add_repository(manager, console)


def _report_connection(console: Console, connected: bool) -> None:
    if connected:
        console.print("[green]✅ Connected to GitHub![/green]")
    else:
        console.print("[yellow]⚠️  GitHub connection failed[/yellow]")


# ---- tasks ----


def handle_add_task(manager: TaskManager, console: Console) -> None:
    console.print("\n[bold green]✨ Add New Task[/bold green]")
    title = _ask_non_empty(console, "Task title")
    description = Prompt.ask(
        "Description (optional)", console=console, default="", show_default=False
    )
    priorities = list(Priority)
    priority = priorities[choose(console, "Priority", [p.value for p in priorities])]
    due_date = Prompt.ask("Due date (e.g., 'tomorrow', 'next week')", console=console)

    mirror = manager.can_mirror and Confirm.ask(
        "Create GitHub issue?", console=console, default=True
    )

    with console.status("Saving task..."):
        result = manager.add_task(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            mirror=mirror,
        )

    if result.mirror_error is not None:
        console.print("[yellow]⚠️  Couldn't create GitHub issue[/yellow]")
    elif result.mirrored:
        number = result.task.github_issue_number
        console.print(f"[green]✅ GitHub issue #{number} created![/green]")
    console.print("[green]✅ Task added successfully![/green]")


def handle_list_tasks(manager: TaskManager, console: Console) -> None:
    tasks = manager.list_tasks()
    if not tasks:
        console.print("\n[yellow]No tasks found.[/yellow]")
        return

    console.print("\n[bold blue]📋 Your Tasks[/bold blue]")
    console.rule()
    for task in tasks:
        style = STATUS_STYLES[task.status]
        console.print(
            f"\n{STATUS_ICONS[task.status]} [bold]{escape(task.title)}[/bold] "
            f"[{style}]{PRIORITY_MARKS[task.priority]}[/{style}]",
            highlight=False,
        )
        if task.description:
            console.print(f"[dim]{escape(task.description)}[/dim]", highlight=False)
        console.print(f"Due: [cyan]{escape(task.due_date)}[/cyan]", highlight=False)
        console.print(f"Created: [dim]{escape(task.created_at)}[/dim]", highlight=False)
        if task.github_issue_number is not None:
            console.print(f"Issue: #{task.github_issue_number}", highlight=False)


def handle_update_task(manager: TaskManager, console: Console) -> None:
    tasks = manager.list_tasks()
    if not tasks:
        console.print("\n[yellow]No tasks to update.[/yellow]")
        return

    task_idx = choose(console, "Select task to update", [f"{t.id}: {t.title}" for t in tasks])
    status_idx = choose(console, "Update status", [s.label for s in STATUS_ORDER])
    manager.update_status(task_idx, STATUS_ORDER[status_idx])
    console.print("\n[green]✅ Task updated![/green]")


# ---- project ----


def handle_visualize_project(manager: TaskManager, console: Console) -> None:
    options = [
        "📊 View board",
        "🌐 Open project in browser",
        "🏗️  Create project tracking issue",
        "⬅️  Back",
    ]
    while True:
        choice = choose(console, "Project view", options)
        if choice == 0:
            repo = manager.current_repository
            title = escape(repo.display_name) if repo else None
            render_board(manager.board(), console, title=title)
        elif choice == 1:
            try:
                url = manager.project_url()
            except RemoteUnavailable as e:
                console.print(f"[yellow]⚠️  {escape(str(e))}[/yellow]")
                continue
            console.print(f"Opening {url}")
            webbrowser.open(url)
        elif choice == 2:
            try:
                with console.status("Creating tracking issue..."):
                    number = manager.create_tracking_issue()
            except (RemoteUnavailable, RemoteError) as e:
                console.print(
                    f"[yellow]⚠️  Couldn't create tracking issue: {escape(str(e))}[/yellow]"
                )
                continue
            console.print(f"[green]✅ Tracking issue #{number} created![/green]")
        else:
            return


def handle_switch_repository(manager: TaskManager, console: Console) -> None:
    prompt_select_repository(manager, console)


def handle_add_repository(manager: TaskManager, console: Console) -> None:
    prompt_add_repository(manager, console)


MENU: tuple[tuple[str, Callable[[TaskManager, Console], None]], ...] = (
    ("✨ Add new task", handle_add_task),
    ("📋 List tasks", handle_list_tasks),
    ("🔄 Update task", handle_update_task),
    ("📊 Visualize project", handle_visualize_project),
    ("📂 Switch repository", handle_switch_repository),
    ("⚙️  Add new repository", handle_add_repository),
)


def run_menu(manager: TaskManager, console: Console) -> None:
    labels = [label for label, _ in MENU] + ["👋 Exit"]
    while True:
        console.print()
        choice = choose(console, "What would you like to do?", labels)
        if choice == len(MENU):
            return

        label, handler = MENU[choice]
        try:
            handler(manager, console)
        except StoreError as e:
            logger.error("Save failed", extra={"action": label, "error": str(e)})
            console.print(f"[red]❌ {escape(str(e))}[/red]")


# ---- startup ----


def bootstrap(settings: TaskflowSettings, console: Console, connector: Connector) -> TaskManager:
    """Load state, run first-time setup if needed, then pick a repository."""

    manager = TaskManager.load(
        config_store=ConfigStore(settings.config_file),
        task_store=TaskStore(settings.tasks_file),
        connector=connector,
    )
    if manager.has_credential:
        _report_connection(console, manager.has_remote)
    else:
        console.print("[yellow]No GitHub token configured[/yellow]")

    if not manager.repositories:
        first_time_setup(manager, console)

    prompt_select_repository(manager, console)
    return manager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskflow",
        description="A friendly task manager for any GitHub project",
    )
    parser.add_argument("--version", action="version", version=f"taskflow {__version__}")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding config.json and tasks.json (overrides TASKFLOW_DATA_DIR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {"data_dir": args.data_dir} if args.data_dir is not None else {}
    try:
        settings = TaskflowSettings(**overrides)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Could not create config directory {settings.data_dir}: {e}", file=sys.stderr)
        return 1

    try:
        configure_logging(settings.log_level, settings.log_file_path)
    except OSError as e:
        print(f"Could not open log file {settings.log_file_path}: {e}", file=sys.stderr)
        return 1

    console = Console()
    console.print("[bold magenta]🚀 Welcome to TaskFlow![/bold magenta]")
    console.print("A friendly task manager for any GitHub project")

    connector: Connector = functools.partial(
        GitHubClient.connect,
        base_url=settings.github_base_url,
        web_url=settings.github_web_url,
    )

    manager: TaskManager | None = None
    try:
        manager = bootstrap(settings, console, connector)
        run_menu(manager, console)
    except StoreError as e:
        logger.exception("Startup failed")
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        return 1
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except Exception:
        logger.exception("Command failed")
        console.print("[red]❌ Unexpected error; see the log file for details[/red]")
        return 1
    finally:
        if manager is not None:
            manager.close()

    console.print("\n[bold blue]👋 Thanks for using TaskFlow![/bold blue]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
