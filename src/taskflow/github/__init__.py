"""GitHub integration: the thin remote issue client used by the task manager."""

from taskflow.github.client import GitHubClient, RemoteError

__all__ = ["GitHubClient", "RemoteError"]
