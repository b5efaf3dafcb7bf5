"""GitHub API client wrapper.

This intentionally wraps PyGithub to keep GitHub calls out of the task manager
and make tests easy. Only three remote operations are needed: authenticate,
check that a repository is reachable, and create an issue.
"""

from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository as GithubRepository

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"


class RemoteError(Exception):
    """Raised when a GitHub call fails for any reason (auth, network, not found)."""


class GitHubClient:
    """Small wrapper around PyGithub for the operations TaskFlow needs."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_API_URL,
        web_url: str = DEFAULT_WEB_URL,
        github_api: Github | None = None,
    ) -> None:
        if not token.strip():
            raise ValueError("GitHub token is required")

        self._web_url = web_url.rstrip("/")
        if github_api is not None:
            self._github = github_api
            logger.debug("Using injected Github instance")
            return

        auth = Auth.Token(token.strip())
        self._github = Github(auth=auth, base_url=base_url.rstrip("/"))

    @classmethod
    def connect(
        cls,
        token: str,
        *,
        base_url: str = DEFAULT_API_URL,
        web_url: str = DEFAULT_WEB_URL,
        github_api: Github | None = None,
    ) -> GitHubClient | None:
        """Build a client and check the token by fetching the authenticated user.

        Returns None on any failure; a missing or bad token never aborts startup.
        """
        try:
            client = cls(token=token, base_url=base_url, web_url=web_url, github_api=github_api)
            login = client._github.get_user().login
        except (ValueError, GithubException, requests.RequestException) as e:
            logger.warning("GitHub connection failed", extra={"error": str(e)})
            return None

        logger.info("Authenticated with GitHub", extra={"login": login})
        return client

    def _get_repo(self, owner: str, name: str) -> GithubRepository:
        full_name = f"{owner}/{name}"
        try:
            return self._github.get_repo(full_name)
        except (GithubException, requests.RequestException) as e:
            raise RemoteError(f"Could not access repository {full_name}: {e}") from e

    def verify_repository(self, owner: str, name: str) -> None:
        """Raise RemoteError unless `owner/name` is reachable with this token."""

        repo = self._get_repo(owner, name)
        logger.info("Repository verified", extra={"repo": repo.full_name})

    def create_issue(self, owner: str, name: str, *, title: str, body: str | None = None) -> int:
        """Create an issue and return its number."""

        if not title.strip():
            raise ValueError("Issue title is required")

        repo = self._get_repo(owner, name)
        try:
            issue = repo.create_issue(title=title, body=body or "")
        except (GithubException, requests.RequestException) as e:
            raise RemoteError(f"Could not create issue in {owner}/{name}: {e}") from e

        logger.info(
            "Issue created",
            extra={"repo": f"{owner}/{name}", "issue_number": issue.number, "title": title},
        )
        return issue.number

    def repository_url(self, owner: str, name: str) -> str:
        return f"{self._web_url}/{owner}/{name}"

    def projects_url(self, owner: str, name: str) -> str:
        return f"{self.repository_url(owner, name)}/projects"

    def close(self) -> None:
        """Close the underlying GitHub connection."""
        self._github.close()
        logger.debug("GitHub client closed")
