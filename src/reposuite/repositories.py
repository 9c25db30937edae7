"""Repository listings for users and organizations."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .config import DEFAULT_ORG
from .github_rest import (
    GitHubAPIError,
    GitHubRestClient,
    org_repos_path,
    owner_repos_path,
    repo_path,
)
from .logging import get_logger
from .models import Repository
from .ux import print_error
from .validation import is_blank, validate_required

RepositoryFilter = Callable[[list[Repository]], list[Repository]]


class RepositoryDirectory:
    def __init__(self, client: GitHubRestClient, default_org: str = DEFAULT_ORG):
        self.client = client
        self.default_org = default_org
        self.logger = get_logger()

    async def get_repo(self, owner: str, repo_name: str) -> Repository | None:
        """Fetch one repository; None when the owner or repository is unknown."""
        validate_required(owner=owner, repo_name=repo_name)
        try:
            response = await self.client.arequest("GET", repo_path(owner, repo_name))
        except GitHubAPIError as exc:
            print_error(str(exc))
            return None
        if not response.ok or not isinstance(response.data, dict):
            self.logger.debug(
                "repository not found", owner=owner, repo=repo_name, status=response.status
            )
            return None
        return Repository.from_api(response.data)

    def _collect(
        self, owner: str, payload: list[Any], repo_filter: RepositoryFilter | None
    ) -> list[Repository]:
        repos = [Repository.from_api(entry) for entry in payload if isinstance(entry, dict)]
        self.logger.debug("listed repositories", owner=owner, count=len(repos))
        if repo_filter is not None:
            repos = repo_filter(repos)
        return repos

    async def repositories(
        self, owner: str | None = None, repo_filter: RepositoryFilter | None = None
    ) -> list[Repository] | None:
        """List every repository of ``owner`` across all pages.

        Returns None when no owner is given. ``repo_filter`` runs client-side
        over the complete listing. A failed page raises GitHubAPIError.
        """
        if owner is None or is_blank(owner):
            return None
        payload = await self.client.apaginate(owner_repos_path(owner))
        return self._collect(owner, payload, repo_filter)

    async def repositories_by_organization(
        self, org: str | None = None, repo_filter: RepositoryFilter | None = None
    ) -> list[Repository] | None:
        """Like :meth:`repositories`, read from the organization route.

        The organization route also lists private repositories. An account
        that is not an organization answers 404 there and is listed through
        the user route instead.
        """
        org = org or self.default_org
        if is_blank(org):
            return None
        try:
            payload = await self.client.apaginate(org_repos_path(org))
        except GitHubAPIError as exc:
            if exc.status != 404:
                raise
            self.logger.debug("not an organization, listing as user", owner=org)
            return await self.repositories(org, repo_filter)
        return self._collect(org, payload, repo_filter)

    async def repositories_by_andculture(
        self, username: str | None = None
    ) -> list[Repository] | None:
        """Default-org repositories, or a user's forks named after the default org."""
        if is_blank(username):
            return await self.repositories_by_organization()

        prefix = self.default_org

        def _named_after_org(repos: list[Repository]) -> list[Repository]:
            return [r for r in repos if r.name.startswith(prefix)]

        return await self.repositories(username, _named_after_org)


__all__ = ["RepositoryDirectory", "RepositoryFilter"]
