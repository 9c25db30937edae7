"""Repository topic management, per repository and across an organization."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from .concurrency import ConcurrencyConfig, run_for_each
from .errors import BulkOperationError, OperationAbortedError
from .github_rest import TOPICS_ROUTE, GitHubAPIError, GitHubRestClient, RestResponse, repo_path
from .logging import get_logger
from .models import Repository
from .repositories import RepositoryDirectory
from .ux import confirm as prompt_confirm
from .ux import print_error, print_info, print_success, print_warning
from .validation import validate_required

# Inclusive range of statuses accepted from the topics endpoint.
TOPICS_SUCCESS_MIN = 200
TOPICS_SUCCESS_MAX = 202

TopicMutator = Callable[[str, str, str], Awaitable[list[str] | None]]
Confirm = Callable[[str], bool]


@dataclass
class BulkTopicResult:
    topic: str
    action: str
    succeeded: dict[str, list[str]] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        if self.failed:
            raise BulkOperationError(
                f"Failed to {self.action} topic '{self.topic}' on "
                f"{len(self.failed)} of {self.attempted} repositories",
                self.failed,
            )


def _topic_names(response: RestResponse) -> list[str] | None:
    data: Any = response.data
    if not isinstance(data, dict):
        return None
    names = data.get("names")
    if not isinstance(names, list):
        return None
    return [str(n) for n in names]


class TopicManager:
    def __init__(
        self,
        client: GitHubRestClient,
        directory: RepositoryDirectory,
        *,
        confirm: Confirm = prompt_confirm,
        concurrency: ConcurrencyConfig | None = None,
    ):
        self.client = client
        self.directory = directory
        self.confirm = confirm
        self.concurrency = concurrency or ConcurrencyConfig()
        self.logger = get_logger()

    async def topics_for_repository(self, owner: str, repo_name: str) -> list[str] | None:
        validate_required(owner=owner, repo_name=repo_name)
        path = repo_path(owner, repo_name, TOPICS_ROUTE)
        try:
            response = await self.client.arequest("GET", path)
        except GitHubAPIError as exc:
            print_error(f"Could not retrieve topics for {owner}/{repo_name}: {exc}")
            return None

        names = _topic_names(response)
        if names is None or not TOPICS_SUCCESS_MIN <= response.status <= TOPICS_SUCCESS_MAX:
            print_error(
                f"Could not retrieve topics for {owner}/{repo_name} (status {response.status})"
            )
            return None
        return names

    async def _replace_topics(
        self, owner: str, repo_name: str, names: list[str], *, operation: str
    ) -> list[str] | None:
        path = repo_path(owner, repo_name, TOPICS_ROUTE)
        try:
            response = await self.client.arequest("PUT", path, json_body={"names": names})
        except GitHubAPIError as exc:
            print_error(f"Could not update topics for {owner}/{repo_name}: {exc}")
            return None

        stored = _topic_names(response)
        if stored is None or not response.ok:
            print_error(
                f"Could not update topics for {owner}/{repo_name} (status {response.status})"
            )
            return None
        self.logger.log_operation(operation, owner=owner, repo=repo_name, topics=stored)
        return stored

    async def add_topic_to_repository(
        self, topic: str, owner: str, repo_name: str
    ) -> list[str] | None:
        """Add ``topic`` and return the topic list the server stored."""
        validate_required(topic=topic, owner=owner, repo_name=repo_name)
        current = await self.topics_for_repository(owner, repo_name)
        if current is None:
            return None
        updated = current if topic in current else [*current, topic]
        return await self._replace_topics(owner, repo_name, updated, operation="topic_add")

    async def remove_topic_from_repository(
        self, topic: str, owner: str, repo_name: str
    ) -> list[str] | None:
        """Remove ``topic`` and return the topic list the server stored."""
        validate_required(topic=topic, owner=owner, repo_name=repo_name)
        current = await self.topics_for_repository(owner, repo_name)
        if current is None:
            return None
        updated = [t for t in current if t != topic]
        return await self._replace_topics(owner, repo_name, updated, operation="topic_remove")

    async def add_topic_to_all_repositories(
        self, topic: str, *, mutator: TopicMutator | None = None
    ) -> BulkTopicResult:
        return await self._apply_to_all(
            topic, "add", mutator or self.add_topic_to_repository
        )

    async def remove_topic_from_all_repositories(
        self, topic: str, *, mutator: TopicMutator | None = None
    ) -> BulkTopicResult:
        return await self._apply_to_all(
            topic, "remove", mutator or self.remove_topic_from_repository
        )

    async def _apply_to_all(
        self, topic: str, action: str, mutator: TopicMutator
    ) -> BulkTopicResult:
        validate_required(topic=topic)
        org = self.directory.default_org
        result = BulkTopicResult(topic=topic, action=action)
        repos = await self.directory.repositories_by_organization() or []
        if not repos:
            print_info(f"No repositories found for {org}")
            return result

        preposition = "to" if action == "add" else "from"
        names = ", ".join(r.name for r in repos)
        message = (
            f"{action.capitalize()} topic '{topic}' {preposition} "
            f"{len(repos)} {org} repositories ({names})?"
        )
        if not self.confirm(message):
            print_warning("Aborted; no repositories were changed")
            raise OperationAbortedError(f"Declined to {action} topic '{topic}'")

        async def _mutate(repo: Repository) -> list[str] | None:
            return await mutator(topic, repo.owner_login or org, repo.name)

        outcomes = await run_for_each(
            repos, _mutate, self.concurrency, operation=f"topic_{action}_all"
        )
        for outcome in outcomes:
            key = outcome.item.full_name
            if outcome.error is not None:
                result.failed[key] = str(outcome.error)
            elif outcome.value is None:
                result.failed[key] = "no result"
            else:
                result.succeeded[key] = outcome.value

        if result.ok:
            print_success(f"Topic '{topic}' {action} complete for {result.attempted} repositories")
        else:
            for key, reason in result.failed.items():
                print_error(f"{key}: {reason}")
        return result


__all__ = ["BulkTopicResult", "TopicManager", "TopicMutator"]
