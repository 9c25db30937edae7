"""Issue, pull request and review access, plus cross-repository issue cloning."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from .errors import SourceIssueNotFoundError
from .github_rest import (
    ISSUES_ROUTE,
    PULLS_ROUTE,
    REVIEWS_ROUTE,
    GitHubAPIError,
    GitHubRestClient,
    repo_path,
)
from .logging import get_logger
from .models import (
    CloneIssueDestinationDto,
    CloneIssueSourceDto,
    CreateIssueDto,
    Issue,
    PullRequest,
    Review,
)
from .ux import print_error
from .validation import validate_required

# Statuses from issue creation that mean "not created" rather than an error.
CREATE_ISSUE_NO_RESULT_STATUSES = frozenset({300, 400, 401, 403, 404})

IssueCreator = Callable[[CreateIssueDto], Awaitable[Issue | None]]


class IssueGateway:
    def __init__(self, client: GitHubRestClient):
        self.client = client
        self.logger = get_logger()

    async def _list(self, path: str, what: str, params: dict[str, Any] | None = None) -> list[Any] | None:
        try:
            return await self.client.apaginate(path, params=params)
        except GitHubAPIError as exc:
            print_error(f"Could not retrieve {what}: {exc}")
            return None

    async def get_issues(self, owner: str, repo: str, *, state: str = "open") -> list[Issue] | None:
        validate_required(owner=owner, repo=repo)
        data = await self._list(
            repo_path(owner, repo, ISSUES_ROUTE), f"issues for {owner}/{repo}", {"state": state}
        )
        if data is None:
            return None
        return [Issue.from_api(entry) for entry in data if isinstance(entry, dict)]

    async def get_pull_requests(self, owner: str, repo_name: str) -> list[PullRequest] | None:
        validate_required(owner=owner, repo_name=repo_name)
        data = await self._list(
            repo_path(owner, repo_name, PULLS_ROUTE), f"pull requests for {owner}/{repo_name}"
        )
        if data is None:
            return None
        return [PullRequest.from_api(entry) for entry in data if isinstance(entry, dict)]

    async def get_pull_request_reviews(
        self, owner: str, repo_name: str, pull_number: int
    ) -> list[Review] | None:
        validate_required(owner=owner, repo_name=repo_name, pull_number=pull_number)
        data = await self._list(
            repo_path(owner, repo_name, PULLS_ROUTE, pull_number, REVIEWS_ROUTE),
            f"reviews for {owner}/{repo_name}#{pull_number}",
        )
        if data is None:
            return None
        return [Review.from_api(entry) for entry in data if isinstance(entry, dict)]

    async def add_issue_to_repository(self, dto: CreateIssueDto) -> Issue | None:
        """Create an issue; the returned Issue reflects what the server stored."""
        path = repo_path(dto.owner, dto.repo, ISSUES_ROUTE)
        try:
            response = await self.client.arequest("POST", path, json_body=dto.payload())
        except GitHubAPIError as exc:
            print_error(f"Could not create issue in {dto.owner}/{dto.repo}: {exc}")
            return None

        if response.status in CREATE_ISSUE_NO_RESULT_STATUSES:
            self.logger.debug(
                "issue not created", owner=dto.owner, repo=dto.repo, status=response.status
            )
            return None
        if not response.ok or not isinstance(response.data, dict):
            print_error(
                f"Could not create issue in {dto.owner}/{dto.repo} (status {response.status})"
            )
            return None

        issue = Issue.from_api(response.data)
        self.logger.log_operation(
            "issue_create", owner=dto.owner, repo=dto.repo, issue_number=issue.number
        )
        return issue

    async def clone_issue_to_repository(
        self,
        source: CloneIssueSourceDto,
        destination: CloneIssueDestinationDto,
        *,
        create_issue: IssueCreator | None = None,
    ) -> Issue | None:
        """Re-create issue ``source.number`` in the destination repository.

        Raises SourceIssueNotFoundError when the source issue cannot be found;
        nothing is created in that case.
        """
        with self.logger.timed_operation(
            "issue_clone",
            owner=source.owner,
            repo=source.repo,
            issue_number=source.number,
            destination=f"{destination.owner}/{destination.repo}",
        ):
            issues = await self.get_issues(source.owner, source.repo, state="all") or []
            matched = next((i for i in issues if i.number == source.number), None)
            if matched is None:
                error = SourceIssueNotFoundError(source.owner, source.repo, source.number)
                print_error(str(error))
                raise error

            dto = CreateIssueDto(
                owner=destination.owner,
                repo=destination.repo,
                title=matched.title,
                body=matched.body,
            )
            creator = create_issue or self.add_issue_to_repository
            return await creator(dto)


__all__ = ["CREATE_ISSUE_NO_RESULT_STATUSES", "IssueCreator", "IssueGateway"]
