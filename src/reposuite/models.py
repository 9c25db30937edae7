"""In-memory views of GitHub resources and the request DTOs.

Resources keep the full API payload on ``raw``; only the fields RepoSuite
reads are lifted into attributes. DTOs validate their required fields once,
at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .validation import validate_required


def _login(payload: Any) -> str | None:
    if isinstance(payload, dict):
        login = payload.get("login")
        if isinstance(login, str):
            return login
    return None


@dataclass
class Repository:
    name: str
    owner_login: str | None
    url: str | None = None
    topics: list[str] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def full_name(self) -> str:
        return f"{self.owner_login}/{self.name}" if self.owner_login else self.name

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Repository:
        topics = payload.get("topics")
        return cls(
            name=str(payload.get("name", "")),
            owner_login=_login(payload.get("owner")),
            url=payload.get("url") or payload.get("html_url"),
            topics=list(topics) if isinstance(topics, list) else None,
            raw=payload,
        )


@dataclass
class Issue:
    number: int
    title: str
    user_login: str | None = None
    body: str | None = None
    state: str | None = None
    url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Issue:
        return cls(
            number=int(payload.get("number", 0)),
            title=str(payload.get("title", "")),
            user_login=_login(payload.get("user")),
            body=payload.get("body"),
            state=payload.get("state"),
            url=payload.get("html_url") or payload.get("url"),
            raw=payload,
        )


@dataclass
class PullRequest:
    number: int | None
    title: str | None
    user_login: str | None = None
    state: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> PullRequest:
        number = payload.get("number")
        return cls(
            number=number if isinstance(number, int) else None,
            title=payload.get("title"),
            user_login=_login(payload.get("user")),
            state=payload.get("state"),
            raw=payload,
        )


@dataclass
class Review:
    id: int | None
    state: str | None
    user_login: str | None = None
    body: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Review:
        review_id = payload.get("id")
        return cls(
            id=review_id if isinstance(review_id, int) else None,
            state=payload.get("state"),
            user_login=_login(payload.get("user")),
            body=payload.get("body"),
            raw=payload,
        )


@dataclass(frozen=True)
class CreateIssueDto:
    owner: str
    repo: str
    title: str
    body: str | None = None

    def __post_init__(self) -> None:
        validate_required(owner=self.owner, repo=self.repo, title=self.title)

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title}
        if self.body is not None:
            data["body"] = self.body
        return data


@dataclass(frozen=True)
class CloneIssueSourceDto:
    owner: str
    repo: str
    number: int

    def __post_init__(self) -> None:
        validate_required(owner=self.owner, repo=self.repo, number=self.number)


@dataclass(frozen=True)
class CloneIssueDestinationDto:
    owner: str
    repo: str

    def __post_init__(self) -> None:
        validate_required(owner=self.owner, repo=self.repo)


__all__ = [
    "CloneIssueDestinationDto",
    "CloneIssueSourceDto",
    "CreateIssueDto",
    "Issue",
    "PullRequest",
    "Repository",
    "Review",
]
