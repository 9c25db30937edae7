from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import requests

from .logging import get_logger

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "reposuite-rest/0.1.0"

REPOS_ROUTE = "repos"
USERS_ROUTE = "users"
ORGS_ROUTE = "orgs"
ISSUES_ROUTE = "issues"
PULLS_ROUTE = "pulls"
REVIEWS_ROUTE = "reviews"
TOPICS_ROUTE = "topics"


def _segment(value: Any) -> str:
    return quote(str(value).strip(), safe="")


def repo_path(owner: str, repo: str, *parts: Any) -> str:
    """Build ``/repos/{owner}/{repo}[/parts...]``."""
    segments = [REPOS_ROUTE, _segment(owner), _segment(repo), *(_segment(p) for p in parts)]
    return "/" + "/".join(segments)


def owner_repos_path(owner: str) -> str:
    """Build ``/users/{owner}/repos`` (public repositories of any account)."""
    return f"/{USERS_ROUTE}/{_segment(owner)}/{REPOS_ROUTE}"


def org_repos_path(org: str) -> str:
    """Build ``/orgs/{org}/repos``, which includes private repositories visible to the token."""
    return f"/{ORGS_ROUTE}/{_segment(org)}/{REPOS_ROUTE}"


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub request fails outright (transport or non-2xx listing)."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text


@dataclass
class RestResponse:
    status: int
    data: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class GitHubRestClient:
    """Single-shot REST client; no retries, no caching.

    ``token_provider`` is called for every request so that a token written
    mid-process is picked up; a ``None`` token sends the request anonymously.
    """

    token_provider: Callable[[], str | None] = lambda: None
    base_url: str = DEFAULT_API_URL
    per_page: int = 100
    timeout: float = 30
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        self.logger = get_logger()

    def _headers(self) -> dict[str, str]:
        headers = dict(self._session.headers)
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> RestResponse:
        url = (
            path
            if path.startswith("http")
            else f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        )
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            self.logger.log_request(method, path, None, error=str(exc))
            raise GitHubAPIError(f"GitHub API {method} {url} failed: {exc}") from exc

        self.logger.log_request(method, path, response.status_code)
        data: Any = None
        text = response.text or ""
        if text:
            try:
                data = response.json()
            except ValueError:
                data = None
        return RestResponse(status=response.status_code, data=data, text=text)

    def paginate(self, path: str, *, params: dict[str, Any] | None = None) -> list[Any]:
        """GET every page of a collection, in page order.

        Any non-2xx page aborts the whole listing with GitHubAPIError.
        """
        params = dict(params or {})
        per_page = params.setdefault("per_page", self.per_page)
        params.setdefault("page", 1)
        results: list[Any] = []
        while True:
            response = self.request("GET", path, params=dict(params))
            if not response.ok:
                raise GitHubAPIError(
                    f"GitHub API GET {path} page {params['page']} failed with {response.status}",
                    status=response.status,
                    response_text=response.text,
                )
            if not isinstance(response.data, list):
                break
            results.extend(response.data)
            if not response.data or len(response.data) < per_page:
                break
            params["page"] = params.get("page", 1) + 1
        return results

    # ---- async wrappers -----------------------------------------------
    async def arequest(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> RestResponse:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            functools.partial(self.request, method, path, params=params, json_body=json_body),
        )

    async def apaginate(self, path: str, *, params: dict[str, Any] | None = None) -> list[Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(self.paginate, path, params=params)
        )


__all__ = [
    "DEFAULT_API_URL",
    "GitHubAPIError",
    "GitHubRestClient",
    "RestResponse",
    "org_repos_path",
    "owner_repos_path",
    "repo_path",
]
