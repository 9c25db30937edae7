"""Test doubles shared across the suite."""

from __future__ import annotations

import json
from collections import defaultdict, deque
from typing import Any
from urllib.parse import urlparse

API = "https://api.github.test"


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None):
        self.status_code = status_code
        self.payload = payload

    def json(self) -> Any:
        if self.payload is None:
            raise ValueError("no body")
        return self.payload

    @property
    def text(self) -> str:
        if self.payload is None:
            return ""
        return json.dumps(self.payload)


class FakeSession:
    """Queue responses per (METHOD, path) and record every request."""

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.requests: list[dict[str, Any]] = []
        self._routes: dict[tuple[str, str], deque[Any]] = defaultdict(deque)

    def add(self, method: str, path: str, status: int = 200, payload: Any = None) -> FakeSession:
        self._routes[(method.upper(), path)].append(FakeResponse(status, payload))
        return self

    def add_pages(self, path: str, items: list[Any], per_page: int = 2) -> FakeSession:
        """Queue ``items`` as GET pages, ending with a short (possibly empty) page."""
        for start in range(0, len(items), per_page):
            self.add("GET", path, 200, items[start : start + per_page])
        if len(items) % per_page == 0:
            self.add("GET", path, 200, [])
        return self

    def fail(self, method: str, path: str, exc: Exception) -> FakeSession:
        self._routes[(method.upper(), path)].append(exc)
        return self

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        timeout: float | None = None,
    ) -> FakeResponse:
        path = urlparse(url).path
        self.requests.append(
            {"method": method, "path": path, "headers": headers, "params": params, "json": json}
        )
        queue = self._routes.get((method.upper(), path))
        if not queue:
            raise AssertionError(f"No response queued for {method} {path}")
        outcome = queue.popleft()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def calls(self, method: str | None = None) -> list[dict[str, Any]]:
        if method is None:
            return list(self.requests)
        return [r for r in self.requests if r["method"] == method]


def repo_payload(name: str, owner: str = "AndcultureCode", **extra: Any) -> dict[str, Any]:
    return {
        "name": name,
        "owner": {"login": owner},
        "url": f"{API}/repos/{owner}/{name}",
        **extra,
    }


def issue_payload(
    number: int, title: str = "Issue", login: str = "octocat", **extra: Any
) -> dict[str, Any]:
    return {
        "number": number,
        "title": title,
        "user": {"login": login},
        "body": f"body {number}",
        **extra,
    }
