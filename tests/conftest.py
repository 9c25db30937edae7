"""Pytest configuration for RepoSuite tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`). HTTP is always
served by the in-memory session from ``helpers``; no test reaches the network.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from helpers import API, FakeSession  # noqa: E402

from reposuite.github_rest import GitHubRestClient  # noqa: E402
from reposuite.logging import configure_logging  # noqa: E402


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    configure_logging(level="CRITICAL")


@pytest.fixture(autouse=True)
def _no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("REPOSUITE_QUIET", raising=False)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> GitHubRestClient:
    return GitHubRestClient(
        token_provider=lambda: "test-token",
        base_url=API,
        per_page=2,
        session=session,  # type: ignore[arg-type]
    )
