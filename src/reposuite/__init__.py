"""RepoSuite - GitHub repository, topic and issue automation.

High-level public API:

import asyncio
from reposuite import RepoSuite, load_config

suite = RepoSuite.from_config(load_config('reposuite.config.yaml'))
repos = asyncio.run(suite.repositories.repositories_by_organization())
asyncio.run(suite.topics.add_topic_to_repository('infra', 'AndcultureCode', 'AndcultureCode.Cli'))

The CLI (``reposuite``) delegates to this library.
"""

from __future__ import annotations

from .config import SuiteConfig, default_config, load_config
from .core import RepoSuite
from .errors import (
    BulkOperationError,
    HardStopError,
    OperationAbortedError,
    ParameterError,
    RepoSuiteError,
    SourceIssueNotFoundError,
)
from .models import (
    CloneIssueDestinationDto,
    CloneIssueSourceDto,
    CreateIssueDto,
    Issue,
    PullRequest,
    Repository,
    Review,
)

# Version constant (keep in sync with pyproject.toml)
__version__ = "0.1.0"

__all__ = [
    "BulkOperationError",
    "CloneIssueDestinationDto",
    "CloneIssueSourceDto",
    "CreateIssueDto",
    "HardStopError",
    "Issue",
    "OperationAbortedError",
    "ParameterError",
    "PullRequest",
    "RepoSuite",
    "RepoSuiteError",
    "Repository",
    "Review",
    "SourceIssueNotFoundError",
    "SuiteConfig",
    "default_config",
    "load_config",
    "__version__",
]
