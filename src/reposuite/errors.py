"""Error taxonomy & redaction helpers.

Every failure surfaced by RepoSuite falls into one of a handful of buckets:

- ``ParameterError``: a required argument was missing or blank. Raised before
  any network call is made.
- ``HardStopError``: a precondition central to the requested operation is
  unmet (e.g. the source issue of a clone does not exist).
- ``OperationAbortedError``: the user declined a confirmation prompt.
- ``BulkOperationError``: one or more per-repository calls of a bulk run failed.

"No result" outcomes (not found, acceptable failure statuses) are not
exceptions; operations return ``None`` for those.

Public helpers:
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"gho_[A-Za-z0-9]{20,40}"),  # OAuth tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"(?i)(authorization:\s*bearer\s+)\S+"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class RepoSuiteError(RuntimeError):
    """Base class for RepoSuite failures."""

    exit_code = 1
    # Whether the message was already shown to the user where it was raised.
    reported = True


class ParameterError(RepoSuiteError, ValueError):
    """Raised when a required parameter is missing or blank."""

    exit_code = 2

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"'{name}' is required")
        self.name = name


class HardStopError(RepoSuiteError):
    """Raised when the requested operation cannot proceed at all."""

    exit_code = 3


class SourceIssueNotFoundError(HardStopError):
    def __init__(self, owner: str, repo: str, number: int):
        super().__init__(f"Could not find issue #{number} in {owner}/{repo}")
        self.owner = owner
        self.repo = repo
        self.number = number


class OperationAbortedError(RepoSuiteError):
    """Raised when the user declines a confirmation prompt."""

    exit_code = 4


class BulkOperationError(RepoSuiteError):
    reported = False

    def __init__(self, message: str, failures: dict[str, str]):
        super().__init__(message)
        self.failures = failures


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Replace GitHub credentials found in ``text`` with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    Typed RepoSuite errors map onto their own categories; anything else is
    sniffed by message (rate limit, network) and falls back to 'generic'.
    """
    msg = str(exc) if exc else ""
    low = msg.lower()
    name = exc.__class__.__name__

    if isinstance(exc, ParameterError):
        return ErrorInfo("validation", redact(msg), name, details={"parameter": exc.name})
    if isinstance(exc, HardStopError):
        return ErrorInfo("hard_stop", redact(msg), name)
    if isinstance(exc, OperationAbortedError):
        return ErrorInfo("aborted", redact(msg), name)
    if "rate limit" in low or "secondary rate" in low:
        return ErrorInfo("github.rate_limit", redact(msg), name, transient=True)
    if any(k in low for k in ("timeout", "timed out", "connection reset", "temporarily unavailable")):
        return ErrorInfo("network", redact(msg), name, transient=True)
    status = getattr(exc, "status", None)
    if isinstance(status, int):
        return ErrorInfo("github.http", redact(msg), name, details={"status": status})
    return ErrorInfo("generic", redact(msg), name)


__all__ = [
    "BulkOperationError",
    "ErrorInfo",
    "HardStopError",
    "OperationAbortedError",
    "ParameterError",
    "RepoSuiteError",
    "SourceIssueNotFoundError",
    "classify_error",
    "redact",
]
