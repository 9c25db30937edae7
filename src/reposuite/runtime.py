"""Runtime helpers for RepoSuite CLI orchestration."""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from .config import CONFIG_DEFAULT, ConfigError, SuiteConfig, default_config, load_config
from .errors import RepoSuiteError, classify_error, redact
from .github_rest import GitHubAPIError
from .logging import get_logger
from .ux import print_error

EXIT_OK = 0
EXIT_FAILURE = 1


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[str], SuiteConfig] = load_config
) -> SuiteConfig:
    """Load SuiteConfig for the given argparse namespace.

    The default config file is optional; a file named explicitly must exist.
    """
    path = getattr(args, "config", None)
    if path is None:
        if not Path(CONFIG_DEFAULT).exists():
            cfg = default_config()
        else:
            cfg = loader(CONFIG_DEFAULT)
    else:
        cfg = loader(path)
    org_override = getattr(args, "default_org", None)
    if org_override:
        cfg.default_org = org_override
    if getattr(args, "json_logs", False):
        cfg.logging_json_enabled = True
    level = getattr(args, "log_level", None)
    if level:
        cfg.logging_level = level
    if getattr(args, "quiet", False):
        os.environ["REPOSUITE_QUIET"] = "1"
    return cfg


def _log_failure(command: str, exc: Exception) -> None:
    info = classify_error(exc)
    get_logger().debug(
        "command failed",
        command=command,
        category=info.category,
        transient=info.transient,
        error=info.message,
    )


def execute_command(handler: _HandlerCallable, command: str) -> int:
    """Run a command handler, mapping RepoSuite failures to exit codes."""
    logger = get_logger()
    start = time.monotonic()
    try:
        result = handler()
        exit_code = int(result) if result is not None else EXIT_OK
    except RepoSuiteError as exc:
        if not exc.reported:
            print_error(redact(str(exc)))
        exit_code = exc.exit_code
        _log_failure(command, exc)
    except (GitHubAPIError, ConfigError) as exc:
        print_error(redact(str(exc)))
        exit_code = EXIT_FAILURE
        _log_failure(command, exc)
    logger.log_performance(
        f"command_{command}", (time.monotonic() - start) * 1000, exit_code=exit_code
    )
    return exit_code


__all__ = ["EXIT_FAILURE", "EXIT_OK", "execute_command", "prepare_config"]
