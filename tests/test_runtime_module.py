from __future__ import annotations

import json
import os
from pathlib import Path
from types import SimpleNamespace

import pytest

from reposuite import runtime
from reposuite.config import ConfigError, default_config
from reposuite.errors import (
    BulkOperationError,
    OperationAbortedError,
    ParameterError,
    SourceIssueNotFoundError,
)
from reposuite.github_rest import GitHubAPIError
from reposuite.logging import configure_logging


def test_prepare_config_without_default_file_uses_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    def loader(path: str):
        raise AssertionError("loader should not run")

    cfg = runtime.prepare_config(SimpleNamespace(config=None), loader=loader)
    assert cfg.default_org == "AndcultureCode"
    assert cfg.source_file is None


def test_prepare_config_picks_up_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "reposuite.config.yaml").write_text("github:\n  default_org: acme\n")

    cfg = runtime.prepare_config(SimpleNamespace(config=None))
    assert cfg.default_org == "acme"


def test_prepare_config_explicit_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        runtime.prepare_config(SimpleNamespace(config=str(tmp_path / "missing.yaml")))


def test_prepare_config_applies_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPOSUITE_QUIET", "0")
    args = SimpleNamespace(
        config="custom.yaml", default_org="acme", json_logs=True, log_level="DEBUG", quiet=True
    )
    seen: list[str] = []

    def loader(path: str):
        seen.append(path)
        return default_config()

    cfg = runtime.prepare_config(args, loader=loader)

    assert seen == ["custom.yaml"]
    assert cfg.default_org == "acme"
    assert cfg.logging_json_enabled is True
    assert cfg.logging_level == "DEBUG"
    assert os.environ["REPOSUITE_QUIET"] == "1"


def test_execute_command_success() -> None:
    assert runtime.execute_command(lambda: None, "repos") == runtime.EXIT_OK
    assert runtime.execute_command(lambda: 5, "repos") == 5


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (ParameterError("owner"), 2),
        (SourceIssueNotFoundError("acme", "widgets", 7), 3),
        (OperationAbortedError("declined"), 4),
        (BulkOperationError("partial", {"a/b": "x"}), 1),
        (GitHubAPIError("boom", status=500), 1),
        (ConfigError("bad config"), 1),
    ],
)
def test_execute_command_maps_failures(exc: Exception, code: int) -> None:
    def boom() -> None:
        raise exc

    assert runtime.execute_command(boom, "cmd") == code


def test_execute_command_prints_unreported_errors_once(capsys: pytest.CaptureFixture[str]) -> None:
    def bulk() -> None:
        raise BulkOperationError("2 of 3 failed", {})

    def validation() -> None:
        raise ParameterError("owner", "owner is required and cannot be blank")

    runtime.execute_command(bulk, "cmd")
    runtime.execute_command(validation, "cmd")

    err = capsys.readouterr().err
    assert "2 of 3 failed" in err
    assert "owner is required" not in err


def test_execute_command_propagates_unexpected_exceptions() -> None:
    def boom() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        runtime.execute_command(boom, "cmd")


def test_execute_command_logs_error_category(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(json_logging=True, level="DEBUG")

    def rate_limited() -> None:
        raise GitHubAPIError("API rate limit exceeded", status=403)

    assert runtime.execute_command(rate_limited, "repos") == runtime.EXIT_FAILURE

    records = [
        json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")
    ]
    failure = next(r for r in records if r["message"] == "command failed")
    assert failure["command"] == "repos"
    assert failure["category"] == "github.rate_limit"
    assert failure["transient"] is True
