from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

CONFIG_DEFAULT = "reposuite.config.yaml"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_ORG = "AndcultureCode"
DEFAULT_TOKEN_PATH = "~/.reposuite/github.ini"
# GitHub serves at most 100 entries per page.
MAX_PER_PAGE = 100


class ConfigError(RuntimeError):
    pass


@dataclass
class SuiteConfig:
    source_file: Path | None
    api_url: str
    default_org: str
    per_page: int
    timeout: float
    token_path: Path
    # Concurrency configuration
    concurrency_enabled: bool
    concurrency_max_workers: int
    # Logging configuration
    logging_json_enabled: bool
    logging_level: str
    # Environment authentication configuration
    env_load_dotenv: bool
    env_dotenv_path: str | None
    env_github_token_var: str


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:], value)  # Fallback to original if not found
    return value


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{key}' must be a mapping")
    return cast(dict[str, Any], value)


def _build(raw: dict[str, Any], source: Path | None) -> SuiteConfig:
    gh = _section(raw, 'github')
    auth = _section(raw, 'auth')
    concurrency = _section(raw, 'concurrency')
    logging_config = _section(raw, 'logging')
    env = _section(raw, 'environment')

    token_path = str(_resolve_env_var(auth.get('token_path', DEFAULT_TOKEN_PATH)))
    try:
        per_page = int(gh.get('per_page', MAX_PER_PAGE))
        cfg = SuiteConfig(
            source_file=source,
            api_url=str(_resolve_env_var(gh.get('api_url', DEFAULT_API_URL))).rstrip('/'),
            default_org=str(_resolve_env_var(gh.get('default_org', DEFAULT_ORG))),
            per_page=per_page,
            timeout=float(gh.get('timeout', 30)),
            token_path=Path(token_path).expanduser(),
            concurrency_enabled=bool(concurrency.get('enabled', True)),
            concurrency_max_workers=max(1, int(concurrency.get('max_workers', 4))),
            logging_json_enabled=bool(logging_config.get('json_enabled', False)),
            logging_level=str(logging_config.get('level', 'WARNING')),
            env_load_dotenv=bool(env.get('load_dotenv', True)),
            env_dotenv_path=env.get('dotenv_path'),
            env_github_token_var=str(env.get('github_token_var', 'GITHUB_TOKEN')),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'Invalid configuration value: {exc}') from exc
    if not 1 <= per_page <= MAX_PER_PAGE:
        raise ConfigError(f'github.per_page must be between 1 and {MAX_PER_PAGE}, got {per_page}')
    return cfg


def default_config() -> SuiteConfig:
    return _build({}, None)


def load_config(path: str | Path) -> SuiteConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f'Configuration file not found: {p}')
    try:
        raw = yaml.safe_load(p.read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Configuration file {p} is not valid YAML: {exc}') from exc
    if not isinstance(raw, dict):
        raise ConfigError(f'Configuration file {p} must contain a mapping')
    return _build(cast(dict[str, Any], raw), p)


__all__ = [
    "CONFIG_DEFAULT",
    "ConfigError",
    "DEFAULT_ORG",
    "SuiteConfig",
    "default_config",
    "load_config",
]
