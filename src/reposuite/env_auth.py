"""Environment-based token discovery.

Used by :class:`~reposuite.token_store.TokenStore` when the persisted token
file holds nothing. Optionally loads a ``.env`` file first.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .logging import get_logger

ALTERNATIVE_TOKEN_VARS = ("GH_TOKEN", "GITHUB_ACCESS_TOKEN", "GH_ACCESS_TOKEN", "GITHUB_PAT")


@dataclass
class EnvAuthConfig:
    """Configuration for environment-based authentication."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    github_token_var: str = "GITHUB_TOKEN"


class EnvironmentAuthManager:
    """Reads a GitHub token from environment variables and .env files."""

    def __init__(self, config: EnvAuthConfig):
        self.config = config
        self.logger = get_logger()
        self._dotenv_loaded = False

        if config.load_dotenv:
            self._load_dotenv()

    @property
    def dotenv_loaded(self) -> bool:
        return self._dotenv_loaded

    def _load_dotenv(self) -> None:
        candidates = [self.config.dotenv_path] if self.config.dotenv_path else [".env", ".env.local"]
        for location in candidates:
            env_path = Path(location)
            if env_path.exists():
                # Never clobber variables already exported by the shell.
                load_dotenv(str(env_path), override=False)
                self._dotenv_loaded = True
                self.logger.debug(f"Loaded environment variables from {env_path}")
                return

    def get_github_token(self) -> str | None:
        """Get GitHub token from environment variables."""
        for var in (self.config.github_token_var, *ALTERNATIVE_TOKEN_VARS):
            token = os.getenv(var)
            if token and token.strip():
                self.logger.debug(f"Found GitHub token in {var}")
                return token.strip()
        return None


def create_env_auth_manager(
    load_dotenv: bool = True,
    dotenv_path: str | None = None,
    github_token_var: str = "GITHUB_TOKEN",
) -> EnvironmentAuthManager:
    """Factory function to create environment auth manager."""
    config = EnvAuthConfig(
        load_dotenv=load_dotenv,
        dotenv_path=dotenv_path,
        github_token_var=github_token_var,
    )
    return EnvironmentAuthManager(config)


__all__ = [
    "ALTERNATIVE_TOKEN_VARS",
    "EnvAuthConfig",
    "EnvironmentAuthManager",
    "create_env_auth_manager",
]
