"""Composition root wiring config, token store, REST client and services."""

from __future__ import annotations

from dataclasses import dataclass

import requests

from .concurrency import ConcurrencyConfig
from .config import SuiteConfig, default_config
from .env_auth import create_env_auth_manager
from .github_rest import GitHubRestClient
from .issues import IssueGateway
from .repositories import RepositoryDirectory
from .token_store import TokenStore
from .topics import Confirm, TopicManager
from .ux import confirm as prompt_confirm


@dataclass
class RepoSuite:
    config: SuiteConfig
    token_store: TokenStore
    client: GitHubRestClient
    repositories: RepositoryDirectory
    topics: TopicManager
    issues: IssueGateway

    @classmethod
    def from_config(
        cls,
        cfg: SuiteConfig | None = None,
        *,
        confirm: Confirm = prompt_confirm,
        session: requests.Session | None = None,
    ) -> RepoSuite:
        cfg = cfg or default_config()
        env_auth = create_env_auth_manager(
            load_dotenv=cfg.env_load_dotenv,
            dotenv_path=cfg.env_dotenv_path,
            github_token_var=cfg.env_github_token_var,
        )
        token_store = TokenStore(cfg.token_path, env_auth=env_auth)
        client = GitHubRestClient(
            token_provider=token_store.get_token,
            base_url=cfg.api_url,
            per_page=cfg.per_page,
            timeout=cfg.timeout,
            session=session,
        )
        directory = RepositoryDirectory(client, default_org=cfg.default_org)
        topics = TopicManager(
            client,
            directory,
            confirm=confirm,
            concurrency=ConcurrencyConfig(
                enabled=cfg.concurrency_enabled, max_workers=cfg.concurrency_max_workers
            ),
        )
        return cls(
            config=cfg,
            token_store=token_store,
            client=client,
            repositories=directory,
            topics=topics,
            issues=IssueGateway(client),
        )


__all__ = ["RepoSuite"]
