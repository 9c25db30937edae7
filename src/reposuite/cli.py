"""RepoSuite CLI.

Subcommands:
  auth     -> persist a GitHub token
  repos    -> list repositories of a user or organization
  repo     -> show a single repository
  topics   -> list/add/remove repository topics (single repo or whole org)
  issues   -> list/create/clone issues
  pulls    -> list pull requests
  reviews  -> list reviews of a pull request
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Callable, Iterable
from typing import Any

from reposuite.config import ConfigError
from reposuite.core import RepoSuite
from reposuite.logging import configure_logging
from reposuite.models import (
    CloneIssueDestinationDto,
    CloneIssueSourceDto,
    CreateIssueDto,
    Issue,
    PullRequest,
    Repository,
    Review,
)
from reposuite.runtime import EXIT_FAILURE, EXIT_OK, execute_command, prepare_config
from reposuite.ux import print_error, print_info, print_success

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _add_owner_repo(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("owner", help="Repository owner (user or organization)")
    parser.add_argument("repo", help="Repository name")


def _add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print raw API payloads as JSON")


def _add_topic_mutation(sub: Any, name: str, help_text: str) -> None:
    p = sub.add_parser(name, help=help_text)
    p.add_argument("topic")
    p.add_argument("owner", nargs="?")
    p.add_argument("repo", nargs="?")
    p.add_argument(
        "--all",
        action="store_true",
        dest="all_repos",
        help="Apply to every repository of the default organization",
    )
    p.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with subcommands.

    Keep ordering stable for help output readability.
    """
    p = _FormatterArgumentParser(
        prog="reposuite", description="GitHub repository, topic and issue automation"
    )
    p.add_argument("--config", help="Path to reposuite.config.yaml (optional)")
    p.add_argument("--org", dest="default_org", help="Override the default organization")
    p.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    p.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output (env: REPOSUITE_QUIET=1)",
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pa = sub.add_parser("auth", help="Persist a GitHub token to the local token file")
    pa.add_argument("--token", required=True)

    pr = sub.add_parser("repos", help="List repositories")
    pr.add_argument(
        "--username",
        help="List this user's repositories named after the default organization",
    )
    pr.add_argument(
        "--owner", help="List every repository of this user or organization (no filtering)"
    )
    _add_json_flag(pr)

    prepo = sub.add_parser("repo", help="Show one repository")
    _add_owner_repo(prepo)
    _add_json_flag(prepo)

    pt = sub.add_parser("topics", help="Manage repository topics")
    tsub = pt.add_subparsers(
        dest="topics_cmd", required=True, parser_class=_FormatterArgumentParser
    )
    tl = tsub.add_parser("list", help="List topics of a repository")
    _add_owner_repo(tl)
    _add_json_flag(tl)
    _add_topic_mutation(tsub, "add", "Add a topic to one repository or the whole organization")
    _add_topic_mutation(
        tsub, "remove", "Remove a topic from one repository or the whole organization"
    )

    pi = sub.add_parser("issues", help="List, create and clone issues")
    isub = pi.add_subparsers(
        dest="issues_cmd", required=True, parser_class=_FormatterArgumentParser
    )
    il = isub.add_parser("list", help="List issues of a repository")
    _add_owner_repo(il)
    il.add_argument("--state", default="open", choices=["open", "closed", "all"])
    _add_json_flag(il)
    ic = isub.add_parser("create", help="Create an issue")
    _add_owner_repo(ic)
    ic.add_argument("--title", required=True)
    ic.add_argument("--body")
    icl = isub.add_parser("clone", help="Copy an issue into another repository")
    icl.add_argument("source_owner")
    icl.add_argument("source_repo")
    icl.add_argument("number", type=int)
    icl.add_argument("destination_owner")
    icl.add_argument("destination_repo")

    pp = sub.add_parser("pulls", help="List pull requests of a repository")
    _add_owner_repo(pp)
    _add_json_flag(pp)

    prv = sub.add_parser("reviews", help="List reviews of a pull request")
    _add_owner_repo(prv)
    prv.add_argument("number", type=int)
    _add_json_flag(prv)

    return p


def _print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def _emit(items: list[Any], as_json: bool, render: Callable[[Any], str]) -> None:
    if as_json:
        print(json.dumps([getattr(i, "raw", i) for i in items], indent=2))
        return
    _print_lines(render(i) for i in items)


def _render_repo(repo: Repository) -> str:
    topics = f" [{', '.join(repo.topics)}]" if repo.topics else ""
    return f"{repo.full_name}{topics}"


def _render_issue(issue: Issue) -> str:
    author = f" (@{issue.user_login})" if issue.user_login else ""
    return f"#{issue.number} {issue.title}{author}"


def _render_pull(pull: PullRequest) -> str:
    return f"#{pull.number} {pull.title or ''}".rstrip()


def _render_review(review: Review) -> str:
    return f"{review.user_login or 'unknown'}: {review.state or 'UNKNOWN'}"


def _cmd_auth(suite: RepoSuite, args: argparse.Namespace) -> int:
    path = suite.token_store.configure_token(args.token)
    print_success(f"Token saved to {path}")
    return EXIT_OK


def _cmd_repos(suite: RepoSuite, args: argparse.Namespace) -> int:
    if args.owner:
        repos = asyncio.run(suite.repositories.repositories(args.owner))
    else:
        repos = asyncio.run(suite.repositories.repositories_by_andculture(args.username))
    repos = repos or []
    _emit(repos, args.json, _render_repo)
    if not args.json:
        print_info(f"Total: {len(repos)}")
    return EXIT_OK


def _cmd_repo(suite: RepoSuite, args: argparse.Namespace) -> int:
    repo = asyncio.run(suite.repositories.get_repo(args.owner, args.repo))
    if repo is None:
        print_error(f"Repository {args.owner}/{args.repo} not found")
        return EXIT_FAILURE
    if args.json:
        print(json.dumps(repo.raw, indent=2))
    else:
        print(_render_repo(repo))
    return EXIT_OK


def _cmd_topics_list(suite: RepoSuite, args: argparse.Namespace) -> int:
    topics = asyncio.run(suite.topics.topics_for_repository(args.owner, args.repo))
    if topics is None:
        return EXIT_FAILURE
    if args.json:
        print(json.dumps(topics))
    else:
        _print_lines(topics)
    return EXIT_OK


def _cmd_topics_mutate(suite: RepoSuite, args: argparse.Namespace, action: str) -> int:
    if args.yes:
        suite.topics.confirm = lambda _message: True
    manager = suite.topics
    if args.all_repos:
        bulk = (
            manager.add_topic_to_all_repositories
            if action == "add"
            else manager.remove_topic_from_all_repositories
        )
        result = asyncio.run(bulk(args.topic))
        result.raise_for_failures()
        return EXIT_OK

    single = (
        manager.add_topic_to_repository if action == "add" else manager.remove_topic_from_repository
    )
    topics = asyncio.run(single(args.topic, args.owner, args.repo))
    if topics is None:
        return EXIT_FAILURE
    print_success(f"{args.owner}/{args.repo} topics: {', '.join(topics) or '(none)'}")
    return EXIT_OK


def _cmd_issues_list(suite: RepoSuite, args: argparse.Namespace) -> int:
    issues = asyncio.run(suite.issues.get_issues(args.owner, args.repo, state=args.state))
    if issues is None:
        return EXIT_FAILURE
    _emit(issues, args.json, _render_issue)
    return EXIT_OK


def _cmd_issues_create(suite: RepoSuite, args: argparse.Namespace) -> int:
    dto = CreateIssueDto(owner=args.owner, repo=args.repo, title=args.title, body=args.body)
    issue = asyncio.run(suite.issues.add_issue_to_repository(dto))
    if issue is None:
        print_error(f"Issue was not created in {args.owner}/{args.repo}")
        return EXIT_FAILURE
    print_success(f"Created issue #{issue.number} in {args.owner}/{args.repo}")
    return EXIT_OK


def _cmd_issues_clone(suite: RepoSuite, args: argparse.Namespace) -> int:
    source = CloneIssueSourceDto(owner=args.source_owner, repo=args.source_repo, number=args.number)
    destination = CloneIssueDestinationDto(
        owner=args.destination_owner, repo=args.destination_repo
    )
    issue = asyncio.run(suite.issues.clone_issue_to_repository(source, destination))
    if issue is None:
        print_error(f"Issue was not created in {destination.owner}/{destination.repo}")
        return EXIT_FAILURE
    print_success(
        f"Cloned {source.owner}/{source.repo}#{source.number} to "
        f"{destination.owner}/{destination.repo}#{issue.number}"
    )
    return EXIT_OK


def _cmd_pulls(suite: RepoSuite, args: argparse.Namespace) -> int:
    pulls = asyncio.run(suite.issues.get_pull_requests(args.owner, args.repo))
    if pulls is None:
        return EXIT_FAILURE
    _emit(pulls, args.json, _render_pull)
    return EXIT_OK


def _cmd_reviews(suite: RepoSuite, args: argparse.Namespace) -> int:
    reviews = asyncio.run(
        suite.issues.get_pull_request_reviews(args.owner, args.repo, args.number)
    )
    if reviews is None:
        return EXIT_FAILURE
    _emit(reviews, args.json, _render_review)
    return EXIT_OK


def _command_name(args: argparse.Namespace) -> str:
    sub = getattr(args, "topics_cmd", None) or getattr(args, "issues_cmd", None)
    return f"{args.cmd}-{sub}" if sub else str(args.cmd)


def _build_handlers(args: argparse.Namespace, suite: RepoSuite) -> dict[str, Any]:
    return {
        "auth": lambda: _cmd_auth(suite, args),
        "repos": lambda: _cmd_repos(suite, args),
        "repo": lambda: _cmd_repo(suite, args),
        "topics-list": lambda: _cmd_topics_list(suite, args),
        "topics-add": lambda: _cmd_topics_mutate(suite, args, "add"),
        "topics-remove": lambda: _cmd_topics_mutate(suite, args, "remove"),
        "issues-list": lambda: _cmd_issues_list(suite, args),
        "issues-create": lambda: _cmd_issues_create(suite, args),
        "issues-clone": lambda: _cmd_issues_clone(suite, args),
        "pulls": lambda: _cmd_pulls(suite, args),
        "reviews": lambda: _cmd_reviews(suite, args),
    }


def main(argv: list[str] | None = None, *, suite: RepoSuite | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    command = _command_name(args)
    if command in {"topics-add", "topics-remove"}:
        if args.all_repos and (args.owner or args.repo):
            parser.error(f"{args.topics_cmd} takes either OWNER REPO or --all, not both")
        if not args.all_repos and not (args.owner and args.repo):
            parser.error(f"{args.topics_cmd} requires OWNER and REPO, or --all")
    try:
        cfg = prepare_config(args)
    except ConfigError as exc:
        print_error(str(exc))
        return EXIT_FAILURE
    configure_logging(json_logging=cfg.logging_json_enabled, level=cfg.logging_level)
    if suite is None:
        suite = RepoSuite.from_config(cfg)
    handler = _build_handlers(args, suite).get(command)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return EXIT_FAILURE
    return execute_command(handler, command)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
