import asyncio
import json

import pytest
import requests
from helpers import FakeSession, issue_payload

from reposuite.errors import ParameterError, SourceIssueNotFoundError
from reposuite.issues import CREATE_ISSUE_NO_RESULT_STATUSES, IssueGateway
from reposuite.logging import configure_logging
from reposuite.models import (
    CloneIssueDestinationDto,
    CloneIssueSourceDto,
    CreateIssueDto,
    Issue,
)

ISSUES = "/repos/acme/widgets/issues"


@pytest.fixture
def gateway(client) -> IssueGateway:
    return IssueGateway(client)


# ---- listing ----------------------------------------------------------------
def test_get_issues_maps_payload_and_passes_state(gateway, session: FakeSession):
    session.add_pages(ISSUES, [issue_payload(1, "First")])

    issues = asyncio.run(gateway.get_issues("acme", "widgets", state="closed"))

    assert [(i.number, i.title, i.user_login) for i in issues or []] == [(1, "First", "octocat")]
    assert session.requests[0]["params"]["state"] == "closed"


def test_get_issues_failure_returns_none(gateway, session: FakeSession, capsys):
    session.add("GET", ISSUES, 404, {"message": "Not Found"})

    assert asyncio.run(gateway.get_issues("acme", "widgets")) is None
    assert "Could not retrieve issues for acme/widgets" in capsys.readouterr().err


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_listings_validate_parameters(gateway, session: FakeSession, blank):
    with pytest.raises(ParameterError):
        asyncio.run(gateway.get_issues(blank, "widgets"))
    with pytest.raises(ParameterError):
        asyncio.run(gateway.get_pull_requests("acme", blank))
    with pytest.raises(ParameterError):
        asyncio.run(gateway.get_pull_request_reviews(blank, "widgets", 1))
    assert session.requests == []


def test_get_pull_request_reviews_requires_number(gateway, session: FakeSession):
    with pytest.raises(ParameterError) as excinfo:
        asyncio.run(gateway.get_pull_request_reviews("acme", "widgets", None))
    assert excinfo.value.name == "pull_number"


def test_get_pull_requests(gateway, session: FakeSession):
    session.add(
        "GET",
        "/repos/acme/widgets/pulls",
        200,
        [{"number": 12, "title": "Bump deps", "user": {"login": "dependabot"}, "state": "open"}],
    )

    pulls = asyncio.run(gateway.get_pull_requests("acme", "widgets"))

    assert pulls is not None and len(pulls) == 1
    assert pulls[0].number == 12
    assert pulls[0].user_login == "dependabot"


def test_get_pull_request_reviews(gateway, session: FakeSession):
    session.add(
        "GET",
        "/repos/acme/widgets/pulls/12/reviews",
        200,
        [{"id": 99, "state": "APPROVED", "user": {"login": "reviewer"}, "body": "LGTM"}],
    )

    reviews = asyncio.run(gateway.get_pull_request_reviews("acme", "widgets", 12))

    assert [(r.id, r.state, r.user_login) for r in reviews or []] == [(99, "APPROVED", "reviewer")]


# ---- create -----------------------------------------------------------------
def test_add_issue_returns_server_issue(gateway, session: FakeSession):
    session.add(
        "POST",
        ISSUES,
        201,
        {"number": 42, "title": "Server title", "body": "b", "html_url": "https://github.test/i/42"},
    )

    issue = asyncio.run(gateway.add_issue_to_repository(CreateIssueDto("acme", "widgets", "t", "b")))

    assert issue is not None
    assert issue.number == 42
    assert issue.title == "Server title"
    assert issue.url == "https://github.test/i/42"
    assert session.calls("POST")[0]["json"] == {"title": "t", "body": "b"}


def test_add_issue_without_body_omits_it(gateway, session: FakeSession):
    session.add("POST", ISSUES, 201, {"number": 1, "title": "t"})

    asyncio.run(gateway.add_issue_to_repository(CreateIssueDto("acme", "widgets", "t")))

    assert session.calls("POST")[0]["json"] == {"title": "t"}


@pytest.mark.parametrize("status", sorted(CREATE_ISSUE_NO_RESULT_STATUSES))
def test_add_issue_not_created_statuses_return_none_quietly(gateway, session: FakeSession, capsys, status):
    session.add("POST", ISSUES, status, {"message": "nope"})

    assert asyncio.run(gateway.add_issue_to_repository(CreateIssueDto("acme", "widgets", "t"))) is None
    assert capsys.readouterr().err == ""


def test_add_issue_server_error_reports(gateway, session: FakeSession, capsys):
    session.add("POST", ISSUES, 500, {"message": "boom"})

    assert asyncio.run(gateway.add_issue_to_repository(CreateIssueDto("acme", "widgets", "t"))) is None
    assert "status 500" in capsys.readouterr().err


def test_add_issue_transport_error_reports(gateway, session: FakeSession, capsys):
    session.fail("POST", ISSUES, requests.ConnectionError("connection reset"))

    assert asyncio.run(gateway.add_issue_to_repository(CreateIssueDto("acme", "widgets", "t"))) is None
    assert "connection reset" in capsys.readouterr().err


# ---- DTOs -------------------------------------------------------------------
@pytest.mark.parametrize(
    "factory",
    [
        lambda: CreateIssueDto("", "widgets", "t"),
        lambda: CreateIssueDto("acme", None, "t"),  # type: ignore[arg-type]
        lambda: CreateIssueDto("acme", "widgets", "  "),
        lambda: CloneIssueSourceDto("acme", "widgets", None),  # type: ignore[arg-type]
        lambda: CloneIssueSourceDto(" ", "widgets", 1),
        lambda: CloneIssueDestinationDto("acme", ""),
    ],
)
def test_dtos_reject_blank_fields(factory):
    with pytest.raises(ParameterError):
        factory()


# ---- clone ------------------------------------------------------------------
class RecordingCreator:
    def __init__(self, result: Issue | None):
        self.result = result
        self.calls: list[CreateIssueDto] = []

    async def __call__(self, dto: CreateIssueDto) -> Issue | None:
        self.calls.append(dto)
        return self.result


def test_clone_missing_source_issue_raises_and_creates_nothing(gateway, session: FakeSession, capsys):
    session.add_pages(ISSUES, [issue_payload(5), issue_payload(9)])
    creator = RecordingCreator(None)

    with pytest.raises(SourceIssueNotFoundError) as excinfo:
        asyncio.run(
            gateway.clone_issue_to_repository(
                CloneIssueSourceDto("acme", "widgets", 7),
                CloneIssueDestinationDto("acme", "gadgets"),
                create_issue=creator,
            )
        )

    assert excinfo.value.exit_code == 3
    assert creator.calls == []
    assert session.calls("POST") == []
    assert "#7" in capsys.readouterr().err


def test_clone_searches_all_states(gateway, session: FakeSession):
    session.add_pages(ISSUES, [issue_payload(9, "Closed one", state="closed")])
    creator = RecordingCreator(None)

    asyncio.run(
        gateway.clone_issue_to_repository(
            CloneIssueSourceDto("acme", "widgets", 9),
            CloneIssueDestinationDto("acme", "gadgets"),
            create_issue=creator,
        )
    )

    assert session.requests[0]["params"]["state"] == "all"
    assert len(creator.calls) == 1


def test_clone_creates_issue_with_source_title_and_body(gateway, session: FakeSession):
    session.add_pages(ISSUES, [issue_payload(5, "Five"), issue_payload(9, "Nine")])
    created = Issue(number=100, title="Nine")
    creator = RecordingCreator(created)

    result = asyncio.run(
        gateway.clone_issue_to_repository(
            CloneIssueSourceDto("acme", "widgets", 9),
            CloneIssueDestinationDto("other", "gadgets"),
            create_issue=creator,
        )
    )

    assert result is created
    assert creator.calls == [CreateIssueDto("other", "gadgets", "Nine", "body 9")]


def test_clone_end_to_end_posts_to_destination(gateway, session: FakeSession):
    session.add_pages(ISSUES, [issue_payload(3, "Three")])
    session.add("POST", "/repos/other/gadgets/issues", 201, {"number": 1, "title": "Three"})

    result = asyncio.run(
        gateway.clone_issue_to_repository(
            CloneIssueSourceDto("acme", "widgets", 3),
            CloneIssueDestinationDto("other", "gadgets"),
        )
    )

    assert result is not None and result.number == 1
    assert session.calls("POST")[0]["json"] == {"title": "Three", "body": "body 3"}


def _log_records(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


def test_clone_is_timed_and_logged(client, session: FakeSession, capsys):
    configure_logging(json_logging=True, level="INFO")
    gateway = IssueGateway(client)
    session.add_pages(ISSUES, [issue_payload(3, "Three")])
    session.add("POST", "/repos/other/gadgets/issues", 201, {"number": 1, "title": "Three"})

    asyncio.run(
        gateway.clone_issue_to_repository(
            CloneIssueSourceDto("acme", "widgets", 3),
            CloneIssueDestinationDto("other", "gadgets"),
        )
    )

    operations = [r.get("operation") for r in _log_records(capsys.readouterr().err)]
    assert operations[0] == "issue_clone_start"
    assert "issue_clone" in operations


def test_clone_hard_stop_is_logged_as_error(client, session: FakeSession, capsys):
    configure_logging(json_logging=True, level="INFO")
    gateway = IssueGateway(client)
    session.add_pages(ISSUES, [issue_payload(5)])

    with pytest.raises(SourceIssueNotFoundError):
        asyncio.run(
            gateway.clone_issue_to_repository(
                CloneIssueSourceDto("acme", "widgets", 7),
                CloneIssueDestinationDto("other", "gadgets"),
            )
        )

    errors = [r for r in _log_records(capsys.readouterr().err) if r["level"] == "ERROR"]
    assert errors[-1]["issue_number"] == 7
    assert "Could not find issue #7" in errors[-1]["error"]
