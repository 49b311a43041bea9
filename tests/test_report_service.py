from datetime import date

import pytest
from enque_desk.core.errors import AppError
from enque_desk.models.schemas.report import ReportFilters
from enque_desk.services.report_service import ReportService
from fastapi import status
from fastapi.testclient import TestClient

from tests.helpers.upstream import FakeUpstream

AGENTS = [
    {"id": 1, "name": "zoe", "email": "zoe@acme.io", "role": "agent"},
    {"id": 2, "name": "Adam", "email": "adam@acme.io", "role": "admin"},
    {"id": 3, "name": "Abby", "email": "abby@acme.io", "role": "agent"},
]
USERS = [
    {"id": 10, "name": "Aaron", "email": "aaron@gmail.com"},
    {"id": 11, "name": "mia", "email": "mia@gmail.com"},
]


def _upstream_with_people() -> FakeUpstream:
    upstream = FakeUpstream()
    upstream.on("GET", "/agents/", AGENTS)
    upstream.on("GET", "/users/", USERS)
    return upstream


def test_summary_passes_date_filters() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/reports/summary", {"created_tickets": 12, "resolved_tickets": 7})
    service = ReportService(upstream.client())

    summary = service.summary(ReportFilters(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)))

    assert summary.created_tickets == 12
    assert summary.unresolved_tickets == 0
    params = upstream.requests[0].url.params
    assert params["start_date"] == "2025-01-01"
    assert params["end_date"] == "2025-01-31"
    assert "team_id" not in params


def test_inverted_date_range_is_rejected() -> None:
    upstream = FakeUpstream()
    service = ReportService(upstream.client())

    with pytest.raises(AppError) as exc_info:
        service.created_by_day(ReportFilters(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1)))

    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
    assert exc_info.value.code == "INVALID_DATE_RANGE"
    assert upstream.requests == []


def test_created_by_hour_series() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/reports/created_by_hour", [{"time_unit": "09", "count": 4}])
    service = ReportService(upstream.client())

    points = service.created_by_hour(ReportFilters(team_id=2))

    assert [(point.time_unit, point.count) for point in points] == [("09", 4)]
    assert upstream.requests[0].url.params["team_id"] == "2"


def test_mentions_merge_agents_and_users_sorted_by_name() -> None:
    service = ReportService(_upstream_with_people().client())

    mentions = service.mentions()

    assert [(mention.name, mention.type) for mention in mentions] == [
        ("Aaron", "user"),
        ("Abby", "agent"),
        ("Adam", "agent"),
        ("mia", "user"),
        ("zoe", "agent"),
    ]
    assert mentions[2].role == "admin"
    assert mentions[0].role is None


def test_mentions_skip_rows_missing_name_or_email() -> None:
    upstream = FakeUpstream()
    upstream.on(
        "GET",
        "/agents/",
        [{"id": 1, "name": "Abby", "email": "abby@acme.io"}, {"id": 2, "name": "No Email"}],
    )
    upstream.on("GET", "/users/", [{"id": 9, "email": "anon@acme.io"}])
    service = ReportService(upstream.client())

    assert [(mention.id, mention.type) for mention in service.mentions()] == [(1, "agent")]


def test_suggestions_only_include_matching_agents() -> None:
    service = ReportService(_upstream_with_people().client())

    assert [mention.id for mention in service.mention_suggestions("a")] == [3, 2]
    assert [mention.id for mention in service.mention_suggestions("")] == [3, 2, 1]


def test_suggestions_are_capped() -> None:
    upstream = FakeUpstream()
    upstream.on(
        "GET",
        "/agents/",
        [{"id": index, "name": f"Agent {index}", "email": f"a{index}@acme.io"} for index in range(8)],
    )
    upstream.on("GET", "/users/", [])
    service = ReportService(upstream.client())

    assert len(service.mention_suggestions("agent")) == 5


def test_report_route_validates_dates(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/reports/summary?start_date=yesterday", headers=auth_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
