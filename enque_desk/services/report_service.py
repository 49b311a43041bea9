from concurrent.futures import ThreadPoolExecutor
from typing import Any

from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient, clean_params
from enque_desk.core.errors import AppError
from enque_desk.models.entities import MentionType
from enque_desk.models.schemas.report import (
    DashboardStats,
    MentionCandidate,
    ReportFilters,
    ReportSummary,
    TimeSeriesPoint,
)

MAX_MENTION_SUGGESTIONS = 5


def _mention(row: dict[str, Any], kind: MentionType) -> MentionCandidate | None:
    # Rows without an id, name or email cannot be mentioned.
    if row.get("id") is None or not row.get("name") or not row.get("email"):
        return None
    return MentionCandidate(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        type=kind,
        role=row.get("role") if kind == "agent" else None,
    )


class ReportService:
    def __init__(self, api_client: EnqueApiClient) -> None:
        self.api_client = api_client

    def summary(self, filters: ReportFilters) -> ReportSummary:
        data = self.api_client.get("/reports/summary", params=self._params(filters))
        return ReportSummary.model_validate(data or {})

    def created_by_hour(self, filters: ReportFilters) -> list[TimeSeriesPoint]:
        data = self.api_client.get("/reports/created_by_hour", params=self._params(filters)) or []
        return [TimeSeriesPoint.model_validate(item) for item in data]

    def created_by_day(self, filters: ReportFilters) -> list[TimeSeriesPoint]:
        data = self.api_client.get("/reports/created_by_day", params=self._params(filters)) or []
        return [TimeSeriesPoint.model_validate(item) for item in data]

    def dashboard_stats(self) -> DashboardStats:
        return DashboardStats.model_validate(self.api_client.get("/dashboard/stats") or {})

    def mentions(self) -> list[MentionCandidate]:
        """Agents and end users of the workspace, sorted by name."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            agents_future = executor.submit(self.api_client.get, "/agents/")
            users_future = executor.submit(self.api_client.get, "/users/")
            agents = agents_future.result() or []
            users = users_future.result() or []

        candidates = [_mention(agent, "agent") for agent in agents]
        candidates += [_mention(user, "user") for user in users]
        mentionable = [candidate for candidate in candidates if candidate is not None]
        return sorted(mentionable, key=lambda candidate: candidate.name.casefold())

    def mention_suggestions(self, query: str) -> list[MentionCandidate]:
        prefix = query.strip().casefold()
        agents = [candidate for candidate in self.mentions() if candidate.type == "agent"]
        return [
            candidate for candidate in agents if candidate.name.casefold().startswith(prefix)
        ][:MAX_MENTION_SUGGESTIONS]

    def _params(self, filters: ReportFilters) -> dict[str, str]:
        if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_DATE_RANGE",
                message="start_date must be on or before end_date.",
                details={
                    "start_date": filters.start_date.isoformat(),
                    "end_date": filters.end_date.isoformat(),
                },
            )
        values: dict[str, Any] = filters.model_dump(mode="json", exclude_none=True)
        return clean_params(values)
