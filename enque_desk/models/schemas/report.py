from datetime import date

from pydantic import BaseModel

from enque_desk.models.entities import MentionType
from enque_desk.models.schemas.common import UpstreamModel


class ReportFilters(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    team_id: int | None = None


class ReportSummary(UpstreamModel):
    created_tickets: int = 0
    resolved_tickets: int = 0
    unresolved_tickets: int = 0
    average_response_time: str | None = None
    avg_first_response_time: str | None = None
    status_counts: dict[str, int] = {}
    priority_counts: dict[str, int] = {}


class TimeSeriesPoint(UpstreamModel):
    time_unit: str
    count: int


class DashboardStats(UpstreamModel):
    pass


class MentionCandidate(BaseModel):
    id: int
    name: str
    email: str
    type: MentionType
    role: str | None = None
