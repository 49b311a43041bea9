from typing import Annotated

from fastapi import APIRouter, Depends, Query

from enque_desk.api.deps import AuthedClientDep
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.report import (
    DashboardStats,
    MentionCandidate,
    ReportFilters,
    ReportSummary,
    TimeSeriesPoint,
)
from enque_desk.services.report_service import ReportService

router = APIRouter()


def get_report_service(api_client: AuthedClientDep) -> ReportService:
    return ReportService(api_client=api_client)


ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
ReportFiltersQuery = Annotated[ReportFilters, Query()]


@router.get("/reports/summary", response_model=DataResponse[ReportSummary])
def report_summary(
    service: ReportServiceDep,
    filters: ReportFiltersQuery,
) -> DataResponse[ReportSummary]:
    return DataResponse[ReportSummary](data=service.summary(filters))


@router.get("/reports/created-by-hour", response_model=ListResponse[TimeSeriesPoint])
def created_by_hour(
    service: ReportServiceDep,
    filters: ReportFiltersQuery,
) -> ListResponse[TimeSeriesPoint]:
    return ListResponse[TimeSeriesPoint](data=service.created_by_hour(filters))


@router.get("/reports/created-by-day", response_model=ListResponse[TimeSeriesPoint])
def created_by_day(
    service: ReportServiceDep,
    filters: ReportFiltersQuery,
) -> ListResponse[TimeSeriesPoint]:
    return ListResponse[TimeSeriesPoint](data=service.created_by_day(filters))


@router.get("/dashboard/stats", response_model=DataResponse[DashboardStats])
def dashboard_stats(service: ReportServiceDep) -> DataResponse[DashboardStats]:
    return DataResponse[DashboardStats](data=service.dashboard_stats())


@router.get("/mentions", response_model=ListResponse[MentionCandidate])
def mention_candidates(service: ReportServiceDep) -> ListResponse[MentionCandidate]:
    return ListResponse[MentionCandidate](data=service.mentions())


@router.get("/mentions/suggestions", response_model=ListResponse[MentionCandidate])
def mention_suggestions(
    service: ReportServiceDep,
    q: Annotated[str, Query(max_length=100)] = "",
) -> ListResponse[MentionCandidate]:
    return ListResponse[MentionCandidate](data=service.mention_suggestions(q))
