from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from enque_desk.api.deps import SessionDep
from enque_desk.core.logging import log_buffer
from enque_desk.models.entities import LogLevel
from enque_desk.models.schemas.common import ListResponse
from enque_desk.models.schemas.health import LogEntry

router = APIRouter(prefix="/logs")


@router.get("", response_model=ListResponse[LogEntry])
def recent_logs(
    _: SessionDep,
    level: Annotated[LogLevel | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> ListResponse[LogEntry]:
    entries = [
        LogEntry.model_validate(entry)
        for entry in log_buffer.entries()
        if level is None or entry["level"] == level
    ]
    return ListResponse[LogEntry](data=entries[:limit])


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_logs(_: SessionDep) -> Response:
    log_buffer.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
