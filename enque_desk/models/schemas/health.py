from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


class UpstreamHealth(BaseModel):
    reachable: bool
    status_code: int | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    service: str = "enque-desk"
    environment: str
    upstream: UpstreamHealth
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class LogEntry(BaseModel):
    timestamp: str
    level: str
    message: str
    details: str | None = None
