from typing import Annotated

from fastapi import APIRouter, Depends

from enque_desk.api.deps import ApiClientDep, SettingsDep
from enque_desk.models.schemas.health import HealthResponse
from enque_desk.services.health_service import HealthService

router = APIRouter()


def get_health_service(api_client: ApiClientDep, settings: SettingsDep) -> HealthService:
    return HealthService(api_client=api_client, settings=settings)


@router.get("/health", response_model=HealthResponse)
def health(
    health_service: Annotated[HealthService, Depends(get_health_service)],
) -> HealthResponse:
    return health_service.get_health()
