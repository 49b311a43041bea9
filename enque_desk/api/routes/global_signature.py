from typing import Annotated

from fastapi import APIRouter, Depends

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.common import DataResponse
from enque_desk.models.schemas.global_signature import (
    GlobalSignatureRead,
    GlobalSignatureToggleRequest,
    GlobalSignatureUpdateRequest,
)
from enque_desk.services.global_signature_service import GlobalSignatureService

router = APIRouter(prefix="/global-signature")


def get_global_signature_service(
    api_client: AuthedClientDep,
    workspace_id: WorkspaceIdDep,
) -> GlobalSignatureService:
    return GlobalSignatureService(api_client=api_client, workspace_id=workspace_id)


GlobalSignatureServiceDep = Annotated[GlobalSignatureService, Depends(get_global_signature_service)]


@router.get("", response_model=DataResponse[GlobalSignatureRead | None])
def get_global_signature(service: GlobalSignatureServiceDep) -> DataResponse[GlobalSignatureRead | None]:
    return DataResponse[GlobalSignatureRead | None](data=service.get_signature())


@router.get("/enabled", response_model=DataResponse[GlobalSignatureRead | None])
def get_enabled_global_signature(
    service: GlobalSignatureServiceDep,
) -> DataResponse[GlobalSignatureRead | None]:
    return DataResponse[GlobalSignatureRead | None](data=service.get_enabled_signature())


@router.put("", response_model=DataResponse[GlobalSignatureRead])
def update_global_signature(
    payload: GlobalSignatureUpdateRequest,
    service: GlobalSignatureServiceDep,
) -> DataResponse[GlobalSignatureRead]:
    return DataResponse[GlobalSignatureRead](data=service.update_signature(payload))


@router.put("/toggle", response_model=DataResponse[GlobalSignatureRead])
def toggle_global_signature(
    payload: GlobalSignatureToggleRequest,
    service: GlobalSignatureServiceDep,
) -> DataResponse[GlobalSignatureRead]:
    return DataResponse[GlobalSignatureRead](data=service.toggle_signature(payload.is_enabled))
