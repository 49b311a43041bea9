from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.category import CategoryCreateRequest, CategoryRead
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.services.category_service import CategoryService

router = APIRouter(prefix="/categories")


def get_category_service(api_client: AuthedClientDep, workspace_id: WorkspaceIdDep) -> CategoryService:
    return CategoryService(api_client=api_client, workspace_id=workspace_id)


CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]


@router.get("", response_model=ListResponse[CategoryRead])
def list_categories(
    category_service: CategoryServiceDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
) -> ListResponse[CategoryRead]:
    return ListResponse[CategoryRead](data=category_service.list_categories(skip=skip, limit=limit))


@router.post("", response_model=DataResponse[CategoryRead], status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreateRequest,
    category_service: CategoryServiceDep,
) -> DataResponse[CategoryRead]:
    return DataResponse[CategoryRead](data=category_service.create_category(payload))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, category_service: CategoryServiceDep) -> Response:
    category_service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
