from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.user import UserCreateRequest, UserRead, UserUpdateRequest
from enque_desk.services.user_service import UserService

router = APIRouter(prefix="/users")


def get_user_service(api_client: AuthedClientDep, workspace_id: WorkspaceIdDep) -> UserService:
    return UserService(api_client=api_client, workspace_id=workspace_id)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("", response_model=ListResponse[UserRead])
def list_users(
    user_service: UserServiceDep,
    company_id: Annotated[int | None, Query()] = None,
    email: Annotated[str | None, Query()] = None,
    name: Annotated[str | None, Query()] = None,
) -> ListResponse[UserRead]:
    users = user_service.list_users({"company_id": company_id, "email": email, "name": name})
    return ListResponse[UserRead](data=users)


@router.get("/unassigned", response_model=ListResponse[UserRead])
def list_unassigned_users(user_service: UserServiceDep) -> ListResponse[UserRead]:
    return ListResponse[UserRead](data=user_service.list_unassigned_users())


@router.post("", response_model=DataResponse[UserRead], status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreateRequest, user_service: UserServiceDep) -> DataResponse[UserRead]:
    return DataResponse[UserRead](data=user_service.create_user(payload))


@router.get("/{user_id}", response_model=DataResponse[UserRead])
def get_user(user_id: int, user_service: UserServiceDep) -> DataResponse[UserRead]:
    return DataResponse[UserRead](data=user_service.get_user(user_id))


@router.put("/{user_id}", response_model=DataResponse[UserRead])
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    user_service: UserServiceDep,
) -> DataResponse[UserRead]:
    return DataResponse[UserRead](data=user_service.update_user(user_id, payload))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, user_service: UserServiceDep) -> Response:
    user_service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
