from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.company import (
    CompanyCreateRequest,
    CompanyRead,
    CompanyUpdateRequest,
)
from enque_desk.models.schemas.user import UserRead
from enque_desk.services.company_service import CompanyService

router = APIRouter(prefix="/companies")


def get_company_service(api_client: AuthedClientDep, workspace_id: WorkspaceIdDep) -> CompanyService:
    return CompanyService(api_client=api_client, workspace_id=workspace_id)


CompanyServiceDep = Annotated[CompanyService, Depends(get_company_service)]


@router.get("", response_model=ListResponse[CompanyRead])
def list_companies(
    company_service: CompanyServiceDep,
    name: Annotated[str | None, Query()] = None,
    email_domain: Annotated[str | None, Query()] = None,
) -> ListResponse[CompanyRead]:
    companies = company_service.list_companies({"name": name, "email_domain": email_domain})
    return ListResponse[CompanyRead](data=companies)


@router.post("", response_model=DataResponse[CompanyRead], status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreateRequest,
    company_service: CompanyServiceDep,
) -> DataResponse[CompanyRead]:
    return DataResponse[CompanyRead](data=company_service.create_company(payload))


@router.get("/{company_id}", response_model=DataResponse[CompanyRead])
def get_company(company_id: int, company_service: CompanyServiceDep) -> DataResponse[CompanyRead]:
    return DataResponse[CompanyRead](data=company_service.get_company(company_id))


@router.put("/{company_id}", response_model=DataResponse[CompanyRead])
def update_company(
    company_id: int,
    payload: CompanyUpdateRequest,
    company_service: CompanyServiceDep,
) -> DataResponse[CompanyRead]:
    return DataResponse[CompanyRead](data=company_service.update_company(company_id, payload))


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(company_id: int, company_service: CompanyServiceDep) -> Response:
    company_service.delete_company(company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{company_id}/users", response_model=ListResponse[UserRead])
def list_company_users(company_id: int, company_service: CompanyServiceDep) -> ListResponse[UserRead]:
    return ListResponse[UserRead](data=company_service.list_company_users(company_id))
