from collections.abc import Mapping
from typing import Any

from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient, filter_params
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.company import (
    CompanyCreateRequest,
    CompanyRead,
    CompanyUpdateRequest,
)
from enque_desk.models.schemas.user import UserRead


class CompanyService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_companies(self, filters: Mapping[str, Any] | None = None) -> list[CompanyRead]:
        data = self.api_client.get("/companies", params=filter_params(filters or {})) or []
        return [CompanyRead.model_validate(item) for item in data]

    def get_company(self, company_id: int) -> CompanyRead:
        matches = self.list_companies({"id": company_id})
        if not matches:
            self._raise_company_not_found(company_id)
        return matches[0]

    def create_company(self, payload: CompanyCreateRequest) -> CompanyRead:
        body = payload.model_dump(exclude_none=True)
        body["workspace_id"] = self.workspace_id
        return CompanyRead.model_validate(self.api_client.post("/companies", json=body))

    def update_company(self, company_id: int, payload: CompanyUpdateRequest) -> CompanyRead:
        try:
            data = self.api_client.put(
                f"/companies/{company_id}",
                json=payload.model_dump(exclude_unset=True),
            )
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_company_not_found(company_id)
            raise
        return CompanyRead.model_validate(data)

    def delete_company(self, company_id: int) -> None:
        try:
            self.api_client.delete(f"/companies/{company_id}")
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_company_not_found(company_id)
            raise

    def list_company_users(self, company_id: int) -> list[UserRead]:
        data = self.api_client.get(f"/companies/{company_id}/users") or []
        return [UserRead.model_validate(item) for item in data]

    def _raise_company_not_found(self, company_id: int) -> None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="COMPANY_NOT_FOUND",
            message="Company not found.",
            details={"company_id": company_id},
        )
