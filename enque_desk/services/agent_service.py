import structlog
from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.agent import (
    AcceptInvitationRequest,
    AgentInviteRequest,
    AgentRead,
    AgentSignUpRequest,
    AgentUpdateRequest,
)
from enque_desk.models.schemas.auth import TokenRead
from enque_desk.models.schemas.team import TeamRead

logger = structlog.get_logger(__name__)


class AgentService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int | None = None) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_agents(self) -> list[AgentRead]:
        return [AgentRead.model_validate(item) for item in self.api_client.get("/agents/") or []]

    def get_agent(self, agent_id: int) -> AgentRead:
        try:
            data = self.api_client.get(f"/agents/{agent_id}")
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_agent_not_found(agent_id)
            raise
        return AgentRead.model_validate(data)

    def update_agent(self, agent_id: int, payload: AgentUpdateRequest) -> AgentRead:
        changes = payload.model_dump(mode="json", exclude_unset=True)
        try:
            data = self.api_client.put(f"/agents/{agent_id}", json=changes)
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_agent_not_found(agent_id)
            raise
        return AgentRead.model_validate(data)

    def list_agent_teams(self, agent_id: int) -> list[TeamRead]:
        data = self.api_client.get(f"/agents/{agent_id}/teams") or []
        return [TeamRead.model_validate(item) for item in data]

    def delete_agent(self, agent_id: int) -> None:
        try:
            self.api_client.delete(f"/agents/{agent_id}")
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_agent_not_found(agent_id)
            raise

    def invite_agent(self, payload: AgentInviteRequest) -> AgentRead:
        if self.workspace_id is None:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_WORKSPACE",
                message="Agents can only be invited into a workspace.",
            )
        data = self.api_client.post(
            "/agents/invite",
            json={
                "name": payload.name,
                "email": payload.email,
                "role": payload.role,
                "workspace_id": self.workspace_id,
            },
        )
        logger.info("Agent invited", email=payload.email, workspace_id=self.workspace_id)
        return AgentRead.model_validate(data)

    def accept_invitation(self, payload: AcceptInvitationRequest) -> TokenRead:
        data = self.api_client.post(
            "/agents/accept-invitation",
            json={"token": payload.token, "password": payload.password},
        )
        return TokenRead.model_validate(data)

    def create_agent(self, payload: AgentSignUpRequest) -> AgentRead:
        workspace_id = payload.workspace_id or self.workspace_id
        if workspace_id is None:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_WORKSPACE",
                message="A workspace is required to create an agent.",
            )
        data = self.api_client.post(
            "/agents/",
            json={
                "name": payload.name,
                "email": payload.email,
                "password": payload.password,
                "workspace_id": workspace_id,
            },
        )
        return AgentRead.model_validate(data)

    def _raise_agent_not_found(self, agent_id: int) -> None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="AGENT_NOT_FOUND",
            message="Agent not found.",
            details={"agent_id": agent_id},
        )
