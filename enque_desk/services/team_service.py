from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.agent import AgentRead
from enque_desk.models.schemas.team import (
    TeamMemberRead,
    TeamRead,
    TeamUpdateRequest,
    TeamWriteRequest,
)


class TeamService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_teams(self) -> list[TeamRead]:
        return [TeamRead.model_validate(item) for item in self.api_client.get("/teams") or []]

    def get_team(self, team_id: int) -> TeamRead:
        try:
            data = self.api_client.get(f"/teams/{team_id}")
        except UpstreamError as exc:
            self._translate_not_found(team_id, exc)
            raise
        return TeamRead.model_validate(data)

    def create_team(self, payload: TeamWriteRequest) -> TeamRead:
        body = payload.model_dump(exclude_none=True)
        body["workspace_id"] = self.workspace_id
        return TeamRead.model_validate(self.api_client.post("/teams", json=body))

    def update_team(self, team_id: int, payload: TeamUpdateRequest) -> TeamRead:
        try:
            data = self.api_client.put(f"/teams/{team_id}", json=payload.model_dump(exclude_unset=True))
        except UpstreamError as exc:
            self._translate_not_found(team_id, exc)
            raise
        return TeamRead.model_validate(data)

    def delete_team(self, team_id: int) -> None:
        try:
            self.api_client.delete(f"/teams/{team_id}")
        except UpstreamError as exc:
            self._translate_not_found(team_id, exc)
            raise

    def list_members(self, team_id: int) -> list[AgentRead]:
        data = self.api_client.get(f"/teams/{team_id}/members") or []
        return [AgentRead.model_validate(item) for item in data]

    def add_member(self, team_id: int, agent_id: int) -> TeamMemberRead:
        data = self.api_client.post(f"/teams/{team_id}/members", json={"agent_id": agent_id})
        return TeamMemberRead.model_validate(data)

    def remove_member(self, team_id: int, agent_id: int) -> None:
        self.api_client.delete(f"/teams/{team_id}/members/{agent_id}")

    def _translate_not_found(self, team_id: int, exc: UpstreamError) -> None:
        if exc.upstream_status == status.HTTP_404_NOT_FOUND:
            raise AppError(
                status_code=status.HTTP_404_NOT_FOUND,
                code="TEAM_NOT_FOUND",
                message="Team not found.",
                details={"team_id": team_id},
            ) from exc
