from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.agent import AgentRead
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.team import (
    TeamMemberRead,
    TeamMemberRequest,
    TeamRead,
    TeamUpdateRequest,
    TeamWriteRequest,
)
from enque_desk.services.team_service import TeamService

router = APIRouter(prefix="/teams")


def get_team_service(api_client: AuthedClientDep, workspace_id: WorkspaceIdDep) -> TeamService:
    return TeamService(api_client=api_client, workspace_id=workspace_id)


TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]


@router.get("", response_model=ListResponse[TeamRead])
def list_teams(team_service: TeamServiceDep) -> ListResponse[TeamRead]:
    return ListResponse[TeamRead](data=team_service.list_teams())


@router.post("", response_model=DataResponse[TeamRead], status_code=status.HTTP_201_CREATED)
def create_team(payload: TeamWriteRequest, team_service: TeamServiceDep) -> DataResponse[TeamRead]:
    return DataResponse[TeamRead](data=team_service.create_team(payload))


@router.get("/{team_id}", response_model=DataResponse[TeamRead])
def get_team(team_id: int, team_service: TeamServiceDep) -> DataResponse[TeamRead]:
    return DataResponse[TeamRead](data=team_service.get_team(team_id))


@router.put("/{team_id}", response_model=DataResponse[TeamRead])
def update_team(
    team_id: int,
    payload: TeamUpdateRequest,
    team_service: TeamServiceDep,
) -> DataResponse[TeamRead]:
    return DataResponse[TeamRead](data=team_service.update_team(team_id, payload))


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_team(team_id: int, team_service: TeamServiceDep) -> Response:
    team_service.delete_team(team_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{team_id}/members", response_model=ListResponse[AgentRead])
def list_team_members(team_id: int, team_service: TeamServiceDep) -> ListResponse[AgentRead]:
    return ListResponse[AgentRead](data=team_service.list_members(team_id))


@router.post(
    "/{team_id}/members",
    response_model=DataResponse[TeamMemberRead],
    status_code=status.HTTP_201_CREATED,
)
def add_team_member(
    team_id: int,
    payload: TeamMemberRequest,
    team_service: TeamServiceDep,
) -> DataResponse[TeamMemberRead]:
    return DataResponse[TeamMemberRead](data=team_service.add_member(team_id, payload.agent_id))


@router.delete("/{team_id}/members/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_team_member(team_id: int, agent_id: int, team_service: TeamServiceDep) -> Response:
    team_service.remove_member(team_id, agent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
