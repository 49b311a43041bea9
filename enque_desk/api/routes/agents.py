from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from enque_desk.api.deps import AuthedClientDep, SessionDep
from enque_desk.models.schemas.agent import AgentInviteRequest, AgentRead, AgentUpdateRequest
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.team import TeamRead
from enque_desk.services.agent_service import AgentService

router = APIRouter(prefix="/agents")


def get_agent_service(api_client: AuthedClientDep, session: SessionDep) -> AgentService:
    return AgentService(api_client=api_client, workspace_id=session.workspace_id)


AgentServiceDep = Annotated[AgentService, Depends(get_agent_service)]


@router.get("", response_model=ListResponse[AgentRead])
def list_agents(agent_service: AgentServiceDep) -> ListResponse[AgentRead]:
    return ListResponse[AgentRead](data=agent_service.list_agents())


@router.post("/invite", response_model=DataResponse[AgentRead], status_code=status.HTTP_201_CREATED)
def invite_agent(
    payload: AgentInviteRequest,
    agent_service: AgentServiceDep,
) -> DataResponse[AgentRead]:
    return DataResponse[AgentRead](data=agent_service.invite_agent(payload))


@router.get("/{agent_id}", response_model=DataResponse[AgentRead])
def get_agent(agent_id: int, agent_service: AgentServiceDep) -> DataResponse[AgentRead]:
    return DataResponse[AgentRead](data=agent_service.get_agent(agent_id))


@router.put("/{agent_id}", response_model=DataResponse[AgentRead])
def update_agent(
    agent_id: int,
    payload: AgentUpdateRequest,
    agent_service: AgentServiceDep,
) -> DataResponse[AgentRead]:
    return DataResponse[AgentRead](data=agent_service.update_agent(agent_id, payload))


@router.get("/{agent_id}/teams", response_model=ListResponse[TeamRead])
def list_agent_teams(agent_id: int, agent_service: AgentServiceDep) -> ListResponse[TeamRead]:
    return ListResponse[TeamRead](data=agent_service.list_agent_teams(agent_id))


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agent(agent_id: int, agent_service: AgentServiceDep) -> Response:
    agent_service.delete_agent(agent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
