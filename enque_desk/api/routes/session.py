from fastapi import APIRouter

from enque_desk.api.deps import SessionDep
from enque_desk.core.session import UserSession
from enque_desk.models.schemas.common import DataResponse

router = APIRouter()


@router.get("/session", response_model=DataResponse[UserSession])
def read_session(session: SessionDep) -> DataResponse[UserSession]:
    return DataResponse[UserSession](data=session)
