from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class UpstreamModel(BaseModel):
    """Resource returned by the REST API; unknown fields are passed through untouched."""

    model_config = ConfigDict(extra="allow")


class DataResponse(BaseModel, Generic[T]):
    data: T


class ListResponse(BaseModel, Generic[T]):
    data: list[T]


class MessageResponse(BaseModel):
    message: str


class RedirectTarget(BaseModel):
    redirect_to: str
