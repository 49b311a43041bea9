"""
Microsoft 365 sign-in and mailbox linking.

The OAuth dance itself happens between the browser, Microsoft and the REST
API. This service builds the ``state`` the API expects, so that the callback
lands back on the workspace the agent started from, and reads the result the
API appends to the callback URL.
"""

import base64
import json
from collections.abc import Mapping
from urllib.parse import unquote

from enque_desk.clients.api_client import EnqueApiClient, clean_params
from enque_desk.models.schemas.microsoft import (
    MicrosoftAuthStatus,
    MicrosoftAuthUrl,
    MicrosoftCallback,
    MicrosoftLinkResult,
    MicrosoftProfile,
)

SERVICE_PATH = "/microsoft/auth"


def build_state(workspace_id: int, original_hostname: str) -> str:
    payload = json.dumps(
        {"workspace_id": str(workspace_id), "original_hostname": original_hostname},
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def parse_callback(params: Mapping[str, str]) -> MicrosoftCallback:
    if params.get("m365_auth") == "success" and params.get("token"):
        return MicrosoftCallback(token=params["token"], is_new=params.get("is_new") == "true")
    if params.get("error"):
        return MicrosoftCallback(error=unquote(params["error"]))
    return MicrosoftCallback()


class MicrosoftAuthService:
    def __init__(self, api_client: EnqueApiClient) -> None:
        self.api_client = api_client

    def get_auth_url(self, workspace_id: int, hostname: str) -> MicrosoftAuthUrl:
        data = self.api_client.get(
            f"{SERVICE_PATH}/authorize",
            params={"state": build_state(workspace_id, hostname)},
        )
        return MicrosoftAuthUrl.model_validate(data)

    def status(self) -> MicrosoftAuthStatus:
        return MicrosoftAuthStatus.model_validate(self.api_client.get(f"{SERVICE_PATH}/status"))

    def profile(self, agent_id: int | None = None) -> MicrosoftProfile:
        data = self.api_client.get(f"{SERVICE_PATH}/profile", params=clean_params({"agent_id": agent_id}))
        return MicrosoftProfile.model_validate(data)

    def link(self, agent_id: int, code: str, redirect_uri: str) -> MicrosoftLinkResult:
        data = self.api_client.post(
            f"{SERVICE_PATH}/link",
            json={
                "agent_id": agent_id,
                "microsoft_auth_code": code,
                "redirect_uri": redirect_uri,
            },
        )
        return MicrosoftLinkResult.model_validate(data or {})

    def unlink(self, agent_id: int) -> MicrosoftLinkResult:
        data = self.api_client.post(
            f"{SERVICE_PATH}/unlink",
            json={"agent_id": agent_id, "confirm": True},
        )
        return MicrosoftLinkResult.model_validate(data or {})
