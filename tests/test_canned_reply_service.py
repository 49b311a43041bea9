import json

import pytest
from enque_desk.core.errors import AppError
from enque_desk.models.schemas.canned_reply import (
    CannedReplyCategoryCreateRequest,
    CannedReplyCreateRequest,
)
from enque_desk.services.canned_reply_service import CannedReplyService
from fastapi import status
from pydantic import ValidationError

from tests.helpers.upstream import FakeUpstream

BASE = "/workspaces/3/canned-replies"

REPLIES = [
    {"id": 1, "title": "Refund policy", "content": "Refunds take 5 days.", "is_enabled": True},
    {"id": 2, "title": "Greeting", "content": "Hello, thanks for the REFUND request.", "is_enabled": True},
    {"id": 3, "title": "Old refund text", "content": "Outdated.", "is_enabled": False},
    {"id": 4, "title": "Shipping", "content": "Ships in 2 days.", "is_enabled": True},
]


@pytest.mark.parametrize("workspace_id", [None, 0, -1])
def test_service_requires_positive_workspace(workspace_id: int | None) -> None:
    with pytest.raises(AppError) as exc_info:
        CannedReplyService(FakeUpstream().client(), workspace_id)

    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
    assert exc_info.value.code == "INVALID_WORKSPACE"


def test_search_matches_enabled_replies_case_insensitively() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", BASE, REPLIES)
    service = CannedReplyService(upstream.client(), 3)

    assert [reply.id for reply in service.search("  refund ")] == [1, 2]
    assert [reply.id for reply in service.search("")] == [1, 2, 4]


def test_create_reply_posts_to_workspace_collection() -> None:
    upstream = FakeUpstream()
    upstream.on("POST", BASE, {"id": 5, "title": "Thanks", "content": "Thank you!"})
    service = CannedReplyService(upstream.client(), 3)

    reply = service.create_reply(CannedReplyCreateRequest(title=" Thanks ", content="Thank you!"))

    assert reply.id == 5
    assert json.loads(upstream.requests[0].content) == {"title": "Thanks", "content": "Thank you!"}


def test_create_reply_requires_title_and_content() -> None:
    with pytest.raises(ValidationError):
        CannedReplyCreateRequest(title="  ", content="body")
    with pytest.raises(ValidationError):
        CannedReplyCreateRequest(title="Title", content="")


def test_toggle_reply_uses_toggle_endpoint() -> None:
    upstream = FakeUpstream()
    upstream.on("PUT", f"{BASE}/4/toggle", {**REPLIES[3], "is_enabled": False})
    service = CannedReplyService(upstream.client(), 3)

    reply = service.toggle_reply(4, False)

    assert reply.is_enabled is False
    assert json.loads(upstream.requests[0].content) == {"is_enabled": False}


def test_missing_reply_is_translated() -> None:
    service = CannedReplyService(FakeUpstream().client(), 3)

    with pytest.raises(AppError) as exc_info:
        service.get_reply(99)

    assert exc_info.value.code == "CANNED_REPLY_NOT_FOUND"
    assert exc_info.value.details == {"reply_id": 99}


def test_categories() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", f"{BASE}/categories", [{"id": 1, "name": "Billing"}])
    upstream.on("POST", f"{BASE}/categories", {"id": 2, "name": "Sales"})
    service = CannedReplyService(upstream.client(), 3)

    assert [category.name for category in service.list_categories()] == ["Billing"]
    created = service.create_category(CannedReplyCategoryCreateRequest(name="Sales"))
    assert created.id == 2
