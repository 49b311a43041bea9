import json

from enque_desk.api.deps import get_api_client
from enque_desk.main import app
from fastapi import status
from fastapi.testclient import TestClient

from tests.helpers.upstream import FakeUpstream


def _override(upstream: FakeUpstream) -> None:
    api_client = upstream.client()
    app.dependency_overrides[get_api_client] = lambda: api_client


def _agent(agent_id: int, name: str) -> dict[str, object]:
    return {"id": agent_id, "name": name, "email": f"{name.lower()}@acme.io", "role": "agent"}


def test_resource_routes_require_session(client: TestClient) -> None:
    for path in ("/api/agents", "/api/teams", "/api/companies", "/api/users", "/api/categories"):
        response = client.get(path)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "AUTH_REQUIRED"


def test_list_agents_forwards_bearer_token(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/agents/", [_agent(1, "Ada"), _agent(2, "Bob")])
    _override(upstream)
    response = client.get("/api/agents", headers=auth_headers)
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_200_OK
    assert [agent["name"] for agent in response.json()["data"]] == ["Ada", "Bob"]
    assert upstream.requests[0].headers["authorization"] == auth_headers["Authorization"]


def test_invite_agent_adds_session_workspace(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("POST", "/agents/invite", {**_agent(9, "Cy"), "is_active": False})
    _override(upstream)
    response = client.post(
        "/api/agents/invite",
        headers=auth_headers,
        json={"name": "Cy", "email": "cy@acme.io", "role": "agent"},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_201_CREATED
    sent = json.loads(upstream.requests[0].content)
    assert sent["workspace_id"] == 3
    assert sent["email"] == "cy@acme.io"


def test_get_missing_agent_returns_not_found(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    _override(upstream)
    response = client.get("/api/agents/404", headers=auth_headers)
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "AGENT_NOT_FOUND"


def test_team_crud_and_members(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("POST", "/teams", {"id": 4, "name": "Billing", "workspace_id": 3})
    upstream.on("GET", "/teams/4/members", [_agent(1, "Ada")])
    upstream.on("POST", "/teams/4/members", {"id": 11, "team_id": 4, "agent_id": 2})
    upstream.on("DELETE", "/teams/4/members/2", None, status_code=204)
    upstream.on("DELETE", "/teams/4", None, status_code=204)
    _override(upstream)

    created = client.post("/api/teams", headers=auth_headers, json={"name": "  Billing "})
    members = client.get("/api/teams/4/members", headers=auth_headers)
    added = client.post("/api/teams/4/members", headers=auth_headers, json={"agent_id": 2})
    removed = client.delete("/api/teams/4/members/2", headers=auth_headers)
    deleted = client.delete("/api/teams/4", headers=auth_headers)
    app.dependency_overrides.clear()

    assert created.status_code == status.HTTP_201_CREATED
    assert json.loads(upstream.calls("POST", "/teams")[0].content) == {
        "name": "Billing",
        "workspace_id": 3,
    }
    assert members.json()["data"][0]["id"] == 1
    assert added.status_code == status.HTTP_201_CREATED
    assert added.json()["data"]["agent_id"] == 2
    assert removed.status_code == status.HTTP_204_NO_CONTENT
    assert deleted.status_code == status.HTTP_204_NO_CONTENT


def test_team_name_is_required(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    _override(upstream)
    response = client.post("/api/teams", headers=auth_headers, json={"name": "   "})
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert upstream.requests == []


def test_update_missing_team_returns_not_found(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    _override(upstream)
    response = client.put("/api/teams/8", headers=auth_headers, json={"name": "Ops"})
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "TEAM_NOT_FOUND"
    assert response.json()["error"]["details"] == {"team_id": 8}


def test_company_filters_use_bracket_params(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/companies", [{"id": 5, "name": "Acme", "email_domain": "acme.io"}])
    _override(upstream)
    response = client.get("/api/companies?email_domain=acme.io", headers=auth_headers)
    app.dependency_overrides.clear()

    assert response.json()["data"][0]["name"] == "Acme"
    assert upstream.requests[0].url.params["filter[email_domain]"] == "acme.io"


def test_get_company_looks_up_by_id_filter(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on(
        "GET",
        "/companies",
        lambda request: (
            [{"id": 5, "name": "Acme"}] if request.url.params.get("filter[id]") == "5" else []
        ),
    )
    _override(upstream)
    found = client.get("/api/companies/5", headers=auth_headers)
    missing = client.get("/api/companies/6", headers=auth_headers)
    app.dependency_overrides.clear()

    assert found.json()["data"]["id"] == 5
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["error"]["code"] == "COMPANY_NOT_FOUND"


def test_create_company_requires_email_domain(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    _override(upstream)
    response = client.post(
        "/api/companies",
        headers=auth_headers,
        json={"name": "Acme", "email_domain": " "},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_company_users(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/companies/5/users", [{"id": 2, "name": "Eve", "email": "eve@acme.io"}])
    _override(upstream)
    response = client.get("/api/companies/5/users", headers=auth_headers)
    app.dependency_overrides.clear()

    assert response.json()["data"][0]["email"] == "eve@acme.io"


def test_create_user_validates_email(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    _override(upstream)
    response = client.post(
        "/api/users",
        headers=auth_headers,
        json={"name": "Eve", "email": "not-an-email"},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert "email" in response.json()["error"]["details"]["field_errors"]


def test_create_and_delete_user(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("POST", "/users", {"id": 2, "name": "Eve", "email": "eve@acme.io", "company_id": 5})
    upstream.on("DELETE", "/users/2", None, status_code=204)
    _override(upstream)
    created = client.post(
        "/api/users",
        headers=auth_headers,
        json={"name": "Eve", "email": "eve@acme.io", "company_id": 5},
    )
    deleted = client.delete("/api/users/2", headers=auth_headers)
    missing = client.delete("/api/users/3", headers=auth_headers)
    app.dependency_overrides.clear()

    assert created.status_code == status.HTTP_201_CREATED
    assert json.loads(upstream.calls("POST", "/users")[0].content)["workspace_id"] == 3
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert missing.json()["error"]["code"] == "USER_NOT_FOUND"


def test_unassigned_users(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/users/unassigned", [{"id": 3, "name": "Sam", "email": "sam@gmail.com"}])
    _override(upstream)
    response = client.get("/api/users/unassigned", headers=auth_headers)
    app.dependency_overrides.clear()

    assert [user["id"] for user in response.json()["data"]] == [3]


def test_categories_paging_and_create(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/categories/", [{"id": 1, "name": "Billing"}])
    upstream.on("POST", "/categories/", {"id": 2, "name": "Bugs", "workspace_id": 3})
    _override(upstream)
    listed = client.get("/api/categories?skip=10&limit=5", headers=auth_headers)
    created = client.post("/api/categories", headers=auth_headers, json={"name": "Bugs"})
    too_many = client.get("/api/categories?limit=500", headers=auth_headers)
    app.dependency_overrides.clear()

    assert listed.json()["data"] == [
        {"id": 1, "name": "Billing", "workspace_id": None, "created_at": None, "updated_at": None}
    ]
    params = upstream.calls("GET", "/categories/")[0].url.params
    assert (params["skip"], params["limit"]) == ("10", "5")
    assert created.status_code == status.HTTP_201_CREATED
    assert json.loads(upstream.calls("POST", "/categories/")[0].content) == {
        "name": "Bugs",
        "workspace_id": 3,
    }
    assert too_many.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
