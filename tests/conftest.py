from pathlib import Path

import pytest
from dotenv import load_dotenv
from enque_desk.main import app
from fastapi.testclient import TestClient

from tests.helpers.upstream import make_token

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = make_token(sub="7", name="Ada Agent", email="ada@acme.io", role="admin", workspace_id=3)
    return {"Authorization": f"Bearer {token}"}
