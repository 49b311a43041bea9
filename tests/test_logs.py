import structlog
from enque_desk.core.logging import RecentLogBuffer, log_buffer
from fastapi import status
from fastapi.testclient import TestClient


def test_buffer_keeps_newest_entries_first() -> None:
    buffer = RecentLogBuffer(max_entries=2)
    for index in range(3):
        buffer(None, "info", {"event": f"event {index}", "level": "info", "timestamp": "t"})

    entries = buffer.entries()

    assert [entry["message"] for entry in entries] == ["event 2", "event 1"]
    assert entries[0]["details"] is None


def test_buffer_formats_details() -> None:
    buffer = RecentLogBuffer()
    buffer(None, "error", {"event": "Upstream failed", "path": "/tasks/", "status": 502})

    entry = buffer.entries()[0]

    assert entry["level"] == "error"
    assert entry["details"] == "path=/tasks/, status=502"
    assert entry["timestamp"]


def test_logs_require_session(client: TestClient) -> None:
    assert client.get("/api/logs").status_code == status.HTTP_401_UNAUTHORIZED
    assert client.delete("/api/logs").status_code == status.HTTP_401_UNAUTHORIZED


def test_list_and_clear_logs(client: TestClient, auth_headers: dict[str, str]) -> None:
    log_buffer.clear()
    structlog.get_logger("tests").warning("Preload queue saturated", queue_size=40)

    listed = client.get("/api/logs?level=warning", headers=auth_headers)
    cleared = client.delete("/api/logs", headers=auth_headers)

    entries = listed.json()["data"]
    assert entries[0]["message"] == "Preload queue saturated"
    assert "queue_size=40" in entries[0]["details"]
    assert all(entry["level"] == "warning" for entry in entries)
    assert cleared.status_code == status.HTTP_204_NO_CONTENT
    assert log_buffer.entries() == []


def test_logs_limit_is_bounded(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/logs?limit=1000", headers=auth_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
