# File: backend/tests/test_repair_api.py
# Version: v1.0.0
"""
Repair status / notice endpoints with the option store swapped for memory.
"""
import pytest
from fastapi.testclient import TestClient

from backend.app.main import app
from backend.app.services.option_store import DISABLED_KEY, RECORD_KEY, MemoryOptionStore
from backend.app.services.repair_runner import get_option_store


@pytest.fixture
def api_store():
    mem = MemoryOptionStore()
    app.dependency_overrides[get_option_store] = lambda: mem
    yield mem
    app.dependency_overrides.pop(get_option_store, None)


def test_status_before_any_run(api_store):
    client = TestClient(app)
    r = client.get("/api/repair/status")
    assert r.status_code == 200
    assert r.json() == {"state": "not_started", "record": None}
    assert r.headers["cache-control"] == "no-store"


def test_notice_is_shown_once_then_disabled(api_store):
    api_store.set(RECORD_KEY, {"run_completed": True, "outcome": "repaired",
                               "audit_entries": ["Created table: actionscheduler_claims"]})
    client = TestClient(app)

    status = client.get("/api/repair/status").json()
    assert status["state"] == "completed_pending_notice"
    assert status["record"]["audit_entries"] == ["Created table: actionscheduler_claims"]

    r = client.post("/api/repair/notices")
    assert r.status_code == 200
    body = r.json()
    assert body["state"] == "done"
    assert "Created table: actionscheduler_claims" in body["messages"]
    assert api_store.get(RECORD_KEY) is None
    assert api_store.get(DISABLED_KEY) is True

    again = client.post("/api/repair/notices").json()
    assert again == {"state": "done", "messages": []}
