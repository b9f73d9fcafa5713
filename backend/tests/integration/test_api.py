"""End-to-end tests for the HTTP API over the in-memory store."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from atelier.domain.entities import User, UserRole
from atelier.infrastructure.dependencies import get_entity_store, get_record_sync
from atelier.infrastructure.memory import InMemoryStore
from atelier.infrastructure.security.passwords import hash_password
from atelier.infrastructure.sync import LoggingRecordSync
from atelier.main import app

ADMIN = {"X-User-Id": "superadmin-1"}
WORKER = {"X-User-Id": "worker-1"}
CLIENT = {"X-User-Id": "client-1"}
OTHER = {"X-User-Id": "client-2"}


@pytest.fixture
def memory() -> InMemoryStore:
    memory = InMemoryStore()
    for user in (
        User(id="superadmin-1", name="Anjola", email="anjola@example.com",
             password=hash_password("password123", rounds=4), role=UserRole.SUPERADMIN),
        User(id="worker-1", name="Tunde", email="tunde@example.com",
             password=hash_password("pw", rounds=4), role=UserRole.WORKER),
        User(id="client-1", name="Demo Client", email="client@example.com",
             password=hash_password("password123", rounds=4)),
        User(id="client-2", name="Other Client", email="other@example.com",
             password=hash_password("pw", rounds=4)),
    ):
        memory.users[user.id] = user
    return memory


@pytest_asyncio.fixture
async def api(memory):
    async def memory_store():
        yield memory.entity_store()

    app.dependency_overrides[get_entity_store] = memory_store
    app.dependency_overrides[get_record_sync] = lambda: LoggingRecordSync()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def _create_project(api: AsyncClient) -> str:
    response = await api.post(
        "/api/v1/projects",
        json={"project_title": "Minimalist Lakehouse", "budget": "45000000"},
        headers=CLIENT,
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
async def test_health_check_returns_200(api):
    response = await api.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_signup_and_login(api):
    response = await api.post("/api/v1/auth/signup", json={
        "name": "Ada", "email": "ada@example.com", "password": "s3cret",
    })
    assert response.status_code == 201
    assert "password" not in response.json()
    assert response.json()["role"] == "client"

    duplicate = await api.post("/api/v1/auth/signup", json={
        "name": "Ada", "email": "ADA@example.com", "password": "x",
    })
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "duplicate"

    ok = await api.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "s3cret"})
    assert ok.status_code == 200

    wrong_group = await api.post("/api/v1/auth/login", json={
        "email": "ada@example.com", "password": "s3cret", "role_group": "admin",
    })
    assert wrong_group.status_code == 401
    assert wrong_group.json()["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_missing_or_unknown_user_header(api):
    assert (await api.get("/api/v1/projects")).status_code == 401
    assert (await api.get("/api/v1/projects", headers={"X-User-Id": "ghost"})).status_code == 401


@pytest.mark.asyncio
async def test_error_kinds_map_to_status_codes(api):
    project_id = await _create_project(api)

    not_found = await api.get("/api/v1/projects/missing", headers=ADMIN)
    assert not_found.status_code == 404
    assert not_found.json()["error"] == "not_found"

    forbidden = await api.get(f"/api/v1/projects/{project_id}", headers=OTHER)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "unauthorized"

    invalid = await api.post(f"/api/v1/projects/{project_id}/handover/finalize", headers=ADMIN)
    assert invalid.status_code == 409
    assert invalid.json()["error"] == "invalid_transition"

    validation = await api.post(
        f"/api/v1/projects/{project_id}/proposal",
        json={"amount": "-1", "file_ref": "p.pdf"},
        headers=ADMIN,
    )
    assert validation.status_code == 422
    assert validation.json()["error"] == "validation_error"


@pytest.mark.asyncio
async def test_client_never_sees_unreleased_items(api):
    project_id = await _create_project(api)
    await api.post(
        f"/api/v1/projects/{project_id}/proposal",
        json={"amount": "5000000", "file_ref": "draft.pdf"},
        headers=WORKER,
    )

    staff_view = (await api.get(f"/api/v1/projects/{project_id}", headers=ADMIN)).json()
    client_view = (await api.get(f"/api/v1/projects/{project_id}", headers=CLIENT)).json()
    assert staff_view["proposal"]["status"] == "pending_approval"
    assert staff_view["invoice_amount"] is not None
    assert client_view["proposal"] is None
    assert client_view["invoice_amount"] is None

    queue = await api.get("/api/v1/approvals", headers=ADMIN)
    assert queue.status_code == 200
    assert queue.json()["total"] == 1
    assert (await api.get("/api/v1/approvals", headers=WORKER)).status_code == 403


@pytest.mark.asyncio
async def test_full_workflow_over_http(api):
    project_id = await _create_project(api)
    base = f"/api/v1/projects/{project_id}"

    slots = (await api.get("/api/v1/availability/2024-05-06")).json()
    assert slots["available"] and "10:00" in slots["slots"]

    steps = [
        (f"{base}/appointment", {"date": "2024-05-06", "time": "10:00"}, CLIENT, "Appointment Needed"),
        (f"{base}/appointment/confirm", {"notes": "Site visit agreed"}, ADMIN, "Consultation Done"),
        (f"{base}/proposal", {"amount": "15000000", "file_ref": "p.pdf"}, ADMIN, "Proposal Sent"),
        (f"{base}/proposal/revision", {"notes": "Cheaper roof"}, CLIENT, "Proposal Revision"),
        (f"{base}/proposal", {"amount": "12000000", "file_ref": "p2.pdf"}, ADMIN, "Proposal Sent"),
        (f"{base}/proposal/accept", None, CLIENT, "Payment Pending"),
        (f"{base}/payment", {"amount": "12000000"}, CLIENT, "Payment Pending"),
        (f"{base}/payment/verify", None, ADMIN, "Paid"),
        (f"{base}/concept", {"files": ["concept.png"]}, WORKER, "Paid"),
        (f"{base}/concept/approve", None, ADMIN, "Concept Shared"),
        (f"{base}/concept/client-approve", None, CLIENT, "Concept Approved"),
        (f"{base}/updates", {"title": "Finishes", "progress_percentage": 100}, ADMIN, "Inspection"),
        (f"{base}/handover", {"handover_file": "keys.pdf"}, ADMIN, "Handover"),
        (f"{base}/handover/finalize", None, ADMIN, "Completed"),
    ]
    for url, body, headers, expected in steps:
        response = await api.post(url, json=body, headers=headers)
        assert response.status_code == 200, (url, response.text)
        assert response.json()["status"] == expected, url

    final = (await api.get(base, headers=CLIENT)).json()
    assert final["percent_complete"] == 100
    assert final["concept_files"] == ["concept.png"]
    assert final["completion_date"] is not None


@pytest.mark.asyncio
async def test_staff_onboarding_and_availability(api):
    created = await api.post(
        "/api/v1/staff",
        json={"name": "Ife", "email": "ife@example.com", "password": "pw", "role": "inspector"},
        headers=ADMIN,
    )
    assert created.status_code == 201
    assert created.json()["role"] == "inspector"
    assert (await api.post(
        "/api/v1/staff",
        json={"name": "No", "email": "no@example.com", "password": "pw"},
        headers=WORKER,
    )).status_code == 403

    staff = (await api.get("/api/v1/staff", headers=WORKER)).json()
    assert {s["email"] for s in staff} == {"anjola@example.com", "tunde@example.com", "ife@example.com"}

    updated = await api.put(
        "/api/v1/availability",
        json={"records": [{"date": "2024-05-04", "slots": ["10:00"]}]},
        headers=ADMIN,
    )
    assert updated.status_code == 200
    saturday = (await api.get("/api/v1/availability/2024-05-04")).json()
    assert saturday == {"date": "2024-05-04", "available": True, "slots": ["10:00"]}
