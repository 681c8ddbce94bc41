"""
HTTP binding tests (FastAPI TestClient, in-memory repository).
"""

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import build_services, set_services
from src.api.main import app, load_demo_data
from src.config.settings import get_settings
from src.infrastructure.db.memory_repository import InMemoryVerificationRepository
from src.infrastructure.notifications.memory_notifier import InMemoryNotifier
from tests.factories import SOLO_DOCS, TickingClock

TEST_ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"X-Actor-Id": "admin-1", "X-Admin-Key": TEST_ADMIN_KEY}


@pytest.fixture(autouse=True)
def admin_key(monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_api_key", TEST_ADMIN_KEY)
    return TEST_ADMIN_KEY


@pytest.fixture
def api_services():
    services = build_services(InMemoryVerificationRepository(), InMemoryNotifier(), clock=TickingClock())
    set_services(services)
    yield services
    set_services(None)


@pytest.fixture
def client(api_services):
    return TestClient(app)


def carrier_headers(carrier_id):
    return {"X-Actor-Id": carrier_id}


def start_solo(client, carrier_id, documents=SOLO_DOCS):
    resp = client.post("/api/v1/carriers", json={"carrier_type": "solo", "carrier_id": carrier_id, "name": "Ravi"})
    assert resp.status_code == 201
    resp = client.post(f"/api/v1/carriers/{carrier_id}/applications", json={}, headers=carrier_headers(carrier_id))
    assert resp.status_code == 201
    application_id = resp.json()["id"]
    for doc_type in documents:
        resp = client.post(
            f"/api/v1/applications/{application_id}/documents",
            json={"document_type": doc_type, "file_reference": f"s3://docs/{carrier_id}/{doc_type}.pdf"},
            headers=carrier_headers(carrier_id),
        )
        assert resp.status_code == 201
    return application_id


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_register_and_get_carrier(client):
    resp = client.post("/api/v1/carriers", json={"fleet_size": 8, "company_name": "Deccan Roadlines"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["carrier_type"] == "enterprise"
    assert body["listed"] is False

    resp = client.get(f"/api/v1/carriers/{body['id']}")
    assert resp.json()["company_name"] == "Deccan Roadlines"


def test_unknown_carrier_is_404(client):
    resp = client.get("/api/v1/carriers/ghost")
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_submit_incomplete_returns_missing_types(client):
    start_solo(client, "solo-1", documents=SOLO_DOCS[:5])
    resp = client.post("/api/v1/carriers/solo-1/applications/submit", headers=carrier_headers("solo-1"))
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "INCOMPLETE_DOCUMENTS"
    assert body["context"]["missing"] == ["fitness_certificate", "void_cheque"]
    assert body["retryable"] is False


def test_full_review_flow(client):
    application_id = start_solo(client, "solo-2")

    resp = client.post("/api/v1/carriers/solo-2/applications/submit", headers=carrier_headers("solo-2"))
    assert resp.status_code == 200
    assert resp.json() == {"application_id": application_id, "status": "pending"}

    queue = client.get("/api/v1/admin/applications", headers=ADMIN_HEADERS).json()
    assert [item["id"] for item in queue["items"]] == [application_id]

    view = client.get(f"/api/v1/applications/{application_id}", headers=ADMIN_HEADERS).json()
    assert [d["document_type"] for d in view["documents"]] == SOLO_DOCS
    rc = next(d for d in view["documents"] if d["document_type"] == "registration_certificate")

    resp = client.post(
        f"/api/v1/admin/documents/{rc['id']}/decision",
        json={"decision": "reject", "reason": "illegible scan"},
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["status"] == "rejected"

    resp = client.post(
        f"/api/v1/admin/applications/{application_id}/decision",
        json={"decision": "approve"},
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["status"] == "approved"
    assert client.get("/api/v1/carriers/solo-2/can-transact").json()["can_transact"] is True

    view = client.get(f"/api/v1/applications/{application_id}", headers=carrier_headers("solo-2")).json()
    assert view["application"]["reviewed_by"] == "admin-1"
    assert [h["to_status"] for h in view["history"]] == ["pending", "approved"]


def test_reject_without_reason_is_422(client):
    application_id = start_solo(client, "solo-3")
    client.post("/api/v1/carriers/solo-3/applications/submit", headers=carrier_headers("solo-3"))

    resp = client.post(
        f"/api/v1/admin/applications/{application_id}/decision",
        json={"decision": "reject", "reason": "  "},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_hold_and_reopen(client):
    application_id = start_solo(client, "solo-4")
    client.post("/api/v1/carriers/solo-4/applications/submit", headers=carrier_headers("solo-4"))

    resp = client.post(
        f"/api/v1/admin/applications/{application_id}/decision",
        json={"decision": "hold", "reason": "awaiting bank proof"},
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["status"] == "on_hold"

    resp = client.post(f"/api/v1/admin/applications/{application_id}/reopen", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending"


def test_illegal_transition_is_409(client):
    application_id = start_solo(client, "solo-5")
    resp = client.post(
        f"/api/v1/admin/applications/{application_id}/decision",
        json={"decision": "approve"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "INVALID_TRANSITION"


def test_stale_version_is_retryable_409(client):
    application_id = start_solo(client, "solo-6")
    client.post("/api/v1/carriers/solo-6/applications/submit", headers=carrier_headers("solo-6"))

    resp = client.post(
        f"/api/v1/admin/applications/{application_id}/decision",
        json={"decision": "approve", "expected_version": 1},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "CONCURRENCY_CONFLICT"
    assert body["retryable"] is True


def test_admin_routes_require_admin_key(client):
    resp = client.get("/api/v1/admin/applications", headers={"X-Actor-Id": "solo-7", "X-Admin-Key": "wrong"})
    assert resp.status_code == 403
    assert resp.json()["code"] == "PERMISSION_DENIED"


@pytest.mark.parametrize("offered_key", ["", "freight-admin-2024", "test-admin-key"])
def test_no_admin_without_a_configured_key(client, monkeypatch, offered_key):
    monkeypatch.setattr(get_settings(), "admin_api_key", "")
    headers = {"X-Actor-Id": "admin-1", "X-Admin-Key": offered_key}
    assert client.get("/api/v1/admin/applications", headers=headers).status_code == 403
    assert client.get("/api/v1/admin/stats", headers=headers).status_code == 403


def test_carrier_cannot_read_another_application(client):
    application_id = start_solo(client, "solo-8", documents=[])
    resp = client.get(f"/api/v1/applications/{application_id}", headers=carrier_headers("solo-9"))
    assert resp.status_code == 403


def test_save_draft_details(client):
    application_id = start_solo(client, "solo-10", documents=[])
    resp = client.patch(
        f"/api/v1/applications/{application_id}/details",
        json={"details": {"aadhaar_number": "4521 7788 9012", "license_plate_number": "MH12AB1234"}},
        headers=carrier_headers("solo-10"),
    )
    assert resp.status_code == 200
    assert resp.json()["details"]["aadhaar_number"] == "4521 7788 9012"
    assert resp.json()["version"] == 2


@pytest.mark.parametrize("details", [
    {"pan_number": 12345},
    {"bank": "HDFC"},
    {"aadhaar_number": "4521 7788 9012", "nickname": "ravi"},
])
def test_malformed_details_are_422(client, details):
    application_id = start_solo(client, "solo-11", documents=[])
    resp = client.patch(
        f"/api/v1/applications/{application_id}/details",
        json={"details": details},
        headers=carrier_headers("solo-11"),
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert resp.json()["context"]["errors"]

    view = client.get(f"/api/v1/applications/{application_id}", headers=carrier_headers("solo-11"))
    assert view.status_code == 200
    assert view.json()["application"]["version"] == 1


def test_start_with_malformed_details_is_422(client):
    client.post("/api/v1/carriers", json={"carrier_type": "enterprise", "carrier_id": "ent-1", "fleet_size": 5})
    resp = client.post(
        "/api/v1/carriers/ent-1/applications",
        json={"details": {"pan_number": 12345}},
        headers=carrier_headers("ent-1"),
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_documents_carry_accepted_formats(client):
    application_id = start_solo(client, "solo-12", documents=["permit"])
    resp = client.post(
        f"/api/v1/applications/{application_id}/documents",
        json={"document_type": "fleet_proof", "file_reference": "s3://docs/solo-12/fleet.jpg"},
        headers=carrier_headers("solo-12"),
    )
    assert resp.json()["formats_accepted"] == ["jpg", "jpeg", "png"]

    view = client.get(f"/api/v1/applications/{application_id}", headers=carrier_headers("solo-12")).json()
    assert view["documents"][0]["formats_accepted"] == ["pdf", "jpg", "jpeg", "png"]


def test_segmented_queue_and_stats(client, api_services):
    assert load_demo_data(api_services) == 4
    assert load_demo_data(api_services) == 0

    segments = client.get("/api/v1/admin/applications?segmented=true", headers=ADMIN_HEADERS).json()
    assert [a["carrier_id"] for a in segments["enterprise"]] == ["demo-ent-002"]
    assert segments["solo"] == []

    stats = client.get("/api/v1/admin/stats", headers=ADMIN_HEADERS).json()
    assert stats["approved"] == 1
    assert stats["on_hold"] == 1
    assert stats["pending"] == 1
    assert stats["draft"] == 1
    assert client.get("/api/v1/carriers/demo-solo-001/can-transact").json()["can_transact"] is True
