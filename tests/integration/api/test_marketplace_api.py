from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bidmarket.api.v1 import health
from bidmarket.api.v1.deps import get_bid_service, get_project_service
from bidmarket.auth.jwt import create_access_token
from bidmarket.core.config import get_config
from bidmarket.main import create_app

PREFIX = get_config().API_PREFIX


def _auth(user_id: int, role: str) -> dict[str, str]:
    token = create_access_token(user_id=user_id, role=role, secret=get_config().JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


CLIENT = _auth(100, "client_owner")
VENDOR = _auth(201, "vendor_supplier")
FIRM = _auth(202, "construction_firm")


@pytest.fixture
def client(bid_service, project_service):
    app = create_app(run_bootstrap=False)
    app.dependency_overrides[get_bid_service] = lambda: bid_service
    app.dependency_overrides[get_project_service] = lambda: project_service
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def marketplace(make_client, make_vendor):
    make_client(user_id=100)
    make_vendor(user_id=201)
    make_vendor(user_id=202)


def _publish(client, project_payload) -> dict:
    response = client.post(f"{PREFIX}/projects", json=project_payload, headers=CLIENT)
    assert response.status_code == 201
    return response.json()


def test_health_reports_database_state(client, monkeypatch):
    monkeypatch.setattr(health, "verify_database_connection", lambda: True)
    assert client.get(f"{PREFIX}/health").json()["status"] == "ok"

    monkeypatch.setattr(health, "verify_database_connection", lambda: False)
    body = client.get(f"{PREFIX}/health").json()
    assert body["status"] == "degraded"
    assert body["database"] == "unavailable"


def test_requests_without_valid_token_are_unauthorized(client):
    assert client.get(f"{PREFIX}/projects").status_code == 401
    response = client.get(f"{PREFIX}/projects", headers={"Authorization": "Token abc"})
    assert response.status_code == 401
    response = client.get(f"{PREFIX}/projects", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_vendor_cannot_publish_projects(client, marketplace, project_payload):
    response = client.post(f"{PREFIX}/projects", json=project_payload(), headers=VENDOR)

    assert response.status_code == 403
    assert response.json()["error_code"] == "forbidden"


def test_full_bidding_flow(client, marketplace, project_payload, bid_payload):
    project = _publish(client, project_payload())
    assert project["status"] == "OPEN"

    listing = client.get(f"{PREFIX}/projects", headers=VENDOR).json()
    assert [item["id"] for item in listing["items"]] == [project["id"]]

    first = client.post(f"{PREFIX}/projects/{project['id']}/bids", json=bid_payload(100000), headers=VENDOR)
    second = client.post(f"{PREFIX}/projects/{project['id']}/bids", json=bid_payload(120000), headers=FIRM)
    assert first.status_code == 201
    assert second.status_code == 201

    bids = client.get(f"{PREFIX}/projects/{project['id']}/bids", headers=CLIENT).json()
    assert bids["pagination"]["total"] == 2

    selected = client.post(
        f"{PREFIX}/bids/{first.json()['id']}/select",
        json={"project_id": project["id"]},
        headers=CLIENT,
    )
    assert selected.status_code == 200
    assert selected.json()["bid"]["status"] == "ACCEPTED"
    assert selected.json()["project"]["status"] == "IN_PROGRESS"

    rival = client.get(f"{PREFIX}/bids/{second.json()['id']}", headers=FIRM).json()
    assert rival["status"] == "REJECTED"

    rejected = client.post(
        f"{PREFIX}/bids/{first.json()['id']}/reject",
        json={"project_id": project["id"]},
        headers=CLIENT,
    )
    assert rejected.status_code == 409
    assert rejected.json()["error_code"] == "invalid_state"


def test_duplicate_bid_maps_to_conflict(client, marketplace, project_payload, bid_payload):
    project = _publish(client, project_payload())
    url = f"{PREFIX}/projects/{project['id']}/bids"
    client.post(url, json=bid_payload(), headers=VENDOR)

    response = client.post(url, json=bid_payload(95000), headers=VENDOR)

    assert response.status_code == 409
    assert response.json()["error_code"] == "conflict"


def test_invalid_bid_maps_to_validation_error(client, marketplace, project_payload, bid_payload):
    project = _publish(client, project_payload())

    response = client.post(
        f"{PREFIX}/projects/{project['id']}/bids",
        json=bid_payload(proposal="short"),
        headers=VENDOR,
    )

    assert response.status_code == 422
    body = response.json()
    assert body["status"] == "error"
    assert body["error_code"] == "validation_error"
    assert any(error["field"] == "proposal" for error in body["errors"])


def test_missing_resources_map_to_not_found(client, marketplace):
    assert client.get(f"{PREFIX}/bids/9999", headers=VENDOR).status_code == 404
    assert client.get(f"{PREFIX}/projects/9999", headers=CLIENT).status_code == 404


def test_vendor_workflow_endpoints(client, marketplace, project_payload, bid_payload):
    project = _publish(client, project_payload())
    bid = client.post(f"{PREFIX}/projects/{project['id']}/bids", json=bid_payload(), headers=VENDOR).json()

    mine = client.get(f"{PREFIX}/bids/mine", headers=VENDOR).json()
    assert [item["id"] for item in mine["items"]] == [bid["id"]]

    negotiation = client.post(
        f"{PREFIX}/bids/{bid['id']}/negotiations",
        json={"type": "timeline", "original_value": 6, "proposed_value": 5},
        headers=CLIENT,
    )
    assert negotiation.status_code == 200
    assert negotiation.json()["negotiation"]["initiator"] == "client"

    analysis = client.get(f"{PREFIX}/bids/{bid['id']}/analysis", headers=VENDOR)
    assert analysis.status_code == 200
    assert analysis.json()["market"]["bid_count"] == 1
    assert client.get(f"{PREFIX}/bids/{bid['id']}/analysis", headers=FIRM).status_code == 403

    withdrawn = client.post(f"{PREFIX}/bids/{bid['id']}/withdraw", headers=VENDOR)
    assert withdrawn.json()["bid"]["status"] == "WITHDRAWN"
    resubmitted = client.post(f"{PREFIX}/bids/{bid['id']}/resubmit", json={"reason": "Revised"}, headers=VENDOR)
    assert resubmitted.json()["bid"]["status"] == "PENDING"

    deleted = client.delete(f"{PREFIX}/bids/{bid['id']}", headers=VENDOR)
    assert deleted.status_code == 200
    assert deleted.json()["success"] is True


def test_batch_lookup_and_project_deletion(client, marketplace, project_payload, bid_payload):
    project = _publish(client, project_payload())
    client.post(f"{PREFIX}/projects/{project['id']}/bids", json=bid_payload(), headers=VENDOR)

    batch = client.post(f"{PREFIX}/bids/batch", json={"project_ids": [project["id"]]}, headers=CLIENT).json()
    assert batch["total"] == 1
    firm_batch = client.post(f"{PREFIX}/bids/batch", json={"project_ids": [project["id"]]}, headers=FIRM)
    assert firm_batch.status_code == 200
    assert firm_batch.json()["total"] == 0
    assert client.post(f"{PREFIX}/bids/batch", json={"project_ids": [project["id"]]}, headers=VENDOR).status_code == 403

    deleted = client.delete(f"{PREFIX}/projects/{project['id']}", headers=CLIENT).json()
    assert deleted["deleted_bids"] == 1
    assert client.get(f"{PREFIX}/projects/{project['id']}/bids", headers=CLIENT).status_code == 404
