"""
Name: Subject HTTP API Tests

Responsibilities:
  - Exercise /v1 endpoints end-to-end over the in-memory container
  - Verify RFC7807 status/code mapping (401/403/404/409/422/503)
  - Verify audit history lookup by id and by number through HTTP
"""

from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from subject_registry.api.main import app
from subject_registry.application.usecases import ListSubjectsUseCase
from subject_registry.container import (
    get_in_memory_store,
    get_list_subjects_use_case,
    get_resolve_access_scope_use_case,
    reset_container,
)
from subject_registry.crosscutting.exceptions import DatabaseError
from subject_registry.domain.entities import Center
from subject_registry.identity.auth import create_access_token
from subject_registry.identity.users import User

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _fresh_container():
    reset_container()
    yield
    app.dependency_overrides.clear()
    reset_container()


@pytest.fixture
def seeded():
    store = get_in_memory_store()
    north = Center(id=uuid4(), name="North")
    south = Center(id=uuid4(), name="South")
    store.centers.add_center(north)
    store.centers.add_center(south)

    investigator = uuid4()
    outsider = uuid4()
    store.users.add_user(User(id=investigator, email="inv@test"))
    store.users.add_user(User(id=outsider, email="out@test"))
    store.memberships.add_membership(investigator, north.id)
    store.memberships.add_membership(outsider, south.id)
    return {
        "north": north,
        "south": south,
        "investigator": investigator,
        "outsider": outsider,
    }


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _auth(user_id: UUID) -> dict[str, str]:
    token, _ = create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


def _create(client, seeded, **overrides):
    body = {
        "number": "SUB-001",
        "name": "John Doe",
        "birth_date": "1980-05-17",
        "center_id": str(seeded["north"].id),
    }
    body.update(overrides)
    return client.post(
        "/v1/subjects", json=body, headers=_auth(seeded["investigator"])
    )


def _assert_problem(response, status: int, code: str):
    assert response.status_code == status
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["code"] == code


# =============================================================================
# Health / Auth
# =============================================================================


def test_healthz_reports_in_memory_storage(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["db"] == "in_memory"
    assert response.headers["X-Request-Id"]


def test_request_id_is_propagated(client):
    response = client.get("/healthz", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"


def test_missing_token_is_unauthorized(client, seeded):
    response = client.get("/v1/subjects")

    _assert_problem(response, 401, "UNAUTHORIZED")
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_garbage_token_is_unauthorized(client, seeded):
    response = client.get(
        "/v1/subjects", headers={"Authorization": "Bearer not-a-jwt"}
    )

    _assert_problem(response, 401, "UNAUTHORIZED")


def test_unknown_user_is_not_found(client, seeded):
    response = client.get("/v1/subjects", headers=_auth(uuid4()))

    _assert_problem(response, 404, "NOT_FOUND")


# =============================================================================
# CRUD
# =============================================================================


def test_create_get_and_list(client, seeded):
    created = _create(client, seeded)

    assert created.status_code == 201
    body = created.json()
    assert body["number"] == "SUB-001"
    assert body["birth_date"] == "1980-05-17"
    assert body["center"] == {"id": str(seeded["north"].id), "name": "North"}

    fetched = client.get(
        f"/v1/subjects/{body['id']}", headers=_auth(seeded["investigator"])
    )
    assert fetched.status_code == 200
    assert fetched.json()["id"] == body["id"]

    listed = client.get("/v1/subjects", headers=_auth(seeded["investigator"]))
    assert [s["number"] for s in listed.json()["subjects"]] == ["SUB-001"]

    hidden = client.get("/v1/subjects", headers=_auth(seeded["outsider"]))
    assert hidden.json() == {"subjects": []}


def test_create_in_foreign_center_is_forbidden(client, seeded):
    response = _create(client, seeded, center_id=str(seeded["south"].id))

    _assert_problem(response, 403, "FORBIDDEN")


def test_duplicate_number_is_conflict(client, seeded):
    _create(client, seeded)

    _assert_problem(_create(client, seeded), 409, "CONFLICT")


@pytest.mark.parametrize(
    "overrides",
    [
        {"number": "a"},
        {"name": "  "},
        {"birth_date": "not-a-date"},
        {"unexpected": "field"},
    ],
)
def test_invalid_payloads_are_validation_errors(client, seeded, overrides):
    _assert_problem(_create(client, seeded, **overrides), 422, "VALIDATION_ERROR")


def test_non_uuid_subject_id_is_validation_error(client, seeded):
    response = client.get("/v1/subjects/SUB-001", headers=_auth(seeded["investigator"]))

    _assert_problem(response, 422, "VALIDATION_ERROR")


def test_get_subject_outside_scope_is_forbidden(client, seeded):
    subject_id = _create(client, seeded).json()["id"]

    response = client.get(
        f"/v1/subjects/{subject_id}", headers=_auth(seeded["outsider"])
    )

    _assert_problem(response, 403, "FORBIDDEN")


def test_get_missing_subject_is_not_found(client, seeded):
    response = client.get(
        f"/v1/subjects/{uuid4()}", headers=_auth(seeded["investigator"])
    )

    _assert_problem(response, 404, "NOT_FOUND")


def test_patch_applies_only_sent_fields(client, seeded):
    subject_id = _create(client, seeded, birth_date="1990-01-15").json()["id"]
    headers = _auth(seeded["investigator"])

    response = client.patch(
        f"/v1/subjects/{subject_id}", json={"name": "Jane Doe"}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Jane Doe"

    stored = client.get(f"/v1/subjects/{subject_id}", headers=headers).json()
    assert stored["name"] == "Jane Doe"
    assert stored["number"] == "SUB-001"
    assert stored["birth_date"] == "1990-01-15"
    assert stored["center"]["id"] == str(seeded["north"].id)


def test_patch_with_explicit_null_is_rejected(client, seeded):
    subject_id = _create(client, seeded).json()["id"]

    response = client.patch(
        f"/v1/subjects/{subject_id}",
        json={"name": None},
        headers=_auth(seeded["investigator"]),
    )

    _assert_problem(response, 422, "VALIDATION_ERROR")


def test_delete_returns_no_content(client, seeded):
    subject_id = _create(client, seeded).json()["id"]
    headers = _auth(seeded["investigator"])

    response = client.delete(f"/v1/subjects/{subject_id}", headers=headers)

    assert response.status_code == 204
    _assert_problem(
        client.get(f"/v1/subjects/{subject_id}", headers=headers), 404, "NOT_FOUND"
    )


# =============================================================================
# Audit logs
# =============================================================================


def test_audit_logs_by_number_after_rename(client, seeded):
    headers = _auth(seeded["investigator"])
    subject_id = _create(client, seeded).json()["id"]
    client.patch(
        f"/v1/subjects/{subject_id}", json={"name": "Jane Doe"}, headers=headers
    )

    response = client.get("/v1/subjects/SUB-001/audit-logs", headers=headers)

    assert response.status_code == 200
    logs = response.json()["audit_logs"]
    assert [log["action"] for log in logs] == ["UPDATE", "CREATE"]
    assert logs[0]["diff"] == {
        "subject_id": subject_id,
        "name": {"old": "John Doe", "new": "Jane Doe"},
    }
    assert logs[0]["user_id"] == str(seeded["investigator"])


def test_audit_logs_survive_delete(client, seeded):
    headers = _auth(seeded["investigator"])
    subject_id = _create(client, seeded).json()["id"]
    client.delete(f"/v1/subjects/{subject_id}", headers=headers)

    by_number = client.get("/v1/subjects/SUB-001/audit-logs", headers=headers)
    by_id = client.get(f"/v1/subjects/{subject_id}/audit-logs", headers=headers)

    assert [log["action"] for log in by_number.json()["audit_logs"]] == [
        "DELETE",
        "CREATE",
    ]
    assert by_id.json() == by_number.json()
    assert all(log["subject_id"] is None for log in by_id.json()["audit_logs"])


def test_audit_logs_outside_scope_are_forbidden(client, seeded):
    _create(client, seeded)

    response = client.get(
        "/v1/subjects/SUB-001/audit-logs", headers=_auth(seeded["outsider"])
    )

    _assert_problem(response, 403, "FORBIDDEN")


def test_audit_logs_for_unknown_number_are_empty(client, seeded):
    response = client.get(
        "/v1/subjects/NOPE-404/audit-logs", headers=_auth(seeded["investigator"])
    )

    assert response.status_code == 200
    assert response.json() == {"audit_logs": []}


# =============================================================================
# Centers / infrastructure errors
# =============================================================================


def test_centers_in_scope(client, seeded):
    response = client.get("/v1/centers", headers=_auth(seeded["investigator"]))

    assert response.status_code == 200
    assert response.json() == {
        "centers": [{"id": str(seeded["north"].id), "name": "North"}]
    }


def test_database_error_is_service_unavailable(client, seeded):
    class _BrokenRepo:
        def list_subjects_by_centers(self, center_ids):
            raise DatabaseError("connection refused")

    app.dependency_overrides[get_list_subjects_use_case] = lambda: ListSubjectsUseCase(
        _BrokenRepo(), get_resolve_access_scope_use_case()
    )

    response = client.get("/v1/subjects", headers=_auth(seeded["investigator"]))

    _assert_problem(response, 503, "DATABASE_ERROR")
    assert "connection refused" not in response.text
