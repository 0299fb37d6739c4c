"""
Name: RFC 7807 Error Tests

Responsibilities:
  - Validate error factories (status + stable code)
  - Validate SubjectError -> HTTP mapping
  - Validate exception handlers keep internal details out of responses
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from subject_registry.api.exception_handlers import register_exception_handlers
from subject_registry.application.usecases import SubjectError, SubjectErrorCode
from subject_registry.crosscutting.error_responses import (
    PROBLEM_JSON_MEDIA_TYPE,
    ErrorCode,
    conflict,
    forbidden,
    internal_error,
    unauthorized,
    validation_error,
)
from subject_registry.crosscutting.exceptions import (
    DatabaseError,
    RegistryError,
    UniqueConstraintError,
)
from subject_registry.interfaces.api.http.error_mapping import to_http_error


class TestErrorFactories:
    def test_validation_error(self):
        exc = validation_error("Invalid input", [{"field": "name", "msg": "required"}])
        assert exc.status_code == 422
        assert exc.code == ErrorCode.VALIDATION_ERROR
        assert exc.errors == [{"field": "name", "msg": "required"}]

    def test_unauthorized_sets_bearer_challenge(self):
        exc = unauthorized()
        assert exc.status_code == 401
        assert exc.headers == {"WWW-Authenticate": "Bearer"}

    def test_forbidden_conflict_internal(self):
        assert forbidden().status_code == 403
        assert conflict("dup").code == ErrorCode.CONFLICT
        assert internal_error().status_code == 500


class TestSubjectErrorMapping:
    @pytest.mark.parametrize(
        "code, status",
        [
            (SubjectErrorCode.VALIDATION_ERROR, 422),
            (SubjectErrorCode.FORBIDDEN, 403),
            (SubjectErrorCode.NOT_FOUND, 404),
            (SubjectErrorCode.CONFLICT, 409),
        ],
    )
    def test_status_per_code(self, code, status):
        exc = to_http_error(SubjectError(code=code, message="boom"))
        assert exc.status_code == status
        assert exc.detail == "boom"

    def test_validation_error_carries_field(self):
        exc = to_http_error(
            SubjectError(
                code=SubjectErrorCode.VALIDATION_ERROR,
                message="number inválido",
                field="number",
            )
        )
        assert exc.errors == [{"field": "number", "msg": "number inválido"}]


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/duplicate")
    def duplicate():
        raise UniqueConstraintError(
            "duplicate key value violates unique constraint",
            constraint="uq_subjects_number",
        )

    @app.get("/db-down")
    def db_down():
        raise DatabaseError("connection refused to 10.0.0.5")

    @app.get("/registry")
    def registry_failure():
        raise RegistryError("invariant broken")

    return app


@pytest.mark.unit
class TestExceptionHandlers:
    @pytest.fixture
    def client(self):
        return TestClient(_build_app(), raise_server_exceptions=False)

    def test_unique_constraint_maps_to_conflict(self, client):
        response = client.get("/duplicate")
        assert response.status_code == 409
        assert response.headers["content-type"].startswith(PROBLEM_JSON_MEDIA_TYPE)
        assert response.json()["code"] == "CONFLICT"

    def test_database_error_hides_message(self, client):
        response = client.get("/db-down")
        body = response.json()
        assert response.status_code == 503
        assert body["code"] == "DATABASE_ERROR"
        assert "10.0.0.5" not in body["detail"]
        assert "error_id" in body["errors"][0]

    def test_registry_error_is_internal(self, client):
        response = client.get("/registry")
        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"

    def test_request_validation_uses_problem_shape(self):
        app = _build_app()

        @app.get("/items/{item_id}")
        def item(item_id: int):
            return {"id": item_id}

        response = TestClient(app).get("/items/not-a-number")
        body = response.json()
        assert response.status_code == 422
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["field"] == "path.item_id"
