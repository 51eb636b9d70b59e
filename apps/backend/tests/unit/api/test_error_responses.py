"""Unit tests for error_responses and exception handler mapping."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from oficina.api.exception_handlers import register_exception_handlers
from oficina.crosscutting.error_responses import (
    ErrorCode,
    ErrorDetail,
    conflict,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)
from oficina.crosscutting.exceptions import (
    CredentialsUpdateError,
    StorageUnavailableError,
)

pytestmark = pytest.mark.unit


class TestErrorFactories:
    """Test error factory functions."""

    def test_validation_error(self):
        exc = validation_error("Dados inválidos", [{"field": "name", "msg": "required"}])
        assert exc.status_code == 422
        assert exc.code == ErrorCode.VALIDATION_ERROR
        assert exc.errors == [{"field": "name", "msg": "required"}]

    def test_not_found(self):
        exc = not_found("Funcionário 'func9' não encontrado")
        assert exc.status_code == 404
        assert exc.code == ErrorCode.NOT_FOUND
        assert "func9" in exc.detail

    def test_unauthorized(self):
        exc = unauthorized()
        assert exc.status_code == 401
        assert exc.code == ErrorCode.UNAUTHORIZED

    def test_forbidden(self):
        exc = forbidden("Somente admin")
        assert exc.status_code == 403
        assert exc.code == ErrorCode.FORBIDDEN

    def test_conflict(self):
        assert conflict("duplicado").status_code == 409


class TestErrorDetail:
    """Test ErrorDetail model."""

    def test_serialization(self):
        detail = ErrorDetail(
            title="Not Found",
            status=404,
            detail="Resource not found",
            code=ErrorCode.NOT_FOUND,
        )
        data = detail.model_dump(exclude_none=True)
        assert data["status"] == 404
        assert data["code"] == "NOT_FOUND"
        assert "errors" not in data


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/credentials")
    def credentials():
        raise CredentialsUpdateError("As senhas não coincidem!")

    @app.get("/storage")
    def storage():
        raise StorageUnavailableError("perfil inacessível")

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    return app


class TestExceptionHandlers:
    def test_credentials_error_is_422_problem_json(self):
        res = TestClient(_build_app()).get("/credentials")

        assert res.status_code == 422
        assert res.headers["content-type"].startswith("application/problem+json")
        body = res.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["detail"] == "As senhas não coincidem!"
        assert "error_id" in body["errors"][0]

    def test_storage_unavailable_is_503(self):
        res = TestClient(_build_app()).get("/storage")

        assert res.status_code == 503
        assert res.json()["code"] == "STORAGE_UNAVAILABLE"

    def test_unhandled_exception_is_generic_in_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("SESSION_SECRET", "x" * 40)
        monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")
        client = TestClient(_build_app(), raise_server_exceptions=False)

        res = client.get("/boom")

        assert res.status_code == 500
        assert res.json()["code"] == "INTERNAL_ERROR"
        assert res.json()["detail"] == "Erro interno."
