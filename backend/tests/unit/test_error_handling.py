"""
Unit Tests for the Error Handling Middleware
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from edugen.middleware.error_handling import (
    InvalidRequestError,
    LLMError,
    NotFoundError,
    setup_error_handling,
)


def _app(debug: bool = False) -> FastAPI:
    app = FastAPI()
    setup_error_handling(app, debug=debug)

    @app.get("/bad-request")
    async def bad_request():
        raise InvalidRequestError("topic is required", details={"field": "topic"})

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Exercise not found")

    @app.get("/upstream")
    async def upstream():
        raise LLMError("no choices", details={"model": "m"})

    @app.get("/crash")
    async def crash():
        raise RuntimeError("secret internals")

    return app


class TestErrorHandlingMiddleware:
    """Tests for ErrorHandlingMiddleware."""

    def test_client_error_includes_details(self) -> None:
        response = TestClient(_app()).get("/bad-request")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_request"
        assert body["message"] == "topic is required"
        assert body["details"] == {"field": "topic"}
        assert len(body["error_id"]) == 8

    def test_not_found(self) -> None:
        response = TestClient(_app()).get("/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_server_error_hides_details(self) -> None:
        response = TestClient(_app()).get("/upstream")

        assert response.status_code == 502
        assert response.json()["details"] is None

    def test_unhandled_error_is_sanitized(self) -> None:
        response = TestClient(_app()).get("/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert "secret internals" not in response.text

    def test_debug_exposes_exception(self) -> None:
        response = TestClient(_app(debug=True)).get("/crash")

        assert response.status_code == 500
        assert response.json()["details"]["exception"] == "RuntimeError"
