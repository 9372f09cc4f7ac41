# tests/unit/test_error_handler.py
# Unit tests for the error hierarchy and response envelope

import json

from texttide.exceptions import (
    AppError,
    ForbiddenError,
    MethodNotAllowedError,
    NotFoundError,
    StorageError,
    ValidationError,
    error_body,
)


class TestErrorHandler:
    """Test error handler classes."""

    def test_app_error_has_correct_properties(self):
        error = AppError(
            message="Test error",
            error_code="TEST_ERROR",
            status_code=400,
            details={"field": "value"}
        )

        assert error.message == "Test error"
        assert error.error_code == "TEST_ERROR"
        assert error.status_code == 400
        assert error.details == {"field": "value"}

    def test_status_codes_per_error_kind(self):
        assert (ValidationError().status_code, ValidationError().error_code) == (400, "VALIDATION_ERROR")
        assert (ForbiddenError().status_code, ForbiddenError().error_code) == (403, "FORBIDDEN")
        assert (NotFoundError().status_code, NotFoundError().error_code) == (404, "NOT_FOUND")
        assert (StorageError().status_code, StorageError().error_code) == (500, "STORAGE_ERROR")

    def test_method_not_allowed_carries_allowed_methods(self):
        error = MethodNotAllowedError("OPTIONS", ["GET", "POST"])
        assert error.status_code == 405
        assert error.allowed == ["GET", "POST"]
        assert error.message == "Method OPTIONS Not Allowed"

    def test_error_body_structure(self):
        assert error_body("NOT_FOUND", "Item not found") == {
            "error": {"code": "NOT_FOUND", "message": "Item not found"}
        }
        body = error_body("TEST", "Test message", details={"key": "value"}, request_id="req-123")
        assert body["error"]["details"] == {"key": "value"}
        assert body["error"]["request_id"] == "req-123"

    def test_create_error_response_structure(self):
        from texttide.middleware.error_handler import create_error_response

        response = create_error_response(
            error_code="TEST",
            message="Test message",
            status_code=405,
            request_id="req-123",
            headers={"Allow": "GET"}
        )

        assert response.status_code == 405
        assert response.headers["allow"] == "GET"
        assert json.loads(response.body)["error"]["code"] == "TEST"


def _request_for(app, method, path):
    from starlette.requests import Request

    return Request({
        "type": "http",
        "method": method,
        "path": path,
        "root_path": "",
        "scheme": "http",
        "query_string": b"",
        "headers": [],
        "server": ("testserver", 80),
        "app": app,
    })


class TestAllowedMethods:

    def test_merges_starlette_allow_with_sibling_routes(self, service):
        from starlette.exceptions import HTTPException as StarletteHTTPException

        from texttide.main_fastapi import create_app
        from texttide.middleware.error_handler import allowed_methods

        app = create_app(service=service)
        exc = StarletteHTTPException(status_code=405, headers={"Allow": "GET"})

        methods = allowed_methods(_request_for(app, "OPTIONS", "/api/clipboard"), exc)

        assert methods[0] == "GET"
        assert set(methods) == {"GET", "POST", "PUT", "PATCH", "DELETE"}
        assert len(methods) == len(set(methods))

    def test_item_path_lists_only_get(self, service):
        from starlette.exceptions import HTTPException as StarletteHTTPException

        from texttide.main_fastapi import create_app
        from texttide.middleware.error_handler import allowed_methods

        app = create_app(service=service)
        exc = StarletteHTTPException(status_code=405, headers={"Allow": "GET"})

        assert allowed_methods(_request_for(app, "PUT", "/api/clipboard/abc123"), exc) == ["GET"]

    def test_falls_back_to_starlette_allow_header(self):
        from fastapi import FastAPI
        from starlette.exceptions import HTTPException as StarletteHTTPException

        from texttide.middleware.error_handler import allowed_methods

        exc = StarletteHTTPException(status_code=405, headers={"Allow": "GET, HEAD"})
        assert allowed_methods(_request_for(FastAPI(), "POST", "/anything"), exc) == ["GET", "HEAD"]
