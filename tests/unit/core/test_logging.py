"""
Tests for logging middleware.
Tests PII masking, quiet paths, request ids and formatter output.
"""

import json
import logging
import sys

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from core.middleware.logging import (
    StructuredFormatter,
    StructuredLoggingMiddleware,
    mask_sensitive_data,
    setup_logging,
    should_log_request,
)


class TestMaskSensitiveData:
    """Test masking of credentials and PII."""

    @pytest.mark.parametrize("key", ["password", "access_token", "API_KEY", "client_secret", "Authorization"])
    def test_sensitive_keys_redacted(self, key):
        assert mask_sensitive_data({key: "value"}) == {key: "[REDACTED]"}

    def test_email_masked_in_values(self):
        masked = mask_sensitive_data({"email": "asha@example.com", "name": "Asha"})
        assert masked == {"email": "[EMAIL]", "name": "Asha"}

    def test_phone_masked(self):
        assert mask_sensitive_data("call +91 98765 43210 today") == "call [PHONE] today"

    def test_nested_structures(self):
        data = {"user": {"contact": ["asha@example.com"], "session_id": "abc"}, "risk_score": 72}
        assert mask_sensitive_data(data) == {
            "user": {"contact": ["[EMAIL]"], "session_id": "[REDACTED]"},
            "risk_score": 72,
        }

    def test_plain_values_untouched(self):
        data = {"language": "hi", "quiz_risk_score": 55, "group_by_date": True}
        assert mask_sensitive_data(data) == data

    def test_max_depth(self):
        data = {"a": {"b": {"c": "deep"}}}
        assert mask_sensitive_data(data, max_depth=1) == {"a": {"b": "[MAX_DEPTH_EXCEEDED]"}}


class TestShouldLogRequest:

    @pytest.mark.parametrize("path,expected", [
        ("/health", False),
        ("/health/db", False),
        ("/ready", False),
        ("/api/v1/bookings/book-slot", True),
        ("/api/v1/quiz/schema", True),
    ])
    def test_paths(self, path, expected):
        assert should_log_request(path) is expected


def middleware_records(caplog):
    return [r for r in caplog.records if r.name == "core.middleware.logging"]


@pytest.fixture
def app():
    app = FastAPI()
    app.add_middleware(StructuredLoggingMiddleware, log_request_body=True)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.post("/users")
    async def create_user(request: Request):
        return {"request_id": request.state.request_id}

    @app.get("/conflict")
    async def conflict():
        return JSONResponse(status_code=409, content={"error": "taken"})

    return app


class TestStructuredLoggingMiddleware:

    def test_generates_request_id(self, app):
        response = TestClient(app).post("/users", json={})
        request_id = response.headers["x-request-id"]
        assert request_id
        assert response.json()["request_id"] == request_id

    def test_propagates_request_id(self, app):
        response = TestClient(app).post("/users", json={}, headers={"x-request-id": "req-42"})
        assert response.headers["x-request-id"] == "req-42"
        assert response.json()["request_id"] == "req-42"

    def test_quiet_paths_still_get_request_id(self, app, caplog):
        with caplog.at_level(logging.INFO, logger="core.middleware.logging"):
            response = TestClient(app).get("/health")
        assert "x-request-id" in response.headers
        assert not middleware_records(caplog)

    def test_logs_masked_body(self, app, caplog):
        with caplog.at_level(logging.INFO, logger="core.middleware.logging"):
            TestClient(app).post("/users", json={"email": "asha@example.com", "name": "Asha"})

        events = [json.loads(record.getMessage()) for record in middleware_records(caplog)]
        started = next(e for e in events if e["event"] == "request_started")
        assert started["body"] == {"email": "[EMAIL]", "name": "Asha"}
        assert "asha@example.com" not in caplog.text

        completed = next(e for e in events if e["event"] == "request_completed")
        assert completed["status_code"] == 200
        assert "duration_ms" in completed

    def test_client_errors_logged_as_warning(self, app, caplog):
        with caplog.at_level(logging.INFO, logger="core.middleware.logging"):
            TestClient(app).get("/conflict")
        completed = [r for r in middleware_records(caplog) if "request_completed" in r.getMessage()]
        assert completed[0].levelno == logging.WARNING


class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_handler(self):
        setup_logging("DEBUG", json_logs=True)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_plain_handler(self):
        setup_logging("WARNING", json_logs=False)
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_formatter_output(self):
        record = logging.LogRecord("api.services.bookings", logging.INFO, __file__, 1, "Booked slot", None, None)
        record.request_id = "req-1"
        data = json.loads(StructuredFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["logger"] == "api.services.bookings"
        assert data["message"] == "Booked slot"
        assert data["request_id"] == "req-1"

    def test_formatter_includes_exception(self):
        try:
            raise ValueError("bad slot")
        except ValueError:
            exc_info = sys.exc_info()
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, exc_info)
        data = json.loads(StructuredFormatter().format(record))
        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad slot"
