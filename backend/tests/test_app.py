"""
BizTime Backend — Application-Level Tests
==========================================

What:  Error envelope for framework errors, request ID header, health check,
       and the access log level mapping.
"""

import logging

import pytest

from biztime.exceptions import BizTimeError, ConflictError, DatabaseError, NotFoundError, ValidationError
from biztime.middleware.logging import level_for_status


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, test_client):
        response = await test_client.get("/nowhere")

        assert response.status_code == 404
        assert response.json() == {"error": {"message": "Not Found", "status": 404}}

    @pytest.mark.asyncio
    async def test_wrong_method_uses_error_envelope(self, test_client):
        response = await test_client.patch("/companies")

        assert response.status_code == 405
        assert response.json()["error"]["status"] == 405

    def test_status_codes_by_exception_type(self):
        assert BizTimeError().status_code == 500
        assert ValidationError().status_code == 400
        assert NotFoundError("invoice", 3).status_code == 404
        assert ConflictError().status_code == 409
        assert DatabaseError().status_code == 500

    def test_not_found_message_names_resource(self):
        assert NotFoundError("invoice", 999).message == "No such invoice: 999"
        assert NotFoundError("company").message == "No such company"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/companies")

        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/companies", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestAccessLogLevel:

    def test_levels(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(503) == logging.ERROR
