"""
Tests for the response envelope, error mapping and health checks
"""

import inspect

from fastapi import APIRouter
from fastapi.testclient import TestClient

from quizly.core.exceptions import DuplicateException
from quizly.main import app
from tests.conftest import API

failing_routes = APIRouter()


@failing_routes.get("/__failing/duplicate")
async def raise_duplicate():
    raise DuplicateException("Already there")


@failing_routes.get("/__failing/crash")
async def raise_unexpected():
    raise RuntimeError("boom")


app.include_router(failing_routes)


def test_quizly_exception_maps_to_envelope(client):
    response = client.get("/__failing/duplicate")

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "Already there", "data": None}


def test_unexpected_exception_is_500_envelope():
    response = TestClient(app, raise_server_exceptions=False).get("/__failing/crash")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "boom" in response.json()["message"]


def test_unknown_route_is_404_envelope(client):
    response = client.get(f"{API}/does-not-exist")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_malformed_path_parameter_is_400(client, user_headers):
    response = client.get(f"{API}/quizzes/not-a-number", headers=user_headers)

    assert response.status_code == 400
    assert "quiz_id" in response.json()["data"]


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_detailed_health_checks_database(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    assert response.json()["data"]["checks"] == {"database": "healthy"}


def test_api_handlers_run_in_threadpool():
    """Handlers doing blocking database or bcrypt work must be plain functions"""
    api_routes = [route for route in app.routes if getattr(route, "path", "").startswith(API)]

    assert api_routes
    for route in api_routes:
        if hasattr(route, "endpoint"):
            assert not inspect.iscoroutinefunction(route.endpoint), route.path
