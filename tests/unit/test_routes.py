"""
HTTP surface tests.

The app is built without entering its lifespan (no MongoDB); services backed
by the in-memory store are placed on ``app.state`` directly.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from main import create_app

pytestmark = pytest.mark.unit


@pytest.fixture
def app(settings, employee_service, account_service):
    app = create_app(settings)
    app.state.employee_service = employee_service
    app.state.account_service = account_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def _create(client, payload, **overrides):
    response = client.post("/employees", json={**payload, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthRoutes:
    def test_signup_then_login(self, client):
        response = client.post("/signup", json={"username": "ada", "email": "Ada@Example.com", "password": "secret1"})

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "ada@example.com"
        assert "password" not in body

        response = client.post("/login", json={"email": "ada@example.com", "password": "secret1"})

        assert response.status_code == 200
        assert response.json()["token"]

    def test_bad_login_is_401_with_error_body(self, client):
        client.post("/signup", json={"username": "ada", "email": "ada@example.com", "password": "secret1"})

        response = client.post("/login", json={"username": "ada", "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json() == {"code": "UNAUTHENTICATED", "message": "Invalid credentials.", "details": None}

    def test_signup_validation_error_lists_details(self, client):
        response = client.post("/signup", json={"username": "a", "email": "bad", "password": "1"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_INPUT"
        assert body["message"] == "Username must be at least 3 characters."
        assert {d["field"] for d in body["details"]} == {"username", "email", "password"}


class TestEmployeeRoutes:
    def test_create_and_fetch(self, client, employee_payload):
        created = _create(client, employee_payload)

        response = client.get(f"/employees/{created['id']}")

        assert response.status_code == 200
        assert response.json()["salary"] == 5000
        assert response.json()["email"] == "ada.lovelace@example.com"

    def test_list(self, client, employee_payload):
        _create(client, employee_payload)

        response = client.get("/employees")

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_search_route_is_not_an_id(self, client, employee_payload):
        _create(client, employee_payload)

        assert client.get("/employees/search").status_code == 400
        response = client.get("/employees/search", params={"department": "eng"})
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_update(self, client, employee_payload):
        created = _create(client, employee_payload)

        response = client.put(f"/employees/{created['id']}", json={"designation": "Staff Engineer"})

        assert response.status_code == 200
        assert response.json()["designation"] == "Staff Engineer"
        assert response.json()["salary"] == 5000

    def test_salary_below_minimum_is_400(self, client, employee_payload):
        response = client.post("/employees", json={**employee_payload, "salary": 999})

        assert response.status_code == 400
        assert response.json()["message"] == "Salary must be at least 1000."

    def test_delete(self, client, employee_payload):
        created = _create(client, employee_payload)

        response = client.delete(f"/employees/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Employee deleted successfully."}

    @pytest.mark.parametrize("eid, status, code", [
        ("65f0c0ffee0000000000abcd", 404, "NOT_FOUND"),
        ("not-an-id", 400, "INVALID_INPUT"),
    ])
    def test_delete_errors(self, client, eid, status, code):
        response = client.delete(f"/employees/{eid}")

        assert response.status_code == status
        assert response.json()["code"] == code

    def test_unparseable_body_uses_error_shape(self, client, employee_payload):
        response = client.post("/employees", json={**employee_payload, "employee_photo": ["x"]})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_unexpected_exception_is_internal_error(self, app, employee_service):
        employee_service.list_employees = AsyncMock(side_effect=RuntimeError("kaboom"))
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/employees")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
