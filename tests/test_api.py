"""Tests for the HTTP routes."""

from unittest import mock

import pytest
from fastapi.testclient import TestClient

from chatbridge.api.main import app
from chatbridge.api.routes import chat as chat_routes
from chatbridge.api.routes.chat import require_chat_service
from chatbridge.api.routes.health import check_upstream
from chatbridge.core.exceptions import ConfigurationError, DatabaseError, ValidationError
from chatbridge.database.connection import get_database
from chatbridge.llm.formatter import format_sources
from chatbridge.llm.normalizer import normalize_response
from chatbridge.llm.client import error_result
from chatbridge.services.chat_service import ChatService
from chatbridge.services.user_service import get_user_service


@pytest.fixture
def api():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user_service():
    service = mock.MagicMock()
    app.dependency_overrides[get_user_service] = lambda: service
    return service


@pytest.fixture
def chat_client():
    client = mock.MagicMock()
    client.format_sources.side_effect = format_sources
    service = ChatService(client=client)
    app.dependency_overrides[require_chat_service] = lambda: service
    return client


class TestRoot:

    def test_welcome(self, api):
        response = api.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to the app"}


class TestUsersRoutes:

    def test_list_users(self, api, user_service):
        user_service.get_all.return_value = [{"id": 1, "name": "Ada", "email": "ada@example.com"}]

        response = api.get("/users")

        assert response.status_code == 200
        assert response.json() == [{"id": 1, "name": "Ada", "email": "ada@example.com"}]

    def test_list_users_failure(self, api, user_service):
        user_service.get_all.side_effect = DatabaseError("connection refused")

        response = api.get("/users")

        assert response.status_code == 500
        assert response.json() == {"message": "connection refused"}

    def test_list_users_failure_default_message(self, api, user_service):
        user_service.get_all.side_effect = DatabaseError("")

        response = api.get("/users")

        assert response.json() == {"message": "Error occurred while retrieving users."}

    def test_create_user(self, api, user_service):
        user_service.add.return_value = {
            "id": 7,
            "name": "Ada",
            "email": "ada@example.com",
            "created_at": "2026-01-01T00:00:00",
        }

        response = api.post("/users", json={"name": "Ada", "email": "ada@example.com"})

        assert response.status_code == 201
        assert response.json()["id"] == 7
        user_service.add.assert_called_once_with("Ada", "ada@example.com")

    def test_create_duplicate_user(self, api, user_service):
        user_service.add.side_effect = ValidationError("A user with this email already exists", field="email")

        response = api.post("/users", json={"name": "Ada", "email": "ada@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_create_user_invalid_email(self, api, user_service):
        response = api.post("/users", json={"name": "Ada", "email": "not-an-email"})
        assert response.status_code == 422
        user_service.add.assert_not_called()


class TestChatRoutes:

    def test_answer_with_sources(self, api, chat_client, openwebui_response):
        chat_client.chat.return_value = normalize_response(openwebui_response)

        response = api.post("/chat", json={"message": "What is in week 3?", "collection_id": "c1"})

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "Week 3 covers sorting."
        assert [s["page"] for s in body["sources"]] == ["Page 3", "Page 4"]
        assert body["sources"][0]["collectionId"] == "c1"
        assert body["formatted_sources"][0].startswith("1. **Syllabus**")
        assert body["error"] is None
        chat_client.chat.assert_called_once_with("What is in week 3?", collection_id="c1", model=None)

    def test_upstream_error_is_returned_as_data(self, api, chat_client):
        chat_client.chat.return_value = error_result("[ERROR: API returned status 502]", "Bad Gateway", status=502)

        response = api.post("/chat", json={"message": "hi"})

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "[ERROR: API returned status 502]"
        assert body["status"] == 502
        assert body["sources"] == []

    def test_missing_configuration(self, api, monkeypatch):
        def unconfigured():
            raise ConfigurationError("OpenWebUI API key is not set.", setting="OPENWEBUI_API_KEY")

        monkeypatch.setattr(chat_routes, "get_chat_service", unconfigured)

        response = api.post("/chat", json={"message": "hi"})

        assert response.status_code == 503
        assert response.json()["error"] == "upstream_unavailable"

    def test_empty_message_rejected(self, api, chat_client):
        response = api.post("/chat", json={"message": ""})
        assert response.status_code == 422


class TestHealthRoutes:

    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_when_degraded(self, api):
        db = mock.MagicMock()
        db.check_connection.return_value = True
        app.dependency_overrides[get_database] = lambda: db
        app.dependency_overrides[check_upstream] = lambda: False

        response = api.get("/health/ready")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"] == {"database": True, "openwebui": False}

    def test_ready(self, api):
        db = mock.MagicMock()
        db.check_connection.return_value = True
        app.dependency_overrides[get_database] = lambda: db
        app.dependency_overrides[check_upstream] = lambda: True

        assert api.get("/health/ready").json()["status"] == "ready"
