"""
Tests for the HTTP surface over the permission store.
"""

from unittest.mock import MagicMock

from fastapi import status
from fastapi.testclient import TestClient

from permission_service.core.exceptions import CancellationError, StorageError
from permission_service.main import create_app
from permission_service.services.health import ServingStatus


def create(client, file_id="f1", user_id="u1", role="reader"):
    return client.post("/permissions", json={"fileID": file_id, "userID": user_id, "role": role})


class TestCreatePermission:
    def test_create_returns_stored_record(self, client):
        response = create(client)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"]
        assert body["fileID"] == "f1"
        assert body["userID"] == "u1"
        assert body["role"] == "reader"

    def test_create_twice_updates_role(self, client):
        first = create(client, role="reader").json()
        second = create(client, role="writer").json()

        assert second["id"] == first["id"]
        assert second["role"] == "writer"

    def test_empty_file_id_is_bad_request(self, client):
        response = create(client, file_id="")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["message"] == "fileID is required"
        assert error["details"] == {"field": "fileID"}

    def test_missing_body_field_is_unprocessable(self, client):
        response = client.post("/permissions", json={"fileID": "f1", "role": "reader"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestReadPermissions:
    def test_get_one(self, client):
        created = create(client).json()

        response = client.get("/permissions/one", params={"id": created["id"]})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == created

    def test_get_one_not_found(self, client):
        response = client.get("/permissions/one", params={"fileID": "missing"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["message"] == "permission not found"

    def test_list_empty_is_ok(self, client):
        response = client.get("/permissions", params={"fileID": "missing"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_filters_by_user(self, client):
        create(client, file_id="f1", user_id="u1")
        create(client, file_id="f2", user_id="u1")
        create(client, file_id="f1", user_id="u2")

        response = client.get("/permissions", params={"userID": "u1"})

        assert sorted(p["fileID"] for p in response.json()) == ["f1", "f2"]


class TestDeletePermission:
    def test_delete_then_get_is_not_found(self, client):
        create(client, role="writer")

        response = client.delete("/permissions", params={"fileID": "f1", "userID": "u1"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["role"] == "writer"

        response = client.get("/permissions/one", params={"fileID": "f1", "userID": "u1"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_by_id(self, client):
        created = create(client).json()

        response = client.delete("/permissions", params={"id": created["id"]})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == created
        assert client.get("/permissions").json() == []

    def test_delete_not_found(self, client):
        response = client.delete("/permissions", params={"fileID": "missing"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_requires_a_filter(self, client):
        create(client)

        response = client.delete("/permissions")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert client.get("/permissions").json() != []


class TestStoreFailures:
    def make_client(self, store) -> TestClient:
        app = create_app(use_lifespan=False)
        app.state.store = store
        return TestClient(app)

    def test_cancellation_is_gateway_timeout(self):
        store = MagicMock()
        store.get.side_effect = CancellationError("get", 10.0)

        response = self.make_client(store).get("/permissions/one", params={"fileID": "f1"})

        assert response.status_code == status.HTTP_504_GATEWAY_TIMEOUT
        assert response.json()["error"]["type"] == "Gateway Timeout"

    def test_storage_error_is_service_unavailable(self):
        store = MagicMock()
        store.get_all.side_effect = StorageError("get all", "connection reset")

        response = self.make_client(store).get("/permissions")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"]["message"] == "get all failed: connection reset"

    def test_store_not_initialized(self):
        app = create_app(use_lifespan=False)

        response = TestClient(app).get("/permissions")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestHealth:
    def test_serving(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "SERVING"}

    def test_not_serving(self, app, client):
        app.state.health_monitor.status = ServingStatus.NOT_SERVING

        response = client.get("/health")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json() == {"status": "NOT_SERVING"}

    def test_without_monitor_is_unknown(self):
        response = TestClient(create_app(use_lifespan=False)).get("/health")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json() == {"status": "UNKNOWN"}
