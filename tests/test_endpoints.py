"""Tests for FastAPI endpoints."""

from unittest.mock import patch

import pytest

import config_storage.main as main_module
from config_storage.config import config
from config_storage.exceptions import ConfigStorageDisabledException, StatementExecutionError
from config_storage.relation_parameters import RelationParameters


@pytest.fixture
def unauthenticated(client):
    """The same client with the real API key check in place."""
    main_module.app.dependency_overrides.clear()
    return client


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_needs_no_key(self, unauthenticated):
        assert unauthenticated.get("/health").status_code == 200


class TestAuth:
    """Tests for the X-Pma-Api-Key header check."""

    def test_missing_key(self, unauthenticated):
        response = unauthenticated.get("/v1/config-storage")

        assert response.status_code == 401
        assert response.json()["detail"]["error_code"] == "unauthorized"

    def test_wrong_key(self, unauthenticated):
        response = unauthenticated.get("/v1/config-storage", headers={"X-Pma-Api-Key": "nope"})

        assert response.status_code == 401

    def test_valid_key(self, unauthenticated):
        response = unauthenticated.get("/v1/config-storage", headers={"X-Pma-Api-Key": "test-key"})

        assert response.status_code == 200

    def test_no_key_configured(self, unauthenticated):
        with patch.object(config, "PMA_API_KEY", ""):
            response = unauthenticated.get("/v1/config-storage", headers={"X-Pma-Api-Key": "test-key"})

        assert response.status_code == 503
        assert response.json()["detail"]["error_code"] == "auth_unavailable"

    def test_drop_requires_key(self, unauthenticated, mock_operations):
        response = unauthenticated.delete("/v1/databases/shop")

        assert response.status_code == 401
        mock_operations.drop_database.assert_not_called()


class TestConfigStorage:
    """Tests for the configuration storage endpoints."""

    def test_features(self, client):
        response = client.get("/v1/config-storage")

        assert response.status_code == 200
        data = response.json()
        assert data["db"] == "phpmyadmin"
        assert data["enabled"] is True
        assert data["all_features"] is True
        assert data["features"]["bookmark"] is True

    def test_features_disabled(self, client, mock_relation):
        mock_relation.get_relation_parameters.return_value = RelationParameters()

        data = client.get("/v1/config-storage").json()

        assert data["db"] is None
        assert data["enabled"] is False
        assert not any(data["features"].values())

    def test_create_tables(self, client, mock_relation):
        mock_relation.create_missing_tables.return_value = ["pma__recent"]

        response = client.post("/v1/config-storage/tables")

        assert response.status_code == 200
        assert response.json()["created"] == ["pma__recent"]
        assert response.json()["storage"]["enabled"] is True

    def test_create_tables_disabled(self, client, mock_relation):
        mock_relation.create_missing_tables.side_effect = ConfigStorageDisabledException("not configured")

        response = client.post("/v1/config-storage/tables")

        assert response.status_code == 400
        assert response.json() == {"detail": "not configured"}

    def test_not_initialized(self, client):
        main_module.relation = None

        assert client.get("/v1/config-storage").status_code == 503


class TestDrops:
    """Tests for the drop endpoints."""

    def test_drop_database(self, client, mock_operations):
        response = client.delete("/v1/databases/shop")

        assert response.status_code == 200
        assert response.json() == {"status": "dropped", "object_type": "database", "name": "shop"}
        mock_operations.drop_database.assert_called_once_with("shop")

    def test_drop_table(self, client, mock_operations):
        response = client.delete("/v1/databases/shop/tables/orders")

        assert response.status_code == 200
        assert response.json()["name"] == "shop.orders"
        mock_operations.drop_table.assert_called_once_with("shop", "orders")

    def test_drop_column(self, client, mock_operations):
        response = client.delete("/v1/databases/shop/tables/orders/columns/status")

        assert response.status_code == 200
        assert response.json()["object_type"] == "column"
        mock_operations.drop_column.assert_called_once_with("shop", "orders", "status")

    def test_drop_user(self, client, mock_operations):
        response = client.delete("/v1/users/alice", params={"host": "localhost"})

        assert response.status_code == 200
        assert response.json()["name"] == "alice@localhost"
        mock_operations.drop_user.assert_called_once_with("alice", "localhost")

    def test_drop_user_default_host(self, client, mock_operations):
        client.delete("/v1/users/alice")

        mock_operations.drop_user.assert_called_once_with("alice", "%")

    def test_statement_error(self, client, mock_operations):
        mock_operations.drop_table.side_effect = StatementExecutionError(
            "DROP TABLE `shop`.`orders`", Exception("Unknown table 'shop.orders'")
        )

        response = client.delete("/v1/databases/shop/tables/orders")

        assert response.status_code == 422
        assert response.json() == {"detail": "Unknown table 'shop.orders'"}

    def test_not_initialized(self, client):
        main_module.operations = None

        assert client.delete("/v1/databases/shop").status_code == 503
