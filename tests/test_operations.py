"""Tests for config_storage/operations.py."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.sql.elements import TextClause

from config_storage.dbi import DatabaseInterface
from config_storage.exceptions import StatementExecutionError
from config_storage.operations import DatabaseOperations


@pytest.fixture
def mysql_dbi():
    engine = create_engine("mysql+pymysql://alice@db.example:3306/")
    yield DatabaseInterface(engine)
    engine.dispose()


@pytest.fixture
def cleanup():
    cleanup = MagicMock()
    cleanup.relation.is_storage_database.side_effect = lambda db: db == "phpmyadmin"
    return cleanup


@pytest.fixture
def operations(mysql_dbi, cleanup):
    return DatabaseOperations(mysql_dbi, cleanup)


class TestDrops:
    """Primary statements and the cleanup that follows them."""

    def test_drop_column(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0) as query:
            operations.drop_column("shop", "orders", "status")

        query.assert_called_once_with("ALTER TABLE `shop`.`orders` DROP `status`")
        cleanup.column.assert_called_once_with("shop", "orders", "status")

    def test_drop_table(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0) as query:
            operations.drop_table("shop", "order`items")

        query.assert_called_once_with("DROP TABLE `shop`.`order``items`")
        cleanup.table.assert_called_once_with("shop", "order`items")

    def test_drop_database(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0) as query:
            operations.drop_database("shop")

        query.assert_called_once_with("DROP DATABASE `shop`")
        cleanup.database.assert_called_once_with("shop")

    def test_drop_user_binds_account(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0) as query:
            operations.drop_user("O'Brien", "localhost")

        (statement,), _ = query.call_args
        assert isinstance(statement, TextClause)
        assert statement.compile().params == {"username": "O'Brien", "host": "localhost"}
        cleanup.user.assert_called_once_with("O'Brien")

    def test_drop_user_default_host(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0) as query:
            operations.drop_user("alice")

        (statement,), _ = query.call_args
        assert statement.compile().params["host"] == "%"


class TestFailedDrops:
    """A failing primary statement leaves configuration storage alone."""

    @pytest.mark.parametrize("method,args,cleanup_method", [
        ("drop_column", ("shop", "orders", "status"), "column"),
        ("drop_table", ("shop", "orders"), "table"),
        ("drop_database", ("shop",), "database"),
        ("drop_user", ("alice",), "user"),
    ])
    def test_no_cleanup(self, operations, mysql_dbi, cleanup, method, args, cleanup_method):
        error = StatementExecutionError("DROP ...", Exception("denied"))
        with patch.object(mysql_dbi, "query", side_effect=error):
            with pytest.raises(StatementExecutionError):
                getattr(operations, method)(*args)

        getattr(cleanup, cleanup_method).assert_not_called()

    def test_cleanup_failure_propagates(self, operations, mysql_dbi, cleanup):
        cleanup.table.side_effect = StatementExecutionError("DELETE ...", Exception("gone"))

        with patch.object(mysql_dbi, "query", return_value=0):
            with pytest.raises(StatementExecutionError):
                operations.drop_table("shop", "orders")


class TestStorageSchemaDrops:
    """Drops inside the storage schema re-resolve the registry before cleanup."""

    @pytest.mark.parametrize("method,args,cleanup_method", [
        ("drop_column", ("phpmyadmin", "pma__column_info", "input_transformation"), "column"),
        ("drop_table", ("phpmyadmin", "pma__column_info"), "table"),
        ("drop_database", ("phpmyadmin",), "database"),
    ])
    def test_invalidated_before_cleanup(self, operations, mysql_dbi, cleanup, method, args, cleanup_method):
        order = []
        cleanup.relation.invalidate.side_effect = lambda: order.append("invalidate")
        getattr(cleanup, cleanup_method).side_effect = lambda *a: order.append("cleanup")

        with patch.object(mysql_dbi, "query", return_value=0):
            getattr(operations, method)(*args)

        assert order == ["invalidate", "cleanup"]

    def test_other_schema_keeps_registry(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0):
            operations.drop_table("shop", "orders")
            operations.drop_database("shop")

        cleanup.relation.invalidate.assert_not_called()

    def test_failed_drop_keeps_registry(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", side_effect=StatementExecutionError("DROP ...")):
            with pytest.raises(StatementExecutionError):
                operations.drop_table("phpmyadmin", "pma__history")

        cleanup.relation.invalidate.assert_not_called()

    def test_drop_user_keeps_registry(self, operations, mysql_dbi, cleanup):
        with patch.object(mysql_dbi, "query", return_value=0):
            operations.drop_user("phpmyadmin")

        cleanup.relation.is_storage_database.assert_not_called()
