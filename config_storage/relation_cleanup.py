"""Removal of configuration storage metadata for dropped columns, tables, databases and users."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Mapping, Sequence

from sqlalchemy import String, and_, column, delete, or_, quoted_name, table
from sqlalchemy.sql.expression import ColumnElement, Delete

from config_storage.dbi import DatabaseInterface
from config_storage.relation_parameters import RelationParameters

logger = logging.getLogger(__name__)

Condition = Callable[..., ColumnElement]


class Scope(str, Enum):
    """Kind of primary object being removed."""
    COLUMN = "column"
    TABLE = "table"
    DATABASE = "database"
    USER = "user"


def _match(*keys: str) -> Condition:
    """Equality on each key column, in the order the scope values are given."""
    def condition(*values: str) -> ColumnElement:
        return and_(*(column(key, String()) == value for key, value in zip(keys, values)))
    return condition


def _navigation_table(db: str, table_name: str) -> ColumnElement:
    # A table is hidden either as itself or as a navigation item of type 'table'
    return and_(
        column("db_name", String()) == db,
        or_(
            column("table_name", String()) == table_name,
            and_(column("item_name", String()) == table_name, column("item_type", String()) == "table"),
        ),
    )


@dataclass(frozen=True)
class CleanupTarget:
    """One auxiliary table and how each scope narrows deletes on it."""
    feature: str
    table: str
    scopes: Mapping[Scope, Condition]


# Statement order within every operation follows this list
CLEANUP_TARGETS: List[CleanupTarget] = [
    CleanupTarget("column_comments_feature", "column_info", {
        Scope.COLUMN: _match("db_name", "table_name", "column_name"),
        Scope.TABLE: _match("db_name", "table_name"),
        Scope.DATABASE: _match("db_name"),
    }),
    CleanupTarget("bookmark_feature", "bookmark", {
        Scope.DATABASE: _match("dbase"),
        Scope.USER: _match("user"),
    }),
    CleanupTarget("display_feature", "table_info", {
        Scope.COLUMN: _match("db_name", "table_name", "display_field"),
        Scope.TABLE: _match("db_name", "table_name"),
        Scope.DATABASE: _match("db_name"),
    }),
    CleanupTarget("pdf_feature", "pdf_pages", {
        Scope.DATABASE: _match("db_name"),
    }),
    CleanupTarget("pdf_feature", "table_coords", {
        Scope.TABLE: _match("db_name", "table_name"),
        Scope.DATABASE: _match("db_name"),
    }),
    CleanupTarget("relation_feature", "relation", {
        Scope.COLUMN: _match("master_db", "master_table", "master_field"),
        Scope.TABLE: _match("master_db", "master_table"),
        Scope.DATABASE: _match("master_db"),
    }),
    CleanupTarget("relation_feature", "relation", {
        Scope.COLUMN: _match("foreign_db", "foreign_table", "foreign_field"),
        Scope.TABLE: _match("foreign_db", "foreign_table"),
        Scope.DATABASE: _match("foreign_db"),
    }),
    CleanupTarget("sql_history_feature", "history", {
        Scope.USER: _match("username"),
    }),
    CleanupTarget("recently_used_tables_feature", "recent", {
        Scope.USER: _match("username"),
    }),
    CleanupTarget("favorite_tables_feature", "favorite", {
        Scope.USER: _match("username"),
    }),
    CleanupTarget("ui_preferences_feature", "table_uiprefs", {
        Scope.TABLE: _match("db_name", "table_name"),
        Scope.DATABASE: _match("db_name"),
        Scope.USER: _match("username"),
    }),
    CleanupTarget("user_preferences_feature", "user_config", {
        Scope.USER: _match("username"),
    }),
    CleanupTarget("configurable_menus_feature", "users", {
        Scope.USER: _match("username"),
    }),
    CleanupTarget("navigation_items_hiding_feature", "navigation_hiding", {
        Scope.TABLE: _navigation_table,
        Scope.DATABASE: _match("db_name"),
        Scope.USER: _match("username"),
    }),
    CleanupTarget("saved_query_by_example_searches_feature", "saved_searches", {
        Scope.DATABASE: _match("db_name"),
        Scope.USER: _match("username"),
    }),
    CleanupTarget("database_designer_settings_feature", "designer_settings", {
        Scope.USER: _match("username"),
    }),
    CleanupTarget("central_columns_feature", "central_columns", {
        Scope.DATABASE: _match("db_name"),
    }),
]


def build_cleanup_statements(
    relation_parameters: RelationParameters,
    scope: Scope,
    values: Sequence[str],
) -> List[Delete]:
    """
    Build the DELETE statements for one scope.

    Args:
        relation_parameters: Resolved feature registry
        scope: Kind of object being removed
        values: Scope values, e.g. (db, table, column) or (username,)

    Returns:
        One statement per target whose feature is present and which has a
        condition for the scope, in CLEANUP_TARGETS order
    """
    statements: List[Delete] = []
    for target in CLEANUP_TARGETS:
        condition = target.scopes.get(scope)
        if condition is None:
            continue
        feature = getattr(relation_parameters, target.feature)
        if feature is None:
            continue
        # Storage identifiers are always quoted, like dbi.backquote
        storage_table = table(
            quoted_name(getattr(feature, target.table), quote=True),
            schema=quoted_name(feature.database, quote=True),
        )
        statements.append(delete(storage_table).where(condition(*values)))
    return statements


class RelationCleanup:
    """Keeps configuration storage consistent with dropped objects."""

    def __init__(self, dbi: DatabaseInterface, relation):
        """
        Initialize the cleanup engine.

        Args:
            dbi: Database interface; statements go through its control connection
            relation: Provider of the feature registry (get_relation_parameters())
        """
        self.dbi = dbi
        self.relation = relation

    def column(self, db: str, table: str, column: str) -> None:
        """Clean up metadata of a dropped column."""
        self._cleanup(Scope.COLUMN, (db, table, column))

    def table(self, db: str, table: str) -> None:
        """Clean up metadata of a dropped table."""
        self._cleanup(Scope.TABLE, (db, table))

    def database(self, db: str) -> None:
        """Clean up metadata of a dropped database."""
        self._cleanup(Scope.DATABASE, (db,), requires_storage=True)

    def user(self, username: str) -> None:
        """Clean up metadata of a dropped user."""
        self._cleanup(Scope.USER, (username,), requires_storage=True)

    def _cleanup(self, scope: Scope, values: Sequence[str], requires_storage: bool = False) -> None:
        relation_parameters = self.relation.get_relation_parameters()
        if requires_storage and not relation_parameters.is_enabled:
            logger.debug(f"Configuration storage disabled, skipping {scope.value} cleanup")
            return

        statements = build_cleanup_statements(relation_parameters, scope, values)
        removed = 0
        for statement in statements:
            logger.debug(f"Configuration storage cleanup: {statement}")
            removed += self.dbi.query_as_control_user(statement) or 0

        if statements:
            logger.info(
                f"Cleaned up {scope.value} {'.'.join(values)!r}: "
                f"{len(statements)} statements, {removed} rows removed"
            )
