"""Drop actions on the administered server, followed by configuration storage cleanup."""

import logging

from sqlalchemy import text

from config_storage.dbi import DatabaseInterface
from config_storage.relation_cleanup import RelationCleanup

logger = logging.getLogger(__name__)


class DatabaseOperations:
    """
    Runs primary drops as the end user, then removes their stored metadata.

    Cleanup only runs after the primary statement succeeded; a failing drop
    propagates StatementExecutionError and leaves configuration storage alone.
    Drops inside the storage schema invalidate the cached feature registry
    before cleanup, so cleanup never targets a table that was just dropped.
    """

    def __init__(self, dbi: DatabaseInterface, cleanup: RelationCleanup):
        self.dbi = dbi
        self.cleanup = cleanup

    def _forget_storage(self, db: str) -> None:
        # The cached registry may still list tables dropped from pmadb
        relation = self.cleanup.relation
        if relation.is_storage_database(db):
            logger.info(f"Configuration storage schema {db!r} changed, re-resolving features")
            relation.invalidate()

    def _qualified(self, db: str, table: str) -> str:
        return f"{self.dbi.backquote(db)}.{self.dbi.backquote(table)}"

    def drop_column(self, db: str, table: str, column: str) -> None:
        statement = f"ALTER TABLE {self._qualified(db, table)} DROP {self.dbi.backquote(column)}"
        self.dbi.query(statement)
        logger.info(f"Dropped column {db}.{table}.{column}")
        self._forget_storage(db)
        self.cleanup.column(db, table, column)

    def drop_table(self, db: str, table: str) -> None:
        self.dbi.query(f"DROP TABLE {self._qualified(db, table)}")
        logger.info(f"Dropped table {db}.{table}")
        self._forget_storage(db)
        self.cleanup.table(db, table)

    def drop_database(self, db: str) -> None:
        self.dbi.query(f"DROP DATABASE {self.dbi.backquote(db)}")
        logger.info(f"Dropped database {db}")
        self._forget_storage(db)
        self.cleanup.database(db)

    def drop_user(self, username: str, host: str = "%") -> None:
        """
        Drop a server account and its stored preferences.

        Args:
            username: Account name
            host: Account host part (default '%')
        """
        statement = text("DROP USER :username@:host").bindparams(username=username, host=host)
        self.dbi.query(statement)
        logger.info(f"Dropped user {username}@{host}")
        self.cleanup.user(username)
