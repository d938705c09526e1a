"""Database interface over the end-user and control-user connections."""

import logging
from typing import Iterable, Optional, Union

from sqlalchemy import MetaData, Table, inspect
from sqlalchemy.engine import Engine, Inspector
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.base import Executable

from config_storage.exceptions import StatementExecutionError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]


class DatabaseInterface:
    """Executes statements as the end user or as the privileged control user."""

    def __init__(self, user_engine: Engine, control_engine: Optional[Engine] = None):
        """
        Initialize the database interface.

        Args:
            user_engine: Engine bound to the end user's own credentials
            control_engine: Engine bound to the control user (defaults to user_engine)
        """
        self.user_engine = user_engine
        self.control_engine = control_engine if control_engine is not None else user_engine

    @property
    def user(self) -> Optional[str]:
        """Name of the end user."""
        return self.user_engine.url.username

    @property
    def control_user(self) -> Optional[str]:
        """Name of the control user."""
        return self.control_engine.url.username

    def query(self, statement: Statement) -> int:
        """Run a statement as the end user and return the affected row count."""
        return self._execute(self.user_engine, statement)

    def query_as_control_user(self, statement: Statement) -> int:
        """
        Run a statement on the control connection.

        Values never get concatenated into SQL: pass a SQLAlchemy executable
        with bound parameters. Plain strings are executed verbatim, without
        parameter interpolation, and may only embed backquote()d identifiers.

        Args:
            statement: Plain SQL or a SQLAlchemy executable

        Returns:
            Number of affected rows

        Raises:
            StatementExecutionError: If the database rejects the statement
        """
        return self._execute(self.control_engine, statement)

    def _execute(self, engine: Engine, statement: Statement) -> int:
        try:
            with engine.begin() as conn:
                if isinstance(statement, str):
                    result = conn.exec_driver_sql(statement)
                else:
                    result = conn.execute(statement)
                return result.rowcount
        except SQLAlchemyError as e:
            text = self._statement_text(engine, statement)
            logger.warning(f"Statement failed on {engine.url.render_as_string(hide_password=True)}: {e}")
            raise StatementExecutionError(text, getattr(e, "orig", None) or e) from e

    @staticmethod
    def _statement_text(engine: Engine, statement: Statement) -> str:
        if isinstance(statement, str):
            return statement
        return str(statement.compile(dialect=engine.dialect))

    def backquote(self, identifier: str) -> str:
        """Quote an identifier in the end user's dialect, always quoting."""
        return self.user_engine.dialect.identifier_preparer.quote_identifier(identifier)

    def inspect_control(self) -> Inspector:
        """Get a fresh schema inspector on the control connection."""
        return inspect(self.control_engine)

    def create_tables_as_control_user(self, metadata: MetaData, tables: Iterable[Table]) -> None:
        """Create tables on the control connection."""
        tables = list(tables)
        try:
            with self.control_engine.begin() as conn:
                metadata.create_all(conn, tables=tables, checkfirst=True)
        except SQLAlchemyError as e:
            names = ", ".join(table.fullname for table in tables)
            raise StatementExecutionError(f"CREATE TABLE {names}", getattr(e, "orig", None) or e) from e
