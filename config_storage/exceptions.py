"""Custom exceptions for configuration storage."""

from typing import Optional


class ConfigStorageException(Exception):
    """Base exception for configuration storage errors."""
    pass


class StatementExecutionError(ConfigStorageException):
    """A statement failed on the database server (should return 422)."""

    def __init__(self, statement: str, orig: Optional[BaseException] = None):
        self.statement = statement
        self.orig = orig
        message = str(orig) if orig is not None else "Statement execution failed"
        super().__init__(message)


class ConfigStorageDisabledException(ConfigStorageException):
    """Configuration storage is not configured (should return 400)."""
    pass
