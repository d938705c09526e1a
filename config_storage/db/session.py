"""Database engine configuration."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from config_storage.config import config

# End-user connection, used for the primary DDL (drop column/table/database/user)
user_engine = create_engine(config.PMA_DATABASE_URL, pool_pre_ping=True)

# Control-user connection, the only one allowed to touch configuration storage
if config.PMA_CONTROL_DATABASE_URL == config.PMA_DATABASE_URL:
    control_engine = user_engine
else:
    control_engine = create_engine(config.PMA_CONTROL_DATABASE_URL, pool_pre_ping=True)


def get_user_engine() -> Engine:
    """Get the engine bound to the end user's credentials."""
    return user_engine


def get_control_engine() -> Engine:
    """Get the engine bound to the control user's credentials."""
    return control_engine
