"""Database module for pma-config-storage."""

from config_storage.db.session import control_engine, user_engine, get_control_engine, get_user_engine
from config_storage.db.models import CONFIG_STORAGE_TABLES, build_config_storage_metadata

__all__ = [
    "control_engine",
    "user_engine",
    "get_control_engine",
    "get_user_engine",
    "CONFIG_STORAGE_TABLES",
    "build_config_storage_metadata",
]
