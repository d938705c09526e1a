"""Configuration management from environment variables."""

import logging
import os
from pathlib import Path
from typing import Dict, Optional
from dotenv import load_dotenv

# Load .env file from project root BEFORE reading environment variables
# Try multiple locations: project root, package directory, current working directory
env_paths = [
    Path(__file__).parent.parent / ".env",  # Project root (preferred)
    Path(__file__).parent / ".env",  # config_storage/ directory (fallback)
    Path.cwd() / ".env",  # Current working directory (fallback)
]

for env_path in env_paths:
    if env_path.exists():
        try:
            load_dotenv(env_path, override=False)
            break
        except (PermissionError, IOError):
            # If we can't read the file, continue to next location
            continue


# Configuration name -> env var holding the table name
STORAGE_TABLE_ENV_VARS = {
    "bookmarktable": "PMA_BOOKMARKTABLE",
    "relation": "PMA_RELATION",
    "table_info": "PMA_TABLE_INFO",
    "table_coords": "PMA_TABLE_COORDS",
    "pdf_pages": "PMA_PDF_PAGES",
    "column_info": "PMA_COLUMN_INFO",
    "history": "PMA_HISTORY",
    "recent": "PMA_RECENT",
    "favorite": "PMA_FAVORITE",
    "table_uiprefs": "PMA_TABLE_UIPREFS",
    "tracking": "PMA_TRACKING",
    "userconfig": "PMA_USERCONFIG",
    "users": "PMA_USERS",
    "usergroups": "PMA_USERGROUPS",
    "navigationhiding": "PMA_NAVIGATIONHIDING",
    "savedsearches": "PMA_SAVEDSEARCHES",
    "central_columns": "PMA_CENTRAL_COLUMNS",
    "designer_settings": "PMA_DESIGNER_SETTINGS",
    "export_templates": "PMA_EXPORT_TEMPLATES",
}

# Default table names (the bookmark table is the only one not named after its key)
DEFAULT_TABLE_NAMES = {
    key: "pma__bookmark" if key == "bookmarktable" else f"pma__{key}"
    for key in STORAGE_TABLE_ENV_VARS
}


def _table_name(key: str) -> str:
    return os.getenv(STORAGE_TABLE_ENV_VARS[key], DEFAULT_TABLE_NAMES[key]).strip()


class Config:
    """Application configuration from environment variables."""

    # Server config
    PMA_PORT: int = int(os.getenv("PMA_PORT", "5010"))
    PMA_LOG_LEVEL: str = os.getenv("PMA_LOG_LEVEL", "info").upper()

    # Connections: the end user's own credentials and the privileged control user
    PMA_DATABASE_URL: str = os.getenv("PMA_DATABASE_URL", "mysql+pymysql://root@localhost:3306/")
    PMA_CONTROL_DATABASE_URL: str = os.getenv("PMA_CONTROL_DATABASE_URL", PMA_DATABASE_URL)

    # Auth config
    PMA_API_KEY: str = os.getenv("PMA_API_KEY", "")

    # Configuration storage schema, empty disables storage entirely
    PMA_PMADB: str = os.getenv("PMA_PMADB", "phpmyadmin").strip()

    # Configuration storage tables, empty disables the table
    PMA_BOOKMARKTABLE: str = _table_name("bookmarktable")
    PMA_RELATION: str = _table_name("relation")
    PMA_TABLE_INFO: str = _table_name("table_info")
    PMA_TABLE_COORDS: str = _table_name("table_coords")
    PMA_PDF_PAGES: str = _table_name("pdf_pages")
    PMA_COLUMN_INFO: str = _table_name("column_info")
    PMA_HISTORY: str = _table_name("history")
    PMA_RECENT: str = _table_name("recent")
    PMA_FAVORITE: str = _table_name("favorite")
    PMA_TABLE_UIPREFS: str = _table_name("table_uiprefs")
    PMA_TRACKING: str = _table_name("tracking")
    PMA_USERCONFIG: str = _table_name("userconfig")
    PMA_USERS: str = _table_name("users")
    PMA_USERGROUPS: str = _table_name("usergroups")
    PMA_NAVIGATIONHIDING: str = _table_name("navigationhiding")
    PMA_SAVEDSEARCHES: str = _table_name("savedsearches")
    PMA_CENTRAL_COLUMNS: str = _table_name("central_columns")
    PMA_DESIGNER_SETTINGS: str = _table_name("designer_settings")
    PMA_EXPORT_TEMPLATES: str = _table_name("export_templates")

    @classmethod
    def get_storage_config(cls) -> Dict[str, str]:
        """Get configuration storage settings keyed by configuration name."""
        storage = {"pmadb": cls.PMA_PMADB}
        for key, env_var in STORAGE_TABLE_ENV_VARS.items():
            storage[key] = getattr(cls, env_var)
        return storage

    @classmethod
    def get_log_level(cls) -> int:
        """Get the numeric log level, rejecting unknown level names."""
        level: Optional[int] = logging.getLevelName(cls.PMA_LOG_LEVEL)
        if not isinstance(level, int):
            raise ValueError(f"Invalid PMA_LOG_LEVEL: {cls.PMA_LOG_LEVEL}")
        return level

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and fail fast on invalid settings."""
        cls.get_log_level()
        if not cls.PMA_DATABASE_URL:
            raise ValueError("PMA_DATABASE_URL must be set")


# Global config instance
config = Config()
