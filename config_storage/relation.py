"""Discovery of the configuration storage features available to the control user."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.engine import Inspector
from sqlalchemy.exc import SQLAlchemyError

from config_storage.config import config
from config_storage.db.models import CONFIG_STORAGE_TABLES, build_config_storage_metadata
from config_storage.dbi import DatabaseInterface
from config_storage.exceptions import ConfigStorageDisabledException, StatementExecutionError
from config_storage.relation_parameters import RelationParameters

logger = logging.getLogger(__name__)


class Relation:
    """Resolves and caches which configuration storage features are usable."""

    def __init__(self, dbi: DatabaseInterface, settings: Optional[Mapping[str, str]] = None):
        """
        Initialize the relation component.

        Args:
            dbi: Database interface; only its control connection is used
            settings: Fixed storage settings (pmadb and table names). When
                omitted they are read from config on every lookup.
        """
        self.dbi = dbi
        self._settings = dict(settings) if settings is not None else None
        self._cache: Optional[RelationParameters] = None
        self._cache_settings: Optional[Dict[str, str]] = None

    def _current_settings(self) -> Dict[str, str]:
        if self._settings is not None:
            return dict(self._settings)
        return config.get_storage_config()

    def get_relation_parameters(self) -> RelationParameters:
        """
        Get the resolved feature registry.

        The registry is probed once and reused until the storage settings
        change or invalidate() is called.
        """
        settings = self._current_settings()
        if self._cache is None or self._cache_settings != settings:
            self._cache = self.check_relations_param(settings)
            self._cache_settings = settings
            logger.info(
                f"Configuration storage resolved (db={self._cache.db}, control_user={self.dbi.control_user}, "
                f"features={self._cache.present_features()})"
            )
        return self._cache

    def resolve(self) -> RelationParameters:
        return self.get_relation_parameters()

    def invalidate(self) -> None:
        """Drop the cached registry so the next lookup probes again."""
        self._cache = None
        self._cache_settings = None

    def is_storage_database(self, db: str) -> bool:
        """Whether db is the configured configuration storage schema."""
        pmadb = (self._current_settings().get("pmadb") or "").strip()
        return bool(pmadb) and db == pmadb

    def check_relations_param(self, settings: Optional[Mapping[str, str]] = None) -> RelationParameters:
        """
        Probe the control connection for the configured storage tables.

        A missing schema, a missing table or a failing probe never raises; it
        only leaves the affected features (or the whole storage) absent.

        Args:
            settings: Storage settings to probe; defaults to the current ones

        Returns:
            Freshly built RelationParameters
        """
        settings = dict(settings) if settings is not None else self._current_settings()
        user = self.dbi.user
        pmadb = (settings.get("pmadb") or "").strip()
        if not pmadb:
            logger.debug("No configuration storage database configured")
            return RelationParameters(user=user)

        try:
            inspector = self.dbi.inspect_control()
            existing = set(inspector.get_table_names(schema=pmadb))
        except SQLAlchemyError as e:
            logger.warning(f"Configuration storage database {pmadb!r} is not accessible: {e}")
            return RelationParameters(user=user)

        found: Dict[str, str] = {}
        for key in CONFIG_STORAGE_TABLES:
            name = settings.get(key) or ""
            if name and name in existing:
                found[key] = name
            elif name:
                logger.debug(f"Configuration storage table {name!r} not found in {pmadb!r}")

        params: Dict[str, Any] = dict(found)
        params["user"] = user
        params["db"] = pmadb
        params["bookmark"] = found.get("bookmarktable")
        params.update(self._work_flags(found, inspector, pmadb))

        return RelationParameters.from_dict(params)

    def _work_flags(self, found: Dict[str, str], inspector: Inspector, pmadb: str) -> Dict[str, bool]:
        present = set(found)
        flags = {
            "bookmarkwork": "bookmarktable" in present,
            "relwork": "relation" in present,
            "displaywork": {"relation", "table_info"} <= present,
            "pdfwork": {"pdf_pages", "table_coords"} <= present,
            "commwork": "column_info" in present,
            "mimework": False,
            "historywork": "history" in present,
            "recentwork": "recent" in present,
            "favoritework": "favorite" in present,
            "uiprefswork": "table_uiprefs" in present,
            "trackingwork": "tracking" in present,
            "userconfigwork": "userconfig" in present,
            "menuswork": {"users", "usergroups"} <= present,
            "navwork": "navigationhiding" in present,
            "savedsearcheswork": "savedsearches" in present,
            "centralcolumnswork": "central_columns" in present,
            "designersettingswork": "designer_settings" in present,
            "exporttemplateswork": "export_templates" in present,
        }
        if flags["commwork"]:
            flags["mimework"] = self._supports_transformations(inspector, pmadb, found["column_info"])
        return flags

    @staticmethod
    def _supports_transformations(inspector: Inspector, pmadb: str, column_info: str) -> bool:
        """Check that column_info has the input_transformation column."""
        try:
            columns = {column["name"] for column in inspector.get_columns(column_info, schema=pmadb)}
        except SQLAlchemyError as e:
            logger.warning(f"Could not inspect {pmadb}.{column_info}: {e}")
            return False
        return "input_transformation" in columns

    def create_missing_tables(self) -> List[str]:
        """
        Create the configured storage tables missing from pmadb.

        Returns:
            Names of the tables that were created

        Raises:
            ConfigStorageDisabledException: If no pmadb is configured
            StatementExecutionError: If listing or creating tables fails
        """
        settings = self._current_settings()
        pmadb = (settings.get("pmadb") or "").strip()
        if not pmadb:
            raise ConfigStorageDisabledException("Configuration storage database is not configured")

        try:
            existing = set(self.dbi.inspect_control().get_table_names(schema=pmadb))
        except SQLAlchemyError as e:
            raise StatementExecutionError(
                f"SHOW TABLES FROM {self.dbi.backquote(pmadb)}", getattr(e, "orig", None) or e
            ) from e

        metadata = build_config_storage_metadata(pmadb, settings)
        missing = [table for table in metadata.sorted_tables if table.name not in existing]
        if missing:
            self.dbi.create_tables_as_control_user(metadata, missing)
            logger.info(f"Created configuration storage tables in {pmadb!r}: {[t.name for t in missing]}")

        self.invalidate()
        return [table.name for table in missing]
