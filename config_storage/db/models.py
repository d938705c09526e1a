"""Table definitions for the configuration storage schema."""

from typing import Callable, Dict, List, Mapping, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

# Configuration names of every auxiliary table, in canonical order
CONFIG_STORAGE_TABLES: List[str] = [
    "bookmarktable",
    "relation",
    "table_info",
    "table_coords",
    "pdf_pages",
    "column_info",
    "history",
    "recent",
    "favorite",
    "table_uiprefs",
    "tracking",
    "userconfig",
    "users",
    "usergroups",
    "navigationhiding",
    "savedsearches",
    "central_columns",
    "designer_settings",
    "export_templates",
]


def _bookmark(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("dbase", String(255), nullable=False, server_default=""),
        Column("user", String(255), nullable=False, server_default=""),
        Column("label", String(255), nullable=False, server_default=""),
        Column("query", Text, nullable=False),
        schema=schema,
        comment="Bookmarks",
    )


def _relation(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("master_db", String(64), nullable=False, server_default=""),
        Column("master_table", String(64), nullable=False, server_default=""),
        Column("master_field", String(64), nullable=False, server_default=""),
        Column("foreign_db", String(64), nullable=False, server_default=""),
        Column("foreign_table", String(64), nullable=False, server_default=""),
        Column("foreign_field", String(64), nullable=False, server_default=""),
        PrimaryKeyConstraint("master_db", "master_table", "master_field"),
        schema=schema,
        comment="Relation table",
    )


def _table_info(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("db_name", String(64), nullable=False, server_default=""),
        Column("table_name", String(64), nullable=False, server_default=""),
        Column("display_field", String(64), nullable=False, server_default=""),
        PrimaryKeyConstraint("db_name", "table_name"),
        schema=schema,
        comment="Table information for phpMyAdmin",
    )


def _table_coords(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("db_name", String(64), nullable=False, server_default=""),
        Column("table_name", String(64), nullable=False, server_default=""),
        Column("pdf_page_number", Integer, nullable=False, server_default="0"),
        Column("x", Float, nullable=False, server_default="0"),
        Column("y", Float, nullable=False, server_default="0"),
        PrimaryKeyConstraint("db_name", "table_name", "pdf_page_number"),
        schema=schema,
        comment="Table coordinates for phpMyAdmin PDF output",
    )


def _pdf_pages(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("db_name", String(64), nullable=False, server_default=""),
        Column("page_nr", Integer, primary_key=True, autoincrement=True),
        Column("page_descr", String(50), nullable=False, server_default=""),
        schema=schema,
        comment="PDF relation pages for phpMyAdmin",
    )


def _column_info(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("db_name", String(64), nullable=False, server_default=""),
        Column("table_name", String(64), nullable=False, server_default=""),
        Column("column_name", String(64), nullable=False, server_default=""),
        Column("comment", String(255), nullable=False, server_default=""),
        Column("mimetype", String(255), nullable=False, server_default=""),
        Column("transformation", String(255), nullable=False, server_default=""),
        Column("transformation_options", String(255), nullable=False, server_default=""),
        Column("input_transformation", String(255), nullable=False, server_default=""),
        Column("input_transformation_options", String(255), nullable=False, server_default=""),
        UniqueConstraint("db_name", "table_name", "column_name"),
        schema=schema,
        comment="Column information for phpMyAdmin",
    )


def _history(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("username", String(64), nullable=False, server_default=""),
        Column("db", String(64), nullable=False, server_default=""),
        Column("table", String(64), nullable=False, server_default=""),
        Column("timevalue", DateTime, nullable=False, server_default=func.current_timestamp()),
        Column("sqlquery", Text, nullable=False),
        schema=schema,
        comment="SQL history for phpMyAdmin",
    )


def _username_keyed(comment: str, data_column: str) -> Callable[[MetaData, str, Optional[str]], Table]:
    def build(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
        return Table(
            name, metadata,
            Column("username", String(64), primary_key=True),
            Column(data_column, Text, nullable=False),
            schema=schema,
            comment=comment,
        )
    return build


def _table_uiprefs(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("username", String(64), nullable=False),
        Column("db_name", String(64), nullable=False),
        Column("table_name", String(64), nullable=False),
        Column("prefs", Text, nullable=False),
        Column("last_update", DateTime, nullable=False, server_default=func.current_timestamp()),
        PrimaryKeyConstraint("username", "db_name", "table_name"),
        schema=schema,
        comment="Tables' UI preferences",
    )


def _tracking(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("db_name", String(64), nullable=False),
        Column("table_name", String(64), nullable=False),
        Column("version", Integer, nullable=False),
        Column("date_created", DateTime, nullable=False),
        Column("date_updated", DateTime, nullable=False),
        Column("schema_snapshot", Text, nullable=False),
        Column("schema_sql", Text),
        Column("data_sql", Text),
        Column("tracking", String(255)),
        Column("tracking_active", Integer, nullable=False, server_default="1"),
        PrimaryKeyConstraint("db_name", "table_name", "version"),
        schema=schema,
        comment="Database changes tracking for phpMyAdmin",
    )


def _userconfig(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("username", String(64), primary_key=True),
        Column("timevalue", DateTime, nullable=False, server_default=func.current_timestamp()),
        Column("config_data", Text, nullable=False),
        schema=schema,
        comment="User preferences storage for phpMyAdmin",
    )


def _users(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("username", String(64), nullable=False),
        Column("usergroup", String(64), nullable=False),
        PrimaryKeyConstraint("username", "usergroup"),
        schema=schema,
        comment="Users and their assignments to user groups",
    )


def _usergroups(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("usergroup", String(64), nullable=False),
        Column("tab", String(64), nullable=False),
        Column("allowed", String(1), nullable=False, server_default="N"),
        PrimaryKeyConstraint("usergroup", "tab", "allowed"),
        schema=schema,
        comment="User groups with configured menu items",
    )


def _navigationhiding(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("username", String(64), nullable=False),
        Column("item_name", String(64), nullable=False),
        Column("item_type", String(64), nullable=False),
        Column("db_name", String(64), nullable=False),
        Column("table_name", String(64), nullable=False),
        PrimaryKeyConstraint("username", "item_name", "item_type", "db_name", "table_name"),
        schema=schema,
        comment="Hidden items of navigation tree",
    )


def _savedsearches(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("username", String(64), nullable=False, server_default=""),
        Column("db_name", String(64), nullable=False, server_default=""),
        Column("search_name", String(64), nullable=False, server_default=""),
        Column("search_data", Text, nullable=False),
        UniqueConstraint("username", "db_name", "search_name"),
        schema=schema,
        comment="Saved searches",
    )


def _central_columns(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("db_name", String(64), nullable=False),
        Column("col_name", String(64), nullable=False),
        Column("col_type", String(64), nullable=False),
        Column("col_length", Text),
        Column("col_collation", String(64), nullable=False),
        Column("col_isNull", Boolean, nullable=False),
        Column("col_extra", String(255), server_default=""),
        Column("col_default", Text),
        PrimaryKeyConstraint("db_name", "col_name"),
        schema=schema,
        comment="Central list of columns",
    )


def _export_templates(metadata: MetaData, name: str, schema: Optional[str]) -> Table:
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("username", String(64), nullable=False),
        Column("export_type", String(10), nullable=False),
        Column("template_name", String(64), nullable=False),
        Column("template_data", Text, nullable=False),
        UniqueConstraint("username", "export_type", "template_name"),
        schema=schema,
        comment="Saved export templates",
    )


TABLE_BUILDERS: Dict[str, Callable[[MetaData, str, Optional[str]], Table]] = {
    "bookmarktable": _bookmark,
    "relation": _relation,
    "table_info": _table_info,
    "table_coords": _table_coords,
    "pdf_pages": _pdf_pages,
    "column_info": _column_info,
    "history": _history,
    "recent": _username_keyed("Recently accessed tables", "tables"),
    "favorite": _username_keyed("Favorite tables", "tables"),
    "table_uiprefs": _table_uiprefs,
    "tracking": _tracking,
    "userconfig": _userconfig,
    "users": _users,
    "usergroups": _usergroups,
    "navigationhiding": _navigationhiding,
    "savedsearches": _savedsearches,
    "central_columns": _central_columns,
    "designer_settings": _username_keyed("Settings related to Designer", "settings_data"),
    "export_templates": _export_templates,
}


def build_config_storage_metadata(schema: Optional[str], names: Mapping[str, str]) -> MetaData:
    """
    Build table definitions for the configuration storage schema.

    Args:
        schema: Name of the configuration storage schema (pmadb)
        names: Configuration name -> configured table name; empty names are skipped

    Returns:
        MetaData holding one Table per configured auxiliary table
    """
    metadata = MetaData()
    for key in CONFIG_STORAGE_TABLES:
        name = names.get(key) or ""
        if name:
            TABLE_BUILDERS[key](metadata, name, schema)
    return metadata
