"""Optional configuration storage features and the tables backing them."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BookmarkFeature:
    """Saved SQL bookmarks."""
    database: str
    bookmark: str


@dataclass(frozen=True)
class BrowserTransformationFeature:
    """Browser and input transformations stored alongside column comments."""
    database: str
    column_info: str


@dataclass(frozen=True)
class CentralColumnsFeature:
    """Central list of columns per database."""
    database: str
    central_columns: str


@dataclass(frozen=True)
class ColumnCommentsFeature:
    """Column comments kept outside the server's own metadata."""
    database: str
    column_info: str


@dataclass(frozen=True)
class ConfigurableMenusFeature:
    """User groups restricting visible menu tabs."""
    database: str
    user_groups: str
    users: str


@dataclass(frozen=True)
class DatabaseDesignerSettingsFeature:
    """Per-user designer settings."""
    database: str
    designer_settings: str


@dataclass(frozen=True)
class DisplayFeature:
    """Display field per table, used when browsing foreign keys."""
    database: str
    relation: str
    table_info: str


@dataclass(frozen=True)
class ExportTemplatesFeature:
    """Saved export templates."""
    database: str
    export_templates: str


@dataclass(frozen=True)
class FavoriteTablesFeature:
    """Favorite tables per user."""
    database: str
    favorite: str


@dataclass(frozen=True)
class NavigationItemsHidingFeature:
    """Items hidden from the navigation tree."""
    database: str
    navigation_hiding: str


@dataclass(frozen=True)
class PdfFeature:
    """PDF schema pages and table coordinates on them."""
    database: str
    pdf_pages: str
    table_coords: str


@dataclass(frozen=True)
class RecentlyUsedTablesFeature:
    """Recently used tables per user."""
    database: str
    recent: str


@dataclass(frozen=True)
class RelationFeature:
    """Internal relations between columns (master -> foreign)."""
    database: str
    relation: str


@dataclass(frozen=True)
class SavedQueryByExampleSearchesFeature:
    """Saved query-by-example searches."""
    database: str
    saved_searches: str


@dataclass(frozen=True)
class SqlHistoryFeature:
    """Per-user SQL query history."""
    database: str
    history: str


@dataclass(frozen=True)
class TrackingFeature:
    """Tracked schema and data changes."""
    database: str
    tracking: str


@dataclass(frozen=True)
class UiPreferencesFeature:
    """Per-user table UI preferences (sorting, column order, visibility)."""
    database: str
    table_uiprefs: str


@dataclass(frozen=True)
class UserPreferencesFeature:
    """Stored user preferences."""
    database: str
    user_config: str
