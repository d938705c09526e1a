"""Resolved set of configuration storage features."""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from config_storage.features import (
    BookmarkFeature,
    BrowserTransformationFeature,
    CentralColumnsFeature,
    ColumnCommentsFeature,
    ConfigurableMenusFeature,
    DatabaseDesignerSettingsFeature,
    DisplayFeature,
    ExportTemplatesFeature,
    FavoriteTablesFeature,
    NavigationItemsHidingFeature,
    PdfFeature,
    RecentlyUsedTablesFeature,
    RelationFeature,
    SavedQueryByExampleSearchesFeature,
    SqlHistoryFeature,
    TrackingFeature,
    UiPreferencesFeature,
    UserPreferencesFeature,
)

# slot -> (feature class, work flag, ((feature attribute, parameter key), ...))
FEATURE_SLOTS: Dict[str, Tuple[Type, str, Tuple[Tuple[str, str], ...]]] = {
    "bookmark_feature": (BookmarkFeature, "bookmarkwork", (("bookmark", "bookmark"),)),
    "browser_transformation_feature": (BrowserTransformationFeature, "mimework", (("column_info", "column_info"),)),
    "central_columns_feature": (CentralColumnsFeature, "centralcolumnswork", (("central_columns", "central_columns"),)),
    "column_comments_feature": (ColumnCommentsFeature, "commwork", (("column_info", "column_info"),)),
    "configurable_menus_feature": (
        ConfigurableMenusFeature, "menuswork", (("user_groups", "usergroups"), ("users", "users")),
    ),
    "database_designer_settings_feature": (
        DatabaseDesignerSettingsFeature, "designersettingswork", (("designer_settings", "designer_settings"),),
    ),
    "display_feature": (DisplayFeature, "displaywork", (("relation", "relation"), ("table_info", "table_info"))),
    "export_templates_feature": (ExportTemplatesFeature, "exporttemplateswork", (("export_templates", "export_templates"),)),
    "favorite_tables_feature": (FavoriteTablesFeature, "favoritework", (("favorite", "favorite"),)),
    "navigation_items_hiding_feature": (
        NavigationItemsHidingFeature, "navwork", (("navigation_hiding", "navigationhiding"),),
    ),
    "pdf_feature": (PdfFeature, "pdfwork", (("pdf_pages", "pdf_pages"), ("table_coords", "table_coords"))),
    "recently_used_tables_feature": (RecentlyUsedTablesFeature, "recentwork", (("recent", "recent"),)),
    "relation_feature": (RelationFeature, "relwork", (("relation", "relation"),)),
    "saved_query_by_example_searches_feature": (
        SavedQueryByExampleSearchesFeature, "savedsearcheswork", (("saved_searches", "savedsearches"),),
    ),
    "sql_history_feature": (SqlHistoryFeature, "historywork", (("history", "history"),)),
    "tracking_feature": (TrackingFeature, "trackingwork", (("tracking", "tracking"),)),
    "ui_preferences_feature": (UiPreferencesFeature, "uiprefswork", (("table_uiprefs", "table_uiprefs"),)),
    "user_preferences_feature": (UserPreferencesFeature, "userconfigwork", (("user_config", "userconfig"),)),
}


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value != "":
        return value
    return None


@dataclass(frozen=True)
class RelationParameters:
    """
    Which configuration storage features are available.

    Every feature slot is either a fully populated descriptor or None. The
    instance is never mutated after it is resolved; a settings change produces
    a new instance.
    """
    user: Optional[str] = None
    db: Optional[str] = None
    bookmark_feature: Optional[BookmarkFeature] = None
    browser_transformation_feature: Optional[BrowserTransformationFeature] = None
    central_columns_feature: Optional[CentralColumnsFeature] = None
    column_comments_feature: Optional[ColumnCommentsFeature] = None
    configurable_menus_feature: Optional[ConfigurableMenusFeature] = None
    database_designer_settings_feature: Optional[DatabaseDesignerSettingsFeature] = None
    display_feature: Optional[DisplayFeature] = None
    export_templates_feature: Optional[ExportTemplatesFeature] = None
    favorite_tables_feature: Optional[FavoriteTablesFeature] = None
    navigation_items_hiding_feature: Optional[NavigationItemsHidingFeature] = None
    pdf_feature: Optional[PdfFeature] = None
    recently_used_tables_feature: Optional[RecentlyUsedTablesFeature] = None
    relation_feature: Optional[RelationFeature] = None
    saved_query_by_example_searches_feature: Optional[SavedQueryByExampleSearchesFeature] = None
    sql_history_feature: Optional[SqlHistoryFeature] = None
    tracking_feature: Optional[TrackingFeature] = None
    ui_preferences_feature: Optional[UiPreferencesFeature] = None
    user_preferences_feature: Optional[UserPreferencesFeature] = None

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> "RelationParameters":
        """
        Build the registry from probe results.

        Args:
            params: "user", "db", the "*work" flags and the table names

        Returns:
            RelationParameters with a feature set only when its work flag is
            true, all its table names are non-empty and db is set
        """
        user = _non_empty_str(params.get("user"))
        db = _non_empty_str(params.get("db"))

        features: Dict[str, Any] = {}
        for slot, (feature_class, work_flag, tables) in FEATURE_SLOTS.items():
            if db is None or not params.get(work_flag):
                continue
            names = {attr: _non_empty_str(params.get(key)) for attr, key in tables}
            if None in names.values():
                continue
            features[slot] = feature_class(database=db, **names)

        return cls(user=user, db=db, **features)

    @property
    def is_enabled(self) -> bool:
        """Whether configuration storage is configured at all."""
        return self.db is not None

    def feature_map(self) -> Dict[str, bool]:
        """Get feature name -> present, e.g. {"bookmark": True}."""
        return {
            slot[: -len("_feature")]: getattr(self, slot) is not None
            for slot in FEATURE_SLOTS
        }

    def present_features(self) -> List[str]:
        """Get names of the present features."""
        return [name for name, present in self.feature_map().items() if present]

    def has_all_features(self) -> bool:
        return all(getattr(self, f.name) is not None for f in fields(self) if f.name.endswith("_feature"))
