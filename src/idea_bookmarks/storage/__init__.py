"""Persistence for preferences and user-curated bookmarks."""

from .preferences import PreferencesStore
from .saved import SavedBookmark, SavedBookmarkStore, guess_project_name

__all__ = ["PreferencesStore", "SavedBookmark", "SavedBookmarkStore", "guess_project_name"]
