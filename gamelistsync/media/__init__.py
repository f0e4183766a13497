"""
Media package for gamelistsync.

Handles locating, copying and cleaning up game artwork.
"""

from .media_types import (
    ArtworkCategory,
    MediaCategory,
    MEDIA_SOURCES,
    MEDIA_TAGS,
    get_sources_for_category,
)
from .locator import MediaLocator
from .artwork_syncer import ArtworkSyncer
from .stale_cleaner import StaleMediaCleaner, CleanupResult
from .game_media import GameMediaResolver, MediaReference

__all__ = [
    "ArtworkCategory",
    "MediaCategory",
    "MEDIA_SOURCES",
    "MEDIA_TAGS",
    "get_sources_for_category",
    "MediaLocator",
    "ArtworkSyncer",
    "StaleMediaCleaner",
    "CleanupResult",
    "GameMediaResolver",
    "MediaReference",
]
