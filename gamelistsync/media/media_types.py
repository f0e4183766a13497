"""
Media category definitions for gamelistsync.

Maps ES-DE downloaded_media directories to the destination media folders
and the gamelist.xml tags that reference them.
"""

from enum import Enum
from typing import Dict, List


class ArtworkCategory(Enum):
    """
    Source artwork directories read from downloaded_media/<platform>/.
    """
    COVERS = 'covers'
    FANART = 'fanart'
    SCREENSHOTS = 'screenshots'


class MediaCategory(Enum):
    """
    Destination media folders under <platform>/media/.

    The value doubles as the gamelist.xml tag name.
    """
    THUMBNAIL = 'thumbnail'
    IMAGE = 'image'


# Source directories tried for each destination category, in priority order.
# Screenshots are only consulted when no fanart matched.
MEDIA_SOURCES: Dict[MediaCategory, List[ArtworkCategory]] = {
    MediaCategory.THUMBNAIL: [ArtworkCategory.COVERS],
    MediaCategory.IMAGE: [ArtworkCategory.FANART, ArtworkCategory.SCREENSHOTS],
}

# Order in which media elements are appended to a <game> entry
MEDIA_TAG_ORDER: List[MediaCategory] = [MediaCategory.THUMBNAIL, MediaCategory.IMAGE]

MEDIA_TAGS = frozenset(category.value for category in MediaCategory)

# Content types used when creating destination files
ARTWORK_MIME_TYPE = 'image/*'
GAMELIST_MIME_TYPE = 'application/xml'


def get_sources_for_category(category: MediaCategory) -> List[ArtworkCategory]:
    """
    Get the artwork directories feeding a destination category.

    Args:
        category: Destination media category

    Returns:
        Artwork categories in fallback order

    Raises:
        ValueError: If category is not supported
    """
    if category not in MEDIA_SOURCES:
        raise ValueError(f"Unsupported media category: {category}")

    return MEDIA_SOURCES[category]
