"""
Artwork lookup by game key.

Artwork files in downloaded_media are named after the ROM they belong to
(e.g. "Mario.png" for "Mario.zip"), so a match is any file whose name
starts with the game key.
"""

import logging
from typing import Optional

from ..storage.handles import StorageNode

logger = logging.getLogger(__name__)


class MediaLocator:
    """
    Finds the artwork file for a game key in one artwork directory.

    Matching is an ordinal, case-sensitive prefix test. When several files
    share the prefix (e.g. "Mario.png" and "Mario Kart.png" for key "Mario")
    the first one in directory-listing order wins. Listing order depends on
    the storage backend and is not guaranteed to be stable; pass
    deterministic=True to sort candidates by name first.
    """

    def __init__(self, deterministic: bool = False):
        """
        Initialize media locator.

        Args:
            deterministic: Break prefix ties lexicographically instead of
                           by listing order
        """
        self.deterministic = deterministic

    def find(self, directory: Optional[StorageNode], key: str) -> Optional[StorageNode]:
        """
        Find the first file whose name starts with key.

        Args:
            directory: Artwork directory (None means the category is absent)
            key: Game key derived from the ROM path

        Returns:
            Matching file handle or None
        """
        if directory is None:
            return None

        try:
            children = directory.list_children()
        except OSError as e:
            logger.error(f"Error listing {directory.name} while looking for {key}: {e}")
            return None

        if self.deterministic:
            children = sorted(children, key=lambda child: child.name)

        logger.debug(f"Searching {len(children)} files in {directory.name} for: {key}")

        for child in children:
            if child.name.startswith(key) and child.is_file():
                logger.debug(f"Match: {child.name}")
                return child

        sample = ", ".join(child.name for child in children[:3])
        logger.debug(f"No match for {key} in {directory.name}. First files: {sample}")
        return None
