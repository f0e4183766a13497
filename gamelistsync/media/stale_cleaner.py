"""
Stale Media Cleaner

Empties the destination media folders before a platform is re-synced so
artwork from a previous run cannot outlive the games that referenced it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..storage.handles import StorageNode
from .media_types import MediaCategory

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    """Counts from one cleanup pass."""
    removed: int = 0
    failed: int = 0


class StaleMediaCleaner:
    """
    Deletes every file under <platform>/media/image and media/thumbnail.

    The directories themselves are kept. Deletion failures are logged and
    counted but never abort the run.
    """

    def __init__(self, media_directory: str = "media"):
        """
        Initialize stale media cleaner.

        Args:
            media_directory: Name of the media folder inside a platform directory
        """
        self.media_directory = media_directory

    def clear(self, platform_dir: StorageNode) -> CleanupResult:
        """
        Clear stale media files for one destination platform.

        Args:
            platform_dir: Destination platform directory

        Returns:
            CleanupResult with removed/failed counts
        """
        result = CleanupResult()

        try:
            media_dir = platform_dir.find(self.media_directory)
            if media_dir is None:
                return result

            logger.debug(f"Clearing existing media folders in {platform_dir.name}")

            for category in MediaCategory:
                self._clear_category(media_dir.find(category.value), category, result)
        except OSError as e:
            logger.error(f"Error clearing media folders in {platform_dir.name}: {e}")
            result.failed += 1

        if result.removed:
            logger.info(f"  Removed {result.removed} stale media files")

        return result

    def _clear_category(
        self,
        category_dir: Optional[StorageNode],
        category: MediaCategory,
        result: CleanupResult
    ) -> None:
        if category_dir is None or not category_dir.is_directory():
            return

        for child in category_dir.list_children():
            if not child.is_file():
                continue
            if child.delete():
                result.removed += 1
            else:
                result.failed += 1
                logger.warning(f"Failed to delete {category.value}: {child.name}")
