"""
Path resolution for library handles.

Maps logical child names to handles and builds the relative media
references written into gamelist.xml.
"""

import logging
from typing import Optional

from .handles import StorageNode

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Resolves child directories and files under a StorageNode.

    The front-end expects media paths relative to the gamelist directory:
        ./media/image/<filename>
        ./media/thumbnail/<filename>
    """

    MEDIA_DIRECTORY = "media"

    def find_directory(
        self,
        parent: Optional[StorageNode],
        name: str
    ) -> Optional[StorageNode]:
        """
        Find an existing child directory.

        Args:
            parent: Directory to search (None yields None)
            name: Child directory name

        Returns:
            Child handle, or None if missing or not a directory
        """
        if parent is None:
            return None

        child = parent.find(name)
        if child is None or not child.is_directory():
            return None
        return child

    def find_file(
        self,
        parent: Optional[StorageNode],
        name: str
    ) -> Optional[StorageNode]:
        """Find an existing child file, or None."""
        if parent is None:
            return None

        child = parent.find(name)
        if child is None or not child.is_file():
            return None
        return child

    def find_or_create_directory(
        self,
        parent: StorageNode,
        name: str
    ) -> Optional[StorageNode]:
        """
        Find a child directory, creating it if it does not exist yet.

        Args:
            parent: Parent directory
            name: Child directory name

        Returns:
            Child handle, or None if it could not be created
        """
        existing = parent.find(name)
        if existing is not None:
            if existing.is_directory():
                return existing
            logger.error(f"Cannot create directory {name}: a file with that name exists")
            return None

        logger.debug(f"Creating directory: {name}")
        created = parent.create_directory(name)
        if created is None:
            logger.error(f"Failed to create directory: {name}")
        return created

    def resolve_directories(
        self,
        parent: StorageNode,
        *names: str
    ) -> Optional[StorageNode]:
        """
        Walk a nested directory chain, creating missing levels.

        Example:
            >>> resolver.resolve_directories(platform_dir, 'media', 'image')

        Returns:
            Handle of the deepest directory, or None on the first failure
        """
        current = parent
        for name in names:
            current = self.find_or_create_directory(current, name)
            if current is None:
                return None
        return current

    def media_reference(self, category: str, filename: str) -> str:
        """
        Build the gamelist.xml reference for a media file.

        Args:
            category: Destination media category ('image' or 'thumbnail')
            filename: Media file name

        Returns:
            Relative path string (e.g., "./media/image/Mario.jpg")
        """
        return f"./{self.MEDIA_DIRECTORY}/{category}/{filename}"
