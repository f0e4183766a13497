"""
Artwork copying into the destination media layout.
"""

import logging
from typing import Optional

from ..storage.handles import StorageNode
from ..storage.path_resolver import PathResolver
from .media_types import ARTWORK_MIME_TYPE

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class ArtworkSyncer:
    """
    Copies one artwork file into a destination media directory.

    Features:
    - Replace semantics: an existing file with the same name is deleted first
    - Empty source files count as failures
    - Partially written files are removed on failure
    """

    def __init__(self, path_resolver: Optional[PathResolver] = None):
        """
        Initialize artwork syncer.

        Args:
            path_resolver: Resolver used to build gamelist references
        """
        self.path_resolver = path_resolver or PathResolver()

    def copy_asset(
        self,
        source: StorageNode,
        destination_dir: StorageNode,
        category: str
    ) -> Optional[str]:
        """
        Copy an artwork file and return its gamelist reference.

        Args:
            source: Artwork file to copy
            destination_dir: media/image or media/thumbnail directory
            category: Destination media category ('image' or 'thumbnail')

        Returns:
            Relative reference (e.g., "./media/image/Mario.jpg"), or None if
            the copy failed

        Example:
            ref = syncer.copy_asset(fanart, image_dir, 'image')
            if ref is None:
                print("Copy failed")
        """
        filename = source.name
        if not filename:
            logger.warning("Source artwork file has no name")
            return None

        existing = destination_dir.find(filename)
        if existing is not None and not existing.delete():
            logger.warning(f"Failed to delete existing file: {filename}")

        new_file = destination_dir.create_file(ARTWORK_MIME_TYPE, filename)
        if new_file is None:
            logger.error(f"Failed to create file: {filename} in {destination_dir.name}")
            return None

        try:
            bytes_copied = self._copy_bytes(source, new_file)
        except OSError as e:
            logger.error(f"Error copying {filename} to {category}: {e}")
            bytes_copied = 0

        if bytes_copied <= 0:
            logger.error(f"Failed to copy file content: {filename}")
            if not new_file.delete():
                logger.warning(f"Failed to remove partial file: {filename}")
            return None

        logger.debug(f"Copied {filename} ({bytes_copied} bytes) to {category}")
        return self.path_resolver.media_reference(category, new_file.name)

    def _copy_bytes(self, source: StorageNode, destination: StorageNode) -> int:
        """Stream source into destination, returning the byte count."""
        total = 0
        with source.open_read() as reader, destination.open_write() as writer:
            while True:
                chunk = reader.read(CHUNK_SIZE)
                if not chunk:
                    break
                writer.write(chunk)
                total += len(chunk)
            writer.flush()
        return total
