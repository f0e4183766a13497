"""
Per-platform synchronization.

Copies one platform's gamelist.xml into the destination library, rewriting
its media references and copying the artwork when downloaded media is
available, and falling back to a plain copy when it is not.
"""

import logging
import time
from typing import Optional

from ..gamelist.transformer import GamelistTransformer
from ..media.artwork_syncer import ArtworkSyncer
from ..media.game_media import GameMediaResolver
from ..media.locator import MediaLocator
from ..media.media_types import ArtworkCategory, MediaCategory, GAMELIST_MIME_TYPE
from ..media.stale_cleaner import StaleMediaCleaner
from ..storage.handles import StorageNode
from ..storage.path_resolver import PathResolver
from .progress import (
    PlatformResult,
    STATUS_COPIED,
    STATUS_FAILED,
    STATUS_SKIPPED,
    STATUS_SYNCED,
)

logger = logging.getLogger(__name__)


class PlatformSynchronizer:
    """
    Synchronizes one platform directory.

    Workflow:
    1. Require <platform>/gamelist.xml, otherwise skip the platform
    2. Find or create <dest>/<platform>
    3. Clear stale files under <dest>/<platform>/media/{image,thumbnail}
    4. With downloaded media: transform the gamelist and copy artwork
    5. Without it (or if the transform fails): copy the gamelist unchanged

    sync_platform() never raises; every outcome lands in the PlatformResult.
    """

    def __init__(
        self,
        gamelist_filename: str = "gamelist.xml",
        replace_existing_media: bool = False,
        deterministic_matching: bool = False,
        path_resolver: Optional[PathResolver] = None,
        syncer: Optional[ArtworkSyncer] = None,
        cleaner: Optional[StaleMediaCleaner] = None
    ):
        """
        Initialize platform synchronizer.

        Args:
            gamelist_filename: Name of the gamelist file in each platform directory
            replace_existing_media: Drop source <image>/<thumbnail> elements
            deterministic_matching: Sort artwork candidates before prefix matching
            path_resolver: Resolver for child directories and references
            syncer: ArtworkSyncer used for copying artwork
            cleaner: StaleMediaCleaner used before each platform
        """
        self.gamelist_filename = gamelist_filename
        self.replace_existing_media = replace_existing_media
        self.path_resolver = path_resolver or PathResolver()
        self.locator = MediaLocator(deterministic=deterministic_matching)
        self.syncer = syncer or ArtworkSyncer(self.path_resolver)
        self.cleaner = cleaner or StaleMediaCleaner(PathResolver.MEDIA_DIRECTORY)

    def sync_platform(
        self,
        platform_dir: StorageNode,
        dest_root: StorageNode,
        media_root: Optional[StorageNode]
    ) -> PlatformResult:
        """
        Synchronize a single platform.

        Args:
            platform_dir: Source gamelists/<platform> directory
            dest_root: Destination library root
            media_root: Source downloaded_media directory (None if absent)

        Returns:
            PlatformResult describing what happened
        """
        result = PlatformResult(name=platform_dir.name, start_time=time.time())

        try:
            self._sync(platform_dir, dest_root, media_root, result)
        except Exception as e:
            logger.error(f"Error processing platform {result.name}: {e}", exc_info=True)
            result.status = STATUS_FAILED
            result.messages.append(f"Unexpected error: {e}")
        finally:
            result.end_time = time.time()

        return result

    def _sync(
        self,
        platform_dir: StorageNode,
        dest_root: StorageNode,
        media_root: Optional[StorageNode],
        result: PlatformResult
    ) -> None:
        name = result.name

        gamelist_file = self.path_resolver.find_file(platform_dir, self.gamelist_filename)
        if gamelist_file is None:
            logger.warning(f"No {self.gamelist_filename} found in {name}")
            result.status = STATUS_SKIPPED
            return

        logger.debug(f"Found {self.gamelist_filename} in {name}")

        dest_platform = self.path_resolver.find_or_create_directory(dest_root, name)
        if dest_platform is None:
            self._fail(result, f"Failed to create platform directory: {name}")
            return

        cleanup = self.cleaner.clear(dest_platform)
        result.stale_removed = cleanup.removed
        result.stale_failed = cleanup.failed
        if cleanup.failed:
            result.messages.append(f"{cleanup.failed} stale media files could not be deleted")

        try:
            with gamelist_file.open_read() as f:
                source = f.read()
        except OSError as e:
            self._fail(result, f"Failed to read {self.gamelist_filename}: {e}")
            return

        output = None
        media_platform = self.path_resolver.find_directory(media_root, name)
        if media_platform is not None:
            logger.debug(f"Found media directory for {name}")
            output = self._transform_with_media(source, dest_platform, media_platform, result)
        else:
            logger.warning(f"No media directory found for {name}")

        if output is None:
            content, status = source, STATUS_COPIED
        else:
            content, status = output, STATUS_SYNCED

        if not self._write_gamelist(dest_platform, content):
            self._fail(result, f"Failed to write {self.gamelist_filename} in {name}")
            return

        result.status = status
        logger.debug(
            f"  {name}: {status} ({result.games_processed} games, "
            f"{result.media_copied} media files)"
        )

    def _transform_with_media(
        self,
        source: bytes,
        dest_platform: StorageNode,
        media_platform: StorageNode,
        result: PlatformResult
    ) -> Optional[bytes]:
        """Copy artwork and rewrite the gamelist; None means fall back to a plain copy."""
        media = PathResolver.MEDIA_DIRECTORY
        destination_dirs = {}
        for category in MediaCategory:
            directory = self.path_resolver.resolve_directories(dest_platform, media, category.value)
            if directory is None:
                logger.error(f"Failed to create {media}/{category.value} directory")
                result.messages.append(f"Could not create {media}/{category.value}")
                return None
            destination_dirs[category] = directory

        artwork_dirs = {
            category: self.path_resolver.find_directory(media_platform, category.value)
            for category in ArtworkCategory
        }
        logger.debug(
            "Media directories - " + ", ".join(
                f"{category.value}: {directory is not None}"
                for category, directory in artwork_dirs.items()
            )
        )

        resolver = GameMediaResolver(
            artwork_dirs,
            destination_dirs,
            locator=self.locator,
            syncer=self.syncer
        )
        transformer = GamelistTransformer(
            resolver,
            replace_existing_media=self.replace_existing_media
        )
        output = transformer.transform(source)

        result.thumbnails_copied = resolver.stats[MediaCategory.THUMBNAIL.value]
        result.images_copied = resolver.stats[MediaCategory.IMAGE.value]
        result.copy_failures = resolver.stats['copy_failed']
        result.games_without_media = resolver.stats['no_media']
        result.games_processed = transformer.games_processed

        if result.copy_failures:
            result.messages.append(f"{result.copy_failures} artwork files could not be copied")

        if output is None:
            logger.error(f"Failed to parse and enrich gamelist for {result.name}, copying unmodified")
            result.messages.append("Gamelist transform failed; copied unmodified")

        return output

    def _write_gamelist(self, dest_platform: StorageNode, content: bytes) -> bool:
        """Replace the destination gamelist (delete, then create and write)."""
        existing = dest_platform.find(self.gamelist_filename)
        if existing is not None and not existing.delete():
            logger.warning(f"Failed to delete existing {self.gamelist_filename}")

        new_file = dest_platform.create_file(GAMELIST_MIME_TYPE, self.gamelist_filename)
        if new_file is None:
            logger.error(f"Failed to create {self.gamelist_filename} in {dest_platform.name}")
            return False

        try:
            with new_file.open_write() as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error writing {self.gamelist_filename}: {e}")
            return False

        logger.debug(f"Successfully wrote {self.gamelist_filename} to {dest_platform.name}")
        return True

    def _fail(self, result: PlatformResult, message: str) -> None:
        logger.error(message)
        result.status = STATUS_FAILED
        result.messages.append(message)
