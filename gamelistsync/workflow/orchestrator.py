"""
Workflow orchestrator for gamelistsync.

Coordinates one full synchronization pass:
1. Resolve the source catalog root and the destination root
2. Locate the optional downloaded_media root
3. Sync every platform directory, one at a time
4. Report the outcome
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..storage.handles import StorageNode
from ..storage.path_resolver import PathResolver
from ..ui.events import (
    PlatformCompletedEvent,
    PlatformStartedEvent,
    SyncCompletedEvent,
    SyncStartedEvent,
)
from .platform_sync import PlatformSynchronizer
from .progress import (
    PlatformResult,
    SyncReport,
    STATUS_COPIED,
    STATUS_FAILED,
    STATUS_SKIPPED,
    STATUS_SYNCED,
    current_platform,
)

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Orchestrates a synchronization pass over all platforms.

    A missing catalog root or destination root aborts the pass. Everything
    else degrades per platform: a failing platform is logged and recorded,
    and the remaining platforms still run.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        platform_synchronizer: Optional[PlatformSynchronizer] = None,
        event_bus: Optional[Any] = None
    ):
        """
        Initialize sync orchestrator.

        Args:
            config: Configuration dictionary (uses the 'sync' section)
            platform_synchronizer: Synchronizer for single platforms
            event_bus: Optional EventBus for progress events
        """
        sync_config = (config or {}).get('sync', {})

        self.catalog_directory = sync_config.get('catalog_directory', 'gamelists')
        self.media_directory = sync_config.get('media_directory', 'downloaded_media')
        self.platform_filter: List[str] = list(sync_config.get('platforms') or [])

        self.platform_synchronizer = platform_synchronizer or PlatformSynchronizer(
            gamelist_filename=sync_config.get('gamelist_filename', 'gamelist.xml'),
            replace_existing_media=sync_config.get('replace_existing_media', False),
            deterministic_matching=sync_config.get('deterministic_matching', False)
        )
        self.path_resolver = PathResolver()
        self.event_bus = event_bus

    async def synchronize(
        self,
        source_root: Optional[StorageNode],
        dest_root: Optional[StorageNode]
    ) -> SyncReport:
        """
        Run one full synchronization pass.

        Args:
            source_root: ES-DE root containing gamelists/ and downloaded_media/
            dest_root: Destination root with one subdirectory per platform

        Returns:
            SyncReport with one PlatformResult per platform directory
        """
        report = SyncReport()

        catalog_root = self.path_resolver.find_directory(source_root, self.catalog_directory)
        if catalog_root is None:
            return await self._abort(report, f"{self.catalog_directory} directory not found in source")

        if dest_root is None or not dest_root.is_directory():
            return await self._abort(report, "Failed to open destination directory")

        media_root = self.path_resolver.find_directory(source_root, self.media_directory)
        if media_root is None:
            logger.warning(f"{self.media_directory} directory not found in source")

        try:
            platform_dirs = await asyncio.to_thread(self._list_platforms, catalog_root)
        except OSError as e:
            return await self._abort(report, f"Failed to list {self.catalog_directory}: {e}")

        total = len(platform_dirs)
        logger.info(f"Found {total} platform directories to process")
        await self._publish(SyncStartedEvent(total_platforms=total, media_available=media_root is not None))

        for index, platform_dir in enumerate(platform_dirs):
            name = platform_dir.name
            logger.info(f"Processing platform {index + 1}/{total}: {name}")
            await self._publish(PlatformStartedEvent(platform=name, current_index=index, total_platforms=total))

            token = current_platform.set(name)
            try:
                result = await asyncio.to_thread(
                    self.platform_synchronizer.sync_platform,
                    platform_dir,
                    dest_root,
                    media_root
                )
            except Exception as e:
                logger.error(f"Error processing platform {name}: {e}", exc_info=True)
                result = PlatformResult(name=name, status=STATUS_FAILED, messages=[str(e)])
            finally:
                current_platform.reset(token)

            report.add(result)
            await self._publish(PlatformCompletedEvent(
                platform=name,
                status=result.status,
                games_processed=result.games_processed,
                media_copied=result.media_copied,
                detail=result.messages[0] if result.messages else None
            ))

        report.finish()
        logger.info("Finished processing all platform directories")
        await self._publish_completed(report)
        return report

    def _list_platforms(self, catalog_root: StorageNode) -> List[StorageNode]:
        """Immediate subdirectories of the catalog root, in listing order."""
        platforms = [child for child in catalog_root.list_children() if child.is_directory()]

        if self.platform_filter:
            selected = [p for p in platforms if p.name in self.platform_filter]
            missing = set(self.platform_filter) - {p.name for p in selected}
            for name in sorted(missing):
                logger.warning(f"Platform not found in {self.catalog_directory}: {name}")
            platforms = selected

        return platforms

    async def _abort(self, report: SyncReport, message: str) -> SyncReport:
        logger.error(message)
        report.abort(message)
        await self._publish_completed(report)
        return report

    async def _publish_completed(self, report: SyncReport) -> None:
        await self._publish(SyncCompletedEvent(
            success=report.success,
            aborted=report.aborted,
            platforms_synced=report.count(STATUS_SYNCED),
            platforms_copied=report.count(STATUS_COPIED),
            platforms_skipped=report.count(STATUS_SKIPPED),
            platforms_failed=report.count(STATUS_FAILED),
            error=report.fatal_error
        ))

    async def _publish(self, event: Any) -> None:
        if self.event_bus:
            await self.event_bus.publish(event)
