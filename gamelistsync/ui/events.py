"""Event types for progress reporting.

This module defines the events that flow from the sync engine to whatever
is presenting progress (the headless logger, or an embedding UI). Events
are immutable dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional


@dataclass(frozen=True)
class SyncStartedEvent:
    """Emitted when a synchronization pass begins.

    Attributes:
        total_platforms: Number of platform directories to process
        media_available: Whether a downloaded_media root was found
    """
    total_platforms: int
    media_available: bool


@dataclass(frozen=True)
class PlatformStartedEvent:
    """Emitted when a platform begins.

    Attributes:
        platform: Platform directory name (e.g., 'n3ds')
        current_index: Index of this platform (0-based)
        total_platforms: Total number of platforms in the pass
    """
    platform: str
    current_index: int
    total_platforms: int


@dataclass(frozen=True)
class PlatformCompletedEvent:
    """Emitted when a platform finishes.

    Attributes:
        platform: Platform directory name
        status: Final platform status
        games_processed: Game entries looked up
        media_copied: Artwork files copied
        detail: Optional detail message (first warning/error)
    """
    platform: str
    status: Literal['synced', 'copied', 'skipped', 'failed']
    games_processed: int
    media_copied: int
    detail: Optional[str] = None


@dataclass(frozen=True)
class SyncCompletedEvent:
    """Emitted once the pass is over.

    Attributes:
        success: True if the pass ran and no platform failed
        aborted: True if the pass could not start
        platforms_synced: Platforms rewritten with media
        platforms_copied: Platforms copied unchanged
        platforms_skipped: Platforms without a gamelist
        platforms_failed: Platforms that failed
        error: Fatal error message when aborted
    """
    success: bool
    aborted: bool
    platforms_synced: int
    platforms_copied: int
    platforms_skipped: int
    platforms_failed: int
    error: Optional[str] = None


@dataclass(frozen=True)
class LogEntryEvent:
    """Emitted for log messages.

    Attributes:
        level: Logging level (logging.DEBUG, INFO, WARNING, ERROR, CRITICAL)
        message: Formatted log message
        timestamp: When the log was generated
        logger_name: Name of the emitting logger
        platform: Platform being synchronized when the record was logged
    """
    level: int
    message: str
    timestamp: datetime
    logger_name: str = ""
    platform: Optional[str] = None
