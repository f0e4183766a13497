"""
Progress tracking and results for sync operations.
"""

import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import List, Optional

STATUS_SYNCED = 'synced'
STATUS_COPIED = 'copied'
STATUS_SKIPPED = 'skipped'
STATUS_FAILED = 'failed'

# Platform being synchronized; asyncio.to_thread carries it into the worker
current_platform: ContextVar[Optional[str]] = ContextVar('current_platform', default=None)


@dataclass
class PlatformResult:
    """
    Outcome of syncing one platform.

    Status values:
    - synced: gamelist rewritten with media references
    - copied: gamelist copied unchanged (no media root, or transform failed)
    - skipped: no gamelist.xml in the platform directory
    - failed: platform could not be written
    """
    name: str
    status: str = STATUS_FAILED
    games_processed: int = 0
    thumbnails_copied: int = 0
    images_copied: int = 0
    games_without_media: int = 0
    copy_failures: int = 0
    stale_removed: int = 0
    stale_failed: int = 0
    messages: List[str] = field(default_factory=list)
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def media_copied(self) -> int:
        return self.thumbnails_copied + self.images_copied

    @property
    def succeeded(self) -> bool:
        return self.status in (STATUS_SYNCED, STATUS_COPIED)

    @property
    def elapsed(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time


@dataclass
class SyncReport:
    """Outcome of a full synchronization pass."""
    platforms: List[PlatformResult] = field(default_factory=list)
    aborted: bool = False
    fatal_error: Optional[str] = None
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    def add(self, result: PlatformResult) -> None:
        self.platforms.append(result)

    def abort(self, message: str) -> None:
        self.aborted = True
        self.fatal_error = message
        self.finish()

    def finish(self) -> None:
        self.end_time = time.time()

    def count(self, status: str) -> int:
        """Number of platforms that ended with the given status."""
        return sum(1 for result in self.platforms if result.status == status)

    @property
    def total_media_copied(self) -> int:
        return sum(result.media_copied for result in self.platforms)

    @property
    def total_games(self) -> int:
        return sum(result.games_processed for result in self.platforms)

    @property
    def success(self) -> bool:
        """True when the pass ran and no platform failed."""
        return not self.aborted and self.count(STATUS_FAILED) == 0

    def get_platform(self, name: str) -> Optional[PlatformResult]:
        for result in self.platforms:
            if result.name == name:
                return result
        return None


class ErrorLogger:
    """
    Simple error logger for tracking failures.

    Stores per-platform errors for summary reporting.
    """

    def __init__(self):
        """Initialize error logger."""
        self.errors: List[tuple] = []

    def log_error(self, platform: str, message: str) -> None:
        """
        Log an error.

        Args:
            platform: Platform directory name
            message: Error message
        """
        self.errors.append((platform, message))

    def collect(self, report: SyncReport) -> None:
        """Record the fatal error and failed platforms of a report."""
        if report.fatal_error:
            self.log_error('(run)', report.fatal_error)
        for result in report.platforms:
            if result.status == STATUS_FAILED or result.copy_failures or result.stale_failed:
                for message in result.messages or ['failed']:
                    self.log_error(result.name, message)

    def write_summary(self, output_path: str = "sync_errors.log") -> None:
        """
        Write error summary to file.

        Args:
            output_path: Path to error log file
        """
        if not self.errors:
            return

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(f"Sync Errors ({len(self.errors)} total)\n")
            f.write("=" * 60 + "\n\n")

            for platform, message in self.errors:
                f.write(f"Platform: {platform}\n")
                f.write(f"Error: {message}\n")
                f.write("-" * 60 + "\n")

    def has_errors(self) -> bool:
        """Check if any errors were logged."""
        return len(self.errors) > 0

    def get_error_count(self) -> int:
        """Get total number of errors."""
        return len(self.errors)
