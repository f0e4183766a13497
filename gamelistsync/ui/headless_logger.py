"""
Headless logger for console and automation runs.

Subscribes to sync events, turns them into log lines and renders the
final summary table.
"""

import logging
from typing import Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from ..workflow.progress import SyncReport
from .event_bus import EventBus
from .events import (
    LogEntryEvent,
    PlatformCompletedEvent,
    PlatformStartedEvent,
    SyncCompletedEvent,
    SyncStartedEvent,
)

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    'synced': 'green',
    'copied': 'cyan',
    'skipped': 'yellow',
    'failed': 'bold red',
}


class HeadlessLogger:
    """
    Minimal progress output without an interactive UI.

    Output includes:
    - Platform start/finish lines
    - Warning and error counts from the log stream
    - Final summary table (rich)
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize headless logger.

        Args:
            console: rich Console for the summary (defaults to stdout)
        """
        self.console = console or Console()
        self.total_platforms = 0
        self.media_available = True
        self.warnings = 0
        self.errors = 0
        self.issues_by_platform: Dict[str, int] = {}
        self.finished = False

    def attach(self, event_bus: EventBus) -> None:
        """Subscribe to the events this logger reports on."""
        event_bus.subscribe(SyncStartedEvent, self.on_sync_started)
        event_bus.subscribe(PlatformStartedEvent, self.on_platform_started)
        event_bus.subscribe(PlatformCompletedEvent, self.on_platform_completed)
        event_bus.subscribe(SyncCompletedEvent, self.on_sync_completed)
        event_bus.subscribe(LogEntryEvent, self.on_log_entry)

    def on_sync_started(self, event: SyncStartedEvent) -> None:
        self.total_platforms = event.total_platforms
        self.media_available = event.media_available
        if not event.media_available:
            logger.info("No downloaded media found: gamelists will be copied unchanged")

    def on_platform_started(self, event: PlatformStartedEvent) -> None:
        logger.debug(f"Started {event.platform} ({event.current_index + 1}/{event.total_platforms})")

    def on_platform_completed(self, event: PlatformCompletedEvent) -> None:
        message = f"  {event.platform}: {event.status}"
        if event.detail:
            message += f" - {event.detail}"

        logger.info(message)

    def on_sync_completed(self, event: SyncCompletedEvent) -> None:
        self.finished = True

    def on_log_entry(self, event: LogEntryEvent) -> None:
        if event.level >= logging.ERROR:
            self.errors += 1
        elif event.level >= logging.WARNING:
            self.warnings += 1
        else:
            return

        if event.platform:
            self.issues_by_platform[event.platform] = self.issues_by_platform.get(event.platform, 0) + 1

    def print_summary(self, report: SyncReport) -> None:
        """
        Print the final summary of a pass.

        Args:
            report: SyncReport returned by the orchestrator
        """
        if report.aborted:
            self.console.print(f"[bold red]Synchronization aborted:[/] {report.fatal_error}")
            return

        if not report.platforms:
            self.console.print("No platforms processed.")
            return

        table = Table(title="Sync Summary", box=box.SIMPLE_HEAVY)
        table.add_column("Platform", style="bold")
        table.add_column("Status")
        table.add_column("Games", justify="right")
        table.add_column("Thumbnails", justify="right")
        table.add_column("Images", justify="right")
        table.add_column("Stale removed", justify="right")
        table.add_column("Issues", justify="right")
        table.add_column("Notes", overflow="fold")

        for result in report.platforms:
            style = STATUS_STYLES.get(result.status, '')
            table.add_row(
                result.name,
                f"[{style}]{result.status}[/]" if style else result.status,
                str(result.games_processed),
                str(result.thumbnails_copied),
                str(result.images_copied),
                str(result.stale_removed),
                str(self.issues_by_platform.get(result.name, 0)),
                "; ".join(result.messages)
            )

        self.console.print(table)

        elapsed = (report.end_time or report.start_time) - report.start_time
        minutes = int(elapsed // 60)
        seconds = int(elapsed % 60)
        self.console.print(
            f"Platforms: {len(report.platforms)}  "
            f"Games: {report.total_games}  "
            f"Media files: {report.total_media_copied}  "
            f"Warnings: {self.warnings}  Errors: {self.errors}  "
            f"Time: {minutes}m {seconds}s"
        )
