"""Bridge from the logging module to the event stream.

Every record that reaches the handler becomes a LogEntryEvent tagged with
the platform being synchronized when it was logged, so subscribers can
attribute warnings and errors to a platform.
"""

import logging
from datetime import datetime
from typing import Optional

from gamelistsync.ui.event_bus import EventBus
from gamelistsync.ui.events import LogEntryEvent
from gamelistsync.workflow.progress import current_platform


class EventLogHandler(logging.Handler):
    """Publishes log records to the event bus as LogEntryEvent.

    The platform comes from a ``platform`` attribute on the record (set via
    ``extra=``) or else from the ``current_platform`` context of the thread
    doing the work. Records of the event bus module are skipped, otherwise
    an error in a subscriber would be queued back to the same bus.

    Example:
        >>> handler = EventLogHandler(bus, level=logging.WARNING)
        >>> logging.root.addHandler(handler)
    """

    def __init__(self, event_bus: EventBus, level: int = logging.NOTSET):
        super().__init__(level)
        self.event_bus = event_bus
        self._event_count = 0

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == EventBus.__module__:
            return

        try:
            self.event_bus.publish_sync(LogEntryEvent(
                level=record.levelno,
                message=self.format(record),
                timestamp=datetime.fromtimestamp(record.created),
                logger_name=record.name,
                platform=self._platform_for(record)
            ))
            self._event_count += 1
        except Exception:
            self.handleError(record)

    @staticmethod
    def _platform_for(record: logging.LogRecord) -> Optional[str]:
        return getattr(record, 'platform', None) or current_platform.get()

    def get_event_count(self) -> int:
        """Number of records published so far."""
        return self._event_count


def setup_event_logging(
    event_bus: EventBus,
    level: int = logging.INFO,
    format_string: Optional[str] = None
) -> EventLogHandler:
    """Attach an EventLogHandler to the root logger and return it.

    Args:
        event_bus: Bus receiving the LogEntryEvents
        level: Minimum level forwarded (default: INFO)
        format_string: Message format (default: '%(message)s')
    """
    handler = EventLogHandler(event_bus, level=level)
    handler.setFormatter(logging.Formatter(format_string or '%(message)s'))
    logging.root.addHandler(handler)
    return handler
