"""Event bus for progress updates.

The EventBus delivers events from the sync engine to subscribers. Events are
queued and dispatched by process_events() running on the event loop, so
subscribers always run on the loop thread, even when the event was
published from a worker thread.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class EventBus:
    """Publish-subscribe bus for sync progress events.

    Example:
        >>> bus = EventBus()
        >>> bus.subscribe(PlatformStartedEvent, lambda e: print(e.platform))
        >>> task = asyncio.create_task(bus.process_events())
        >>> await bus.publish(PlatformStartedEvent("n3ds", 0, 3))
    """

    def __init__(self):
        """Initialize the event bus."""
        self._subscribers: dict[type, list[Callable]] = defaultdict(list)
        self._queue: asyncio.Queue = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._processing: bool = False
        self._event_count: int = 0
        self._error_count: int = 0
        self._dropped_count: int = 0

    def subscribe(self, event_type: type, callback: Callable) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The event class to subscribe to
            callback: Function to call when event is published.
                     Can be sync or async.
        """
        self._subscribers[event_type].append(callback)
        logger.debug(f"Subscribed to {event_type.__name__}")

    def unsubscribe(self, event_type: type, callback: Callable) -> None:
        """Unsubscribe from events of a specific type.

        Args:
            event_type: The event class to unsubscribe from
            callback: The callback function to remove
        """
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(callback)
            except ValueError:
                logger.warning(f"Callback not found for {event_type.__name__}")

    async def publish(self, event: Any) -> None:
        """Publish an event from async code running on the bus loop.

        Args:
            event: The event instance to publish
        """
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        await self._queue.put(event)

    def publish_sync(self, event: Any) -> None:
        """Publish an event from synchronous code on any thread.

        Events are handed to the bus loop with call_soon_threadsafe. When no
        loop is known yet, or it has been closed, the event is dropped and
        counted. Nothing is logged here, since this is called from logging
        handlers.

        Args:
            event: The event instance to publish
        """
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                self._dropped_count += 1
                return

        try:
            loop.call_soon_threadsafe(self._queue.put_nowait, event)
        except RuntimeError:
            self._dropped_count += 1

    async def process_events(self) -> None:
        """Process events from the queue.

        Run this as a background task on the loop that drives the sync.
        It runs until stop() is called or the task is cancelled.
        """
        self._loop = asyncio.get_running_loop()
        self._processing = True
        logger.debug("Event bus processing started")

        try:
            while self._processing:
                event = await self._queue.get()
                try:
                    await self._dispatch(event)
                finally:
                    self._queue.task_done()
        except asyncio.CancelledError:
            raise
        finally:
            self._processing = False

    async def _dispatch(self, event: Any) -> None:
        event_type = type(event)
        self._event_count += 1

        for callback in list(self._subscribers.get(event_type, [])):
            try:
                if inspect.iscoroutinefunction(callback):
                    await callback(event)
                else:
                    callback(event)
            except Exception as e:
                self._error_count += 1
                logger.error(
                    f"Error in event handler for {event_type.__name__}: {e}",
                    exc_info=True
                )

    async def stop(self) -> None:
        """Stop processing events.

        Waits for pending events to be processed before stopping, with a timeout.
        """
        try:
            await asyncio.wait_for(self._queue.join(), timeout=1.0)
        except asyncio.TimeoutError:
            remaining = self._queue.qsize()
            if remaining > 0:
                logger.warning(f"Event queue timeout - {remaining} events remaining, force draining")
                while not self._queue.empty():
                    try:
                        self._queue.get_nowait()
                        self._queue.task_done()
                    except asyncio.QueueEmpty:
                        break

        self._processing = False
        logger.debug(
            f"Event bus stopped. Processed {self._event_count} events "
            f"with {self._error_count} errors"
        )

    def get_stats(self) -> dict[str, int]:
        """Get event bus statistics.

        Returns:
            Dictionary with 'events_processed', 'errors', 'dropped', 'queue_size',
            'subscriber_count'
        """
        return {
            'events_processed': self._event_count,
            'errors': self._error_count,
            'dropped': self._dropped_count,
            'queue_size': self._queue.qsize(),
            'subscriber_count': sum(len(callbacks) for callbacks in self._subscribers.values())
        }

    @property
    def is_processing(self) -> bool:
        """Check if event bus is currently processing events."""
        return self._processing
