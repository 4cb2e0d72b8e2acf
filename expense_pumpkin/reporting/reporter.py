"""
Event Reporter

Every condition the calling layer should know about goes through here.
The reporter:
- Always logs the event locally (structured JSON)
- Hands it to every subscriber (e.g. the UI's notification area)
- Never lets a failing subscriber break the operation that reported
"""

from typing import Callable

import structlog

from expense_pumpkin.models.events import EventSeverity, TrackerEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


EventHandler = Callable[[TrackerEvent], None]


class EventReporter:
    """
    Central event reporting service.

    Subscribers are called synchronously, in subscription order.
    """

    def __init__(self):
        self._handlers: list[EventHandler] = []
        self._logger = structlog.get_logger("expense_pumpkin.events")

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler for every reported event.

        Returns:
            A callable that removes the handler again
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def report(self, event: TrackerEvent) -> None:
        """Log an event and notify subscribers."""
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("tracker_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("tracker_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("tracker_event", **log_dict)
        else:
            self._logger.info("tracker_event", **log_dict)

        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "event_handler_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )


class RecordingReporter(EventReporter):
    """Reporter that also keeps every event it saw, newest last."""

    def __init__(self):
        super().__init__()
        self.events: list[TrackerEvent] = []

    def report(self, event: TrackerEvent) -> None:
        self.events.append(event)
        super().report(event)

    def of_type(self, event_type) -> list[TrackerEvent]:
        return [e for e in self.events if e.event_type == event_type]
