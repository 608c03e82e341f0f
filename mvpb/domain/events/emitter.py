"""Dispatch generation events to subscribed observers."""

import logging

from mvpb.domain.events.event import GenerationEvent
from mvpb.domain.events.event_types import GenerationEventType
from mvpb.domain.events.observer import GenerationObserver

logger = logging.getLogger(__name__)


class GenerationEventEmitter:
    """Synchronous fan-out of events, in subscription order.

    An observer subscribed without event types sees every event. A failing
    observer is logged and skipped; it never interrupts the stream.
    """

    def __init__(self) -> None:
        # (observer, accepted types or None for all)
        self._subscriptions: list[tuple[GenerationObserver, frozenset[GenerationEventType] | None]] = []

    def subscribe(
        self,
        observer: GenerationObserver,
        event_types: list[GenerationEventType] | None = None,
    ) -> None:
        accepted = frozenset(event_types) if event_types is not None else None
        self._subscriptions.append((observer, accepted))

    def unsubscribe(self, observer: GenerationObserver) -> None:
        """Drop every subscription held by observer."""
        self._subscriptions = [
            (subscriber, accepted)
            for subscriber, accepted in self._subscriptions
            if subscriber is not observer
        ]

    def emit(self, event: GenerationEvent) -> None:
        for observer, accepted in list(self._subscriptions):
            if accepted is None or event.event_type in accepted:
                self._deliver(observer, event)

    def _deliver(self, observer: GenerationObserver, event: GenerationEvent) -> None:
        try:
            observer.on_event(event)
        except Exception as e:
            logger.warning(f"Observer {observer!r} failed on {event.event_type.value}: {e}")
