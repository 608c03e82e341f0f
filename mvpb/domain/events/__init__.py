"""Generation event system for observer pattern notifications."""

from mvpb.domain.events.event_types import GenerationEventType
from mvpb.domain.events.event import GenerationEvent
from mvpb.domain.events.observer import GenerationObserver
from mvpb.domain.events.emitter import GenerationEventEmitter
from mvpb.domain.events.stderr_observer import StderrEventObserver

__all__ = [
    "GenerationEventType",
    "GenerationEvent",
    "GenerationObserver",
    "GenerationEventEmitter",
    "StderrEventObserver",
]
