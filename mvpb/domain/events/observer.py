"""Generation observer protocol."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mvpb.domain.events.event import GenerationEvent


class GenerationObserver(Protocol):
    """Protocol for generation event observers."""

    def on_event(self, event: "GenerationEvent") -> None:
        """Handle a generation event. Must not throw or block."""
        ...
