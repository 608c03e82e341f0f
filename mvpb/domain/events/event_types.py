"""Generation event types for observer pattern notifications."""

from enum import Enum


class GenerationEventType(str, Enum):
    """Typed generation events for live UI/CLI notifications."""

    # Generation lifecycle
    GENERATION_STARTED = "generation_started"
    GENERATION_COMPLETED = "generation_completed"
    GENERATION_FAILED = "generation_failed"

    # Files
    FILE_DISCOVERED = "file_discovered"
    FILE_UPDATED = "file_updated"

    # Progress
    STEP_ADVANCED = "step_advanced"
