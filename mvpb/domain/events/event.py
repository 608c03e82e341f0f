"""Generation event payload model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from mvpb.domain.events.event_types import GenerationEventType


class GenerationEvent(BaseModel):
    """Immutable event payload for generation notifications."""

    model_config = {"frozen": True}

    event_type: GenerationEventType
    session_id: str
    timestamp: datetime
    step_id: str | None = None
    progress: float | None = None
    file_path: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
