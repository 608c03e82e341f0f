from enum import Enum

from pydantic import BaseModel


class StepStatus(str, Enum):
    """Build step status - WHERE the step is in its lifecycle."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    ERROR = "error"


class BuildStep(BaseModel):
    """One named phase of the synthetic build-progress model."""

    id: str
    title: str
    description: str | None = None
    status: StepStatus = StepStatus.PENDING
