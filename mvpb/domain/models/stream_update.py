from pydantic import BaseModel, Field

from mvpb.domain.models.build_step import BuildStep
from mvpb.domain.models.generated_file import GeneratedFile


class StreamUpdate(BaseModel):
    """Snapshot exposed after each delta is consumed.

    files and steps are copies; mutating them does not affect the session.
    """

    files: list[GeneratedFile] = Field(default_factory=list)
    steps: list[BuildStep] = Field(default_factory=list)
    progress: float = 0.0
    current_step: str | None = None
    # Paths added or changed by this delta
    changed_paths: list[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    """Terminal snapshot of one generation request."""

    session_id: str
    narrative: str = ""
    files: list[GeneratedFile] = Field(default_factory=list)
    steps: list[BuildStep] = Field(default_factory=list)
    progress: float = 0.0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
