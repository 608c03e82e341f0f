from typing import Any, Literal

from pydantic import BaseModel, Field

from mvpb.domain.models.build_step import BuildStep
from mvpb.domain.models.file_tree import FileTreeNode, ProjectSummary
from mvpb.domain.models.generated_file import GeneratedFile


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["generate", "replay", "steps", "providers"]
    exit_code: int
    error: str | None = None


class GenerateOutput(BaseOutput):
    command: Literal["generate", "replay"] = "generate"
    session_id: str | None = None
    narrative: str | None = None
    progress: float | None = None
    files: list[GeneratedFile] = Field(default_factory=list)
    steps: list[BuildStep] = Field(default_factory=list)
    summary: ProjectSummary | None = None
    tree: list[FileTreeNode] | None = None


class StepsOutput(BaseOutput):
    command: Literal["steps"] = "steps"
    steps: list[BuildStep] = Field(default_factory=list)


class ProviderSummary(BaseModel):
    """Summary of a provider for list output."""
    name: str
    description: str
    requires_config: bool = False
    config_keys: list[str] = Field(default_factory=list)


class ProvidersOutput(BaseOutput):
    command: Literal["providers"] = "providers"
    providers: list[ProviderSummary] = Field(default_factory=list)


def provider_summary(metadata: dict[str, Any]) -> ProviderSummary:
    return ProviderSummary(
        name=metadata["name"],
        description=metadata.get("description", ""),
        requires_config=bool(metadata.get("requires_config", False)),
        config_keys=list(metadata.get("config_keys", [])),
    )
