from pydantic import BaseModel, ConfigDict, field_validator


class ExtractedFile(BaseModel):
    """One file record produced by a single extraction pass.

    Notes:
    - path is used verbatim as the identity key (no ./ or .. normalization).
    - content is the full trimmed body of a closed fenced block.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    language: str


class GeneratedFile(BaseModel):
    """A file tracked by the registry across extraction passes."""

    path: str
    content: str
    language: str
    is_generating: bool = True

    @field_validator("path")
    @classmethod
    def _path_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("path must be non-empty")
        return v
