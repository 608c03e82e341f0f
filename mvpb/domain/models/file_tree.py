from enum import Enum

from pydantic import BaseModel, Field


class NodeType(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class FileTreeNode(BaseModel):
    """Node of the derived file-tree view. Never a source of truth."""

    name: str
    path: str
    type: NodeType
    language: str | None = None
    is_generating: bool | None = None
    children: list["FileTreeNode"] | None = None


class LanguageCount(BaseModel):
    name: str
    count: int


class ProjectSummary(BaseModel):
    """Aggregate statistics over the current file set."""

    total_files: int = 0
    total_lines: int = 0
    languages: list[LanguageCount] = Field(default_factory=list)
    structure: list[str] = Field(default_factory=list)
