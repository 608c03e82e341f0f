"""Domain models for the MVP builder."""

from .chat_message import ChatMessage
from .generated_file import ExtractedFile, GeneratedFile
from .build_step import BuildStep, StepStatus
from .file_tree import FileTreeNode, LanguageCount, NodeType, ProjectSummary
from .stream_update import GenerationResult, StreamUpdate


__all__ = [
    "ChatMessage",
    "ExtractedFile",
    "GeneratedFile",
    "BuildStep",
    "StepStatus",
    "FileTreeNode",
    "LanguageCount",
    "NodeType",
    "ProjectSummary",
    "GenerationResult",
    "StreamUpdate",
]
