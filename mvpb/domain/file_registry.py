"""Order-preserving, path-keyed collection of generated files."""

from dataclasses import dataclass, field

from mvpb.domain.models.generated_file import ExtractedFile, GeneratedFile


@dataclass
class MergeResult:
    """Paths touched by one merge, in batch order."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)

    @property
    def changed(self) -> list[str]:
        return self.added + self.updated


class FileRegistry:
    """Deduplicating file collection keyed by path.

    Files only accumulate or get superseded in place; nothing is deleted
    within a session. Positions are fixed at first discovery.
    """

    def __init__(self, files: list[GeneratedFile] | None = None) -> None:
        self._files: dict[str, GeneratedFile] = {}
        for f in files or []:
            self._files[f.path] = f.model_copy()

    def merge(self, batch: list[ExtractedFile]) -> MergeResult:
        """Merge an extraction batch.

        Known paths get their content and language replaced in place;
        unknown paths are appended with is_generating=True. Records whose
        content and language are unchanged are not reported.
        """
        result = MergeResult()
        for extracted in batch:
            existing = self._files.get(extracted.path)
            if existing is None:
                self._files[extracted.path] = GeneratedFile(
                    path=extracted.path,
                    content=extracted.content,
                    language=extracted.language,
                    is_generating=True,
                )
                result.added.append(extracted.path)
            elif existing.content != extracted.content or existing.language != extracted.language:
                existing.content = extracted.content
                existing.language = extracted.language
                result.updated.append(extracted.path)
        return result

    def settle_all(self) -> None:
        """Mark every file as no longer generating."""
        for f in self._files.values():
            f.is_generating = False

    def get(self, path: str) -> GeneratedFile | None:
        f = self._files.get(path)
        return f.model_copy() if f is not None else None

    def files(self) -> list[GeneratedFile]:
        """Snapshot copies in discovery order."""
        return [f.model_copy() for f in self._files.values()]

    def paths(self) -> list[str]:
        return list(self._files.keys())

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files
