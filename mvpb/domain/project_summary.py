from collections import Counter

from mvpb.domain.models.file_tree import LanguageCount, ProjectSummary
from mvpb.domain.models.generated_file import GeneratedFile


def generate_project_summary(files: list[GeneratedFile]) -> ProjectSummary:
    """Count files, lines and languages, and list every parent directory.

    Languages are sorted by file count, most common first; ties keep first
    appearance order.
    """
    total_lines = sum(len(f.content.split("\n")) for f in files)

    counts = Counter(f.language for f in files)
    languages = [
        LanguageCount(name=name, count=count)
        for name, count in sorted(counts.items(), key=lambda item: -item[1])
    ]

    dirs: set[str] = set()
    for f in files:
        parts = f.path.split("/")
        for i in range(1, len(parts)):
            dirs.add("/".join(parts[:i]))

    return ProjectSummary(
        total_files=len(files),
        total_lines=total_lines,
        languages=languages,
        structure=sorted(dirs),
    )
