"""Extract named files from fenced code blocks in model output.

Two fence conventions are supported, and only these two. They are the
contract with the prompting layer (see mvpb.application.prompts):

1. A fence line carrying a ``file:`` path, optionally after a language word::

       ```tsx file:src/components/Button.tsx
       ...
       ```

2. A fence naming a language followed by a ``//`` path comment, either on
   the fence line itself or as the first line of the block::

       ```tsx // src/components/Button.tsx
       ...
       ```

       ```tsx
       // src/components/Button.tsx
       ...
       ```

   The comment line is not part of the file content.

Only closed blocks are reported. The functions here are pure and re-run
over the whole accumulated text on every delta.
"""

import re

from mvpb.domain.models.generated_file import ExtractedFile
from mvpb.domain.parsing.language import detect_language, normalize_language

FILE_PREFIX_PATTERN = re.compile(r"```(?:(\w+)\s+)?file:([^\n]+)\n([\s\S]*?)```")
PATH_COMMENT_PATTERN = re.compile(r"```(\w+)\s*//\s*([^\n]+)\n([\s\S]*?)```")


def _scan(pattern: re.Pattern[str], text: str) -> list[tuple[int, ExtractedFile]]:
    """Run one convention over text, keeping the first position per path.

    A path repeated within the same convention keeps its first position and
    takes the later body.
    """
    found: dict[str, tuple[int, ExtractedFile]] = {}
    for match in pattern.finditer(text):
        word, raw_path, body = match.groups()
        path = raw_path.strip()
        language = normalize_language(word) if word else detect_language(path)
        record = ExtractedFile(path=path, content=body.strip(), language=language)

        if path in found:
            found[path] = (found[path][0], record)
        else:
            found[path] = (match.start(), record)
    return list(found.values())


def extract_files(text: str) -> list[ExtractedFile]:
    """Return every file whose closed fenced block is present in text.

    Args:
        text: The full accumulated model output so far.

    Returns:
        Files ordered by first appearance in text. A path reported by the
        ``file:`` convention is never overridden by the path-comment
        convention.
    """
    if not text:
        return []

    primary = _scan(FILE_PREFIX_PATTERN, text)
    claimed = {record.path for _, record in primary}

    merged = list(primary)
    for position, record in _scan(PATH_COMMENT_PATTERN, text):
        if record.path not in claimed:
            merged.append((position, record))

    merged.sort(key=lambda item: item[0])
    return [record for _, record in merged]
