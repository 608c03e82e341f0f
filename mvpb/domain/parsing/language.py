"""Map file extensions and fence words to language tags."""

from mvpb.domain.constants import DEFAULT_LANGUAGE

# Extension (lower-case, no dot) -> language tag
EXTENSION_LANGUAGES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "json": "json",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "md": "markdown",
    "py": "python",
    "sql": "sql",
    "prisma": "prisma",
    "env": "env",
    "yaml": "yaml",
    "yml": "yaml",
}


def detect_language(path: str) -> str:
    """Return the language tag for a path based on its last extension.

    Paths without a dot use the whole final segment as the extension, so
    ".env" maps to "env" and "Makefile" falls back to "text".
    """
    ext = path.rsplit(".", 1)[-1].lower()
    return EXTENSION_LANGUAGES.get(ext, DEFAULT_LANGUAGE)


def normalize_language(word: str) -> str:
    """Normalize an explicit fence language word.

    Words that are known extensions ("tsx", "py") map to their tag; any
    other word is kept, lower-cased.
    """
    lowered = word.lower()
    return EXTENSION_LANGUAGES.get(lowered, lowered)
