"""Recover the prose around fenced code blocks in a finished reply."""

import re

FENCED_BLOCK_PATTERN = re.compile(r"```[\s\S]*?```")
BLANK_RUN_PATTERN = re.compile(r"\n{3,}")


def extract_narrative(text: str) -> str:
    """Strip every fenced block from finalized text and tidy blank lines.

    Runs of three or more newlines collapse to exactly two; the result is
    trimmed. Intended for stream-complete text only.
    """
    without_code = FENCED_BLOCK_PATTERN.sub("", text)
    return BLANK_RUN_PATTERN.sub("\n\n", without_code).strip()
