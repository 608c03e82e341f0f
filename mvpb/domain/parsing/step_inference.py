"""Keyword heuristic mapping accumulated text to a build phase.

The rules are checked top to bottom and the first match wins, so rule order
is phase precedence. Generic words ("component", "page", "api") commonly
appear in early prose and trigger later phases; results are advisory.
"""

from mvpb.domain.constants import INITIAL_STEP_ID

# (phase id, trigger keywords), earliest phase first
STEP_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("analyze", ("understand", "analyzing")),
    ("plan", ("architecture", "planning", "structure")),
    ("scaffold", ("project structure", "scaffolding", "package.json")),
    ("components", ("component", "button", "card")),
    ("pages", ("page", "layout", "route")),
    ("api", ("api", "endpoint", "handler")),
    ("database", ("database", "schema", "prisma", "model")),
    ("styling", ("style", "css", "tailwind", "animation")),
    ("testing", ("complete", "ready", "finished", "done")),
)


def infer_current_step(text: str) -> str:
    """Return the phase id of the first rule whose keywords appear in text.

    Matching is case-insensitive substring search. Falls back to "analyze"
    when nothing matches.
    """
    lowered = text.lower()
    for step_id, keywords in STEP_RULES:
        if any(keyword in lowered for keyword in keywords):
            return step_id
    return INITIAL_STEP_ID
