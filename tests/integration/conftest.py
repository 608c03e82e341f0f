from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def todo_transcript() -> Path:
    """SSE transcript whose frames split a fence and a path mid-token."""
    return FIXTURES_DIR / "todo_app.sse"
