import logging
from collections.abc import AsyncIterator
from typing import Any

import pytest

from mvpb.domain.errors import ProviderError
from mvpb.domain.models.chat_message import ChatMessage
from mvpb.domain.providers import ProviderFactory, StreamProvider


ROUND_TRIP_TEXT = (
    "I'll create a button component.\n"
    "\n"
    "```tsx file:src/components/Button.tsx\n"
    "export function Button() { return <button/>; }\n"
    "```\n"
    "\n"
    "Now the page.\n"
    "\n"
    "```tsx file:src/app/page.tsx\n"
    "export default function Page() { return <div/>; }\n"
    "```\n"
)


@pytest.fixture
def round_trip_text() -> str:
    """Model reply with narrative and two file:-convention blocks."""
    return ROUND_TRIP_TEXT


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent unit tests from accidentally using developer machine env vars.

    If a test needs an env var, it should set it explicitly via monkeypatch.
    """
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


class ScriptedProvider(StreamProvider):
    """Fake provider that yields preset deltas, optionally failing midway."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        config = config or {}
        self.deltas: list[str] = list(config.get("deltas", []))
        self.fail_after: int | None = config.get("fail_after")
        self.error_message: str = config.get("error_message", "connection reset")
        self.calls: list[dict[str, Any]] = []

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        return {
            "name": "scripted",
            "description": "Scripted provider for testing",
            "requires_config": False,
            "config_keys": ["deltas", "fail_after", "error_message"],
        }

    def validate(self) -> None:
        pass  # Always valid

    async def astream(
        self,
        prompt: str,
        system_prompt: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[str]:
        self.calls.append(
            {"prompt": prompt, "system_prompt": system_prompt, "history": list(history or [])}
        )
        for index, delta in enumerate(self.deltas):
            if self.fail_after is not None and index >= self.fail_after:
                raise ProviderError(self.error_message)
            yield delta


@pytest.fixture
def scripted_provider_cls() -> type[ScriptedProvider]:
    return ScriptedProvider


@pytest.fixture(autouse=True)
def _restore_provider_registry():
    """Restore the provider registry after each test to prevent pollution."""
    original_registry = dict(ProviderFactory._registry)

    yield

    ProviderFactory._registry.clear()
    ProviderFactory._registry.update(original_registry)


@pytest.fixture(autouse=True)
def _reset_mvpb_logger():
    """Undo configure_logging() so CLI tests don't leak handlers into others."""
    yield

    logger = logging.getLogger("mvpb")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
