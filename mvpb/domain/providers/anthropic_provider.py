"""Anthropic Messages API stream provider.

Uses the official anthropic package's async streaming helper and yields
each text delta as it arrives. The client is created lazily, once per
provider instance, and reused for that instance's requests.
"""

import logging
import os
from collections.abc import AsyncIterator
from typing import Any

import anthropic

from mvpb.domain.errors import ProviderError
from mvpb.domain.models.chat_message import ChatMessage
from mvpb.domain.providers.stream_provider import StreamProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 16384
API_KEY_ENV = "ANTHROPIC_API_KEY"


class AnthropicProvider(StreamProvider):
    """Stream provider backed by the Anthropic Messages API.

    Configuration:
        - model: Model name (default: claude-sonnet-4-20250514)
        - max_tokens: Output token limit (default: 16384)
        - api_key: API key (default: ANTHROPIC_API_KEY environment variable)
        - timeout: Request timeout in seconds, passed to the client

    Example:
        provider = AnthropicProvider({"model": "claude-sonnet-4-20250514"})
        async for delta in provider.astream("Build a todo app"):
            ...
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or {}
        self._validate_config()

        self._model = self.config.get("model", DEFAULT_MODEL)
        self._max_tokens = self.config.get("max_tokens", DEFAULT_MAX_TOKENS)
        self._api_key = self.config.get("api_key")
        self._timeout = self.config.get("timeout")
        self._client: anthropic.AsyncAnthropic | None = None

    def _validate_config(self) -> None:
        """Validate configuration and warn on unknown keys.

        Raises:
            ValueError: If config values are invalid
        """
        if not self.config:
            return

        self._warn_unknown_keys(self.config)

        max_tokens = self.config.get("max_tokens")
        if max_tokens is not None and max_tokens < 1:
            raise ValueError("max_tokens must be >= 1")

        timeout = self.config.get("timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be > 0")

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return provider metadata."""
        return {
            "name": "anthropic",
            "description": "Anthropic Messages API (streaming)",
            "requires_config": False,
            "config_keys": ["model", "max_tokens", "api_key", "timeout"],
            "supports_system_prompt": True,
            "supports_history": True,
        }

    def _resolve_api_key(self) -> str | None:
        return self._api_key or os.environ.get(API_KEY_ENV)

    def validate(self) -> None:
        """Verify an API key is available.

        Raises:
            ProviderError: If no API key is configured
        """
        if not self._resolve_api_key():
            raise ProviderError(
                f"Anthropic API key not configured. Set {API_KEY_ENV} "
                "or providers.anthropic.api_key in .mvpb/config.yml"
            )

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            kwargs: dict[str, Any] = {"api_key": self._resolve_api_key()}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            self._client = anthropic.AsyncAnthropic(**kwargs)
        return self._client

    def _build_messages(
        self, prompt: str, history: list[ChatMessage] | None
    ) -> list[dict[str, str]]:
        messages = [{"role": m.role, "content": m.content} for m in history or []]
        messages.append({"role": "user", "content": prompt})
        return messages

    async def astream(
        self,
        prompt: str,
        system_prompt: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[str]:
        """Stream text deltas from the Messages API.

        Raises:
            ProviderError: If the API key is missing or the API call fails
        """
        self.validate()
        client = self._get_client()

        request: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": self._build_messages(prompt, history),
        }
        if system_prompt:
            request["system"] = system_prompt

        logger.debug(f"Streaming from Anthropic model {self._model}")
        try:
            async with client.messages.stream(**request) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.APIStatusError as e:
            raise ProviderError(f"Anthropic API error ({e.status_code}): {e.message}") from e
        except anthropic.APIConnectionError as e:
            raise ProviderError(f"Could not reach the Anthropic API: {e}") from e
        except anthropic.AnthropicError as e:
            raise ProviderError(f"Anthropic SDK error ({type(e).__name__}): {e}") from e
