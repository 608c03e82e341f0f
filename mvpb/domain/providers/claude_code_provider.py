"""Claude Code stream provider using the Claude Agent SDK.

Runs Claude Code with partial-message streaming enabled and forwards each
text delta. No tools are allowed by default: files must come back as
fenced blocks in the reply text, not as writes to disk.
"""

import shutil
from collections.abc import AsyncIterator
from typing import Any

from mvpb.domain.errors import ProviderError
from mvpb.domain.models.chat_message import ChatMessage
from mvpb.domain.providers.stream_provider import StreamProvider

SDK_MISSING = "claude-agent-sdk is not installed (pip install claude-agent-sdk)"
CLI_MISSING = (
    "Claude Code CLI not found on PATH. "
    "See https://docs.anthropic.com/claude-code to install it, then run `claude login`"
)

# config key -> (smallest accepted value, strictly greater?)
_NUMERIC_LIMITS: dict[str, tuple[float, bool]] = {
    "max_turns": (1, False),
    "max_output_tokens": (1, False),
    "max_budget_usd": (0, True),
}


def _text_delta(event: Any) -> str | None:
    """Pull the text out of a raw content_block_delta stream event."""
    if not isinstance(event, dict) or event.get("type") != "content_block_delta":
        return None
    delta = event.get("delta") or {}
    if delta.get("type") != "text_delta":
        return None
    return delta.get("text") or None


def render_history(prompt: str, history: list[ChatMessage] | None) -> str:
    """Fold earlier turns into a single prompt string."""
    if not history:
        return prompt
    turns = [f"{m.role.upper()}: {m.content}" for m in history]
    turns.append(f"USER: {prompt}")
    return "Conversation so far:\n\n" + "\n\n".join(turns)


class ClaudeCodeProvider(StreamProvider):
    """Streams a reply from a locally installed, logged-in Claude Code CLI.

    Config keys:
        model              passed to the SDK ("sonnet", "opus", ...)
        allowed_tools      tools Claude may use; none unless listed
        working_dir        cwd for the Claude process
        max_turns          agent turn limit
        max_output_tokens  sent as CLAUDE_CODE_MAX_OUTPUT_TOKENS
        max_budget_usd     sent as the --max-budget-usd CLI flag

    The SDK has no message history parameter, so earlier turns are folded
    into the prompt text.
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or {}
        self._check_config()

        options = self.config
        self._model: str | None = options.get("model")
        self._allowed_tools: list[str] = list(options.get("allowed_tools") or [])
        self._working_dir: str | None = options.get("working_dir")
        self._max_turns: int | None = options.get("max_turns")
        self._max_output_tokens: int | None = options.get("max_output_tokens")
        self._max_budget_usd: float | None = options.get("max_budget_usd")

    def _check_config(self) -> None:
        """Warn on unknown keys and reject out-of-range limits.

        Raises:
            ValueError: If a numeric limit is out of range
        """
        if not self.config:
            return

        self._warn_unknown_keys(self.config)

        for key, (floor, exclusive) in _NUMERIC_LIMITS.items():
            value = self.config.get(key)
            if value is None:
                continue
            if value < floor or (exclusive and value == floor):
                bound = ">" if exclusive else ">="
                raise ValueError(f"{key} must be {bound} {floor}")

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        return {
            "name": "claude-code",
            "description": "Claude Code via Agent SDK (streaming)",
            "requires_config": False,
            "config_keys": ["model", "allowed_tools", "working_dir", *_NUMERIC_LIMITS],
            "supports_system_prompt": True,
            "supports_history": False,
        }

    def validate(self) -> None:
        """Check that the SDK imports and the claude executable is on PATH.

        Raises:
            ProviderError: If either is missing
        """
        try:
            import claude_agent_sdk  # noqa: F401
        except ImportError as e:
            raise ProviderError(SDK_MISSING) from e

        if shutil.which("claude") is None:
            raise ProviderError(CLI_MISSING)

    async def astream(
        self,
        prompt: str,
        system_prompt: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[str]:
        """Stream text deltas from Claude Code.

        Partial stream events are forwarded as they arrive. If the SDK
        delivers no partial events, text blocks of complete assistant
        messages are forwarded instead, so text is never yielded twice.

        Raises:
            ProviderError: If the SDK is missing or the run fails
        """
        try:
            from claude_agent_sdk import query
            from claude_agent_sdk.types import AssistantMessage, StreamEvent
        except ImportError as e:
            raise ProviderError(SDK_MISSING) from e

        options = self._build_options(system_prompt)
        streamed = False

        try:
            async for message in query(prompt=render_history(prompt, history), options=options):
                if isinstance(message, StreamEvent):
                    text = _text_delta(message.event)
                    if text:
                        streamed = True
                        yield text
                elif isinstance(message, AssistantMessage) and not streamed:
                    for block in message.content:
                        text = getattr(block, "text", None)
                        if isinstance(text, str) and text:
                            yield text
        except ProviderError:
            raise
        except Exception as e:
            raise self._wrap_sdk_error(e) from e

    def _build_options(self, system_prompt: str | None) -> "ClaudeAgentOptions":
        from claude_agent_sdk import ClaudeAgentOptions

        # The SDK wants dicts here, never None
        env = (
            {"CLAUDE_CODE_MAX_OUTPUT_TOKENS": str(self._max_output_tokens)}
            if self._max_output_tokens is not None
            else {}
        )
        extra_args = (
            {"--max-budget-usd": str(self._max_budget_usd)}
            if self._max_budget_usd is not None
            else {}
        )

        return ClaudeAgentOptions(
            model=self._model,
            system_prompt=system_prompt,
            allowed_tools=self._allowed_tools,
            cwd=self._working_dir,
            max_turns=self._max_turns,
            include_partial_messages=True,
            env=env,
            extra_args=extra_args,
        )

    def _wrap_sdk_error(self, error: Exception) -> ProviderError:
        """Turn an SDK exception into a ProviderError, matched by class name."""
        kind = type(error).__name__
        if kind == "CLINotFoundError":
            return ProviderError(CLI_MISSING)
        if kind == "ProcessError":
            return ProviderError(f"Claude Code exited with an error: {error}")
        if kind == "CLIJSONDecodeError":
            return ProviderError(f"Claude Code sent output that is not valid JSON: {error}")
        return ProviderError(f"Claude Agent SDK error ({kind}): {error}")
