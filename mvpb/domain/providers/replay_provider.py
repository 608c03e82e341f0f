"""Replay a recorded transcript as a delta stream.

SSE-framed transcripts (lines starting with ``data:``) are decoded frame by
frame; any other file is treated as the raw model reply and cut into
fixed-size chunks.
"""

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from mvpb.domain.constants import DEFAULT_REPLAY_CHUNK_SIZE, DEFAULT_TRANSCRIPT_ENCODING
from mvpb.domain.errors import ProviderError
from mvpb.domain.models.chat_message import ChatMessage
from mvpb.domain.providers.stream_provider import StreamProvider
from mvpb.domain.transport.sse import COMMENT_PREFIX, DATA_PREFIX, iter_text_deltas


def is_sse_transcript(text: str) -> bool:
    """True when the first non-blank, non-comment line is an SSE data line."""
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        return line.startswith(DATA_PREFIX)
    return False


def chunk_text(text: str, chunk_size: int) -> list[str]:
    return [text[i:i + chunk_size] for i in range(0, len(text), chunk_size)]


class ReplayProvider(StreamProvider):
    """Offline provider that streams a transcript file. The prompt is ignored.

    Configuration:
        - transcript: Path to the transcript file (required)
        - chunk_size: Characters per delta for plain-text transcripts
        - encoding: File encoding (default: utf-8)
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or {}
        self._validate_config()

        transcript = self.config.get("transcript")
        self._transcript = Path(transcript) if transcript else None
        self._chunk_size = self.config.get("chunk_size", DEFAULT_REPLAY_CHUNK_SIZE)
        self._encoding = self.config.get("encoding", DEFAULT_TRANSCRIPT_ENCODING)

    def _validate_config(self) -> None:
        if not self.config:
            return

        self._warn_unknown_keys(self.config)

        chunk_size = self.config.get("chunk_size")
        if chunk_size is not None and chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return provider metadata."""
        return {
            "name": "replay",
            "description": "Replays a recorded transcript (raw text or SSE frames)",
            "requires_config": True,
            "config_keys": ["transcript", "chunk_size", "encoding"],
            "supports_system_prompt": False,
            "supports_history": False,
        }

    def validate(self) -> None:
        """Verify the transcript file exists.

        Raises:
            ProviderError: If no transcript is configured or it is missing
        """
        if self._transcript is None:
            raise ProviderError("Replay provider requires a 'transcript' path")
        if not self._transcript.is_file():
            raise ProviderError(f"Transcript not found: {self._transcript}")

    async def astream(
        self,
        prompt: str,
        system_prompt: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[str]:
        """Yield the transcript's deltas in order.

        Raises:
            ProviderError: If the transcript cannot be read
            StreamError: If an SSE transcript contains an error frame
        """
        self.validate()
        try:
            text = self._transcript.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ProviderError(f"Failed to read transcript {self._transcript}: {e}") from e

        if is_sse_transcript(text):
            async for delta in iter_text_deltas(text.splitlines()):
                yield delta
        else:
            for chunk in chunk_text(text, self._chunk_size):
                yield chunk
