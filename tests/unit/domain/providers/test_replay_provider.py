"""Tests for ReplayProvider."""

import asyncio
from pathlib import Path

import pytest

from mvpb.domain.errors import ProviderError, StreamError
from mvpb.domain.providers.replay_provider import ReplayProvider, chunk_text, is_sse_transcript


async def _collect(provider: ReplayProvider) -> list[str]:
    return [delta async for delta in provider.astream("ignored")]


class TestIsSseTranscript:
    def test_detects_leading_data_line(self) -> None:
        assert is_sse_transcript('\n\ndata: {"type": "text", "content": "a"}\n')

    def test_leading_comments_are_skipped(self) -> None:
        assert is_sse_transcript(': recorded\n: keep-alive\ndata: [DONE]\n')

    def test_plain_text(self) -> None:
        assert not is_sse_transcript("I'll build that.\ndata: is just a word here")

    def test_empty(self) -> None:
        assert not is_sse_transcript("")


def test_chunk_text() -> None:
    assert chunk_text("abcdefg", 3) == ["abc", "def", "g"]
    assert chunk_text("", 3) == []


class TestReplayProviderConfig:
    def test_chunk_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="chunk_size must be >= 1"):
            ReplayProvider({"transcript": "x.txt", "chunk_size": 0})

    def test_unknown_config_keys_emit_warning(self) -> None:
        with pytest.warns(UserWarning, match="Unknown ReplayProvider config keys"):
            ReplayProvider({"transcript": "x.txt", "speed": 2})

    def test_validate_requires_transcript(self) -> None:
        with pytest.raises(ProviderError, match="requires a 'transcript'"):
            ReplayProvider().validate()

    def test_validate_missing_file(self, tmp_path: Path) -> None:
        provider = ReplayProvider({"transcript": str(tmp_path / "missing.txt")})

        with pytest.raises(ProviderError, match="Transcript not found"):
            provider.validate()


class TestReplayProviderStream:
    def test_plain_transcript_is_chunked(self, tmp_path: Path) -> None:
        transcript = tmp_path / "reply.txt"
        transcript.write_text("Hello, world!", encoding="utf-8")
        provider = ReplayProvider({"transcript": str(transcript), "chunk_size": 5})

        deltas = asyncio.run(_collect(provider))

        assert deltas == ["Hello", ", wor", "ld!"]

    def test_sse_transcript_is_decoded(self, tmp_path: Path) -> None:
        transcript = tmp_path / "reply.sse"
        transcript.write_text(
            'data: {"type": "text", "content": "Hel"}\n'
            "\n"
            'data: {"type": "text", "content": "lo"}\n'
            "\n"
            "data: [DONE]\n",
            encoding="utf-8",
        )
        provider = ReplayProvider({"transcript": str(transcript)})

        assert asyncio.run(_collect(provider)) == ["Hel", "lo"]

    def test_sse_error_frame_raises_stream_error(self, tmp_path: Path) -> None:
        transcript = tmp_path / "reply.sse"
        transcript.write_text(
            'data: {"type": "text", "content": "partial"}\n'
            'data: {"type": "error", "content": "An error occurred during generation"}\n',
            encoding="utf-8",
        )
        provider = ReplayProvider({"transcript": str(transcript)})

        with pytest.raises(StreamError, match="An error occurred during generation"):
            asyncio.run(_collect(provider))

    def test_undecodable_file_raises_provider_error(self, tmp_path: Path) -> None:
        transcript = tmp_path / "reply.bin"
        transcript.write_bytes(b"\xff\xfe\xfa")
        provider = ReplayProvider({"transcript": str(transcript)})

        with pytest.raises(ProviderError, match="Failed to read transcript"):
            asyncio.run(_collect(provider))
