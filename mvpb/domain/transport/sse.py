"""Decode server-sent-event frames carrying text deltas.

Frame payloads, one per ``data:`` line::

    data: {"type": "text", "content": "..."}    -> text delta
    data: {"type": "error", "content": "..."}   -> transport error
    data: [DONE]                                -> end of stream

Anything else (comments, blank keep-alives, malformed JSON, unknown frame
types) is skipped without aborting the stream.
"""

import json
import logging
from collections.abc import AsyncIterator, Iterable, Iterator
from enum import Enum

from pydantic import BaseModel

from mvpb.domain.errors import StreamError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = ":"
DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class FrameKind(str, Enum):
    TEXT = "text"
    ERROR = "error"
    DONE = "done"


class StreamFrame(BaseModel):
    model_config = {"frozen": True}

    kind: FrameKind
    content: str = ""


def decode_frame(line: str) -> StreamFrame | None:
    """Decode one SSE line, or return None if it carries nothing usable."""
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_SENTINEL:
        return StreamFrame(kind=FrameKind.DONE)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug(f"Skipping unparseable frame: {payload[:80]!r}")
        return None

    if not isinstance(data, dict):
        logger.debug(f"Skipping non-object frame: {payload[:80]!r}")
        return None

    frame_type = data.get("type")
    content = data.get("content")
    if frame_type == FrameKind.TEXT.value and isinstance(content, str):
        return StreamFrame(kind=FrameKind.TEXT, content=content)
    if frame_type == FrameKind.ERROR.value:
        return StreamFrame(kind=FrameKind.ERROR, content=str(content or ""))

    logger.debug(f"Skipping frame of unknown type: {frame_type!r}")
    return None


def decode_frames(lines: Iterable[str]) -> Iterator[StreamFrame]:
    """Yield decoded frames from SSE lines, stopping after [DONE]."""
    for line in lines:
        frame = decode_frame(line)
        if frame is None:
            continue
        yield frame
        if frame.kind == FrameKind.DONE:
            return


async def iter_text_deltas(lines: Iterable[str]) -> AsyncIterator[str]:
    """Turn SSE lines into a delta stream.

    Raises:
        StreamError: When an error frame is received. Deltas yielded before
            the error have already been delivered.
    """
    for frame in decode_frames(lines):
        if frame.kind == FrameKind.TEXT:
            yield frame.content
        elif frame.kind == FrameKind.ERROR:
            raise StreamError(frame.content or "Stream reported an error")
        else:
            return
