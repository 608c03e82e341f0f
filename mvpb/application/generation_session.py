"""Session orchestration for streamed generations.

A GenerationSession owns the accumulated stream buffer, the file registry
and the build steps for one user conversation. Every delta re-runs the
extractor and step inference over the whole buffer, merges the result, and
returns a StreamUpdate snapshot.
"""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from mvpb.domain.build_steps import (
    active_step_id,
    advance_to_step,
    calculate_progress,
    initialize_build_steps,
    set_step_active,
)
from mvpb.domain.constants import GENERATION_ERROR_MESSAGE, INITIAL_STEP_ID
from mvpb.domain.errors import (
    GenerationInProgressError,
    NoActiveGenerationError,
    ProviderError,
    StreamError,
)
from mvpb.domain.events.emitter import GenerationEventEmitter
from mvpb.domain.events.event import GenerationEvent
from mvpb.domain.events.event_types import GenerationEventType
from mvpb.domain.file_registry import FileRegistry
from mvpb.domain.models.build_step import BuildStep
from mvpb.domain.models.chat_message import ChatMessage
from mvpb.domain.models.generated_file import GeneratedFile
from mvpb.domain.models.stream_update import GenerationResult, StreamUpdate
from mvpb.domain.parsing.code_blocks import extract_files
from mvpb.domain.parsing.narrative import extract_narrative
from mvpb.domain.parsing.step_inference import infer_current_step
from mvpb.domain.providers.stream_provider import StreamProvider

logger = logging.getLogger(__name__)


def _new_session_id() -> str:
    return f"sess_{uuid.uuid4().hex[:12]}"


@dataclass
class GenerationSession:
    """One conversation's streaming state.

    Build steps are created once per session and seeded with "analyze"
    active on the first request. The stream buffer is reset for every
    request. Files accumulate across requests and are never deleted.

    Not safe for concurrent requests: begin() refuses to start while a
    generation is streaming. Separate sessions share nothing.
    """

    session_id: str = field(default_factory=_new_session_id)
    system_prompt: str | None = None
    event_emitter: GenerationEventEmitter | None = None

    def __post_init__(self) -> None:
        if self.event_emitter is None:
            self.event_emitter = GenerationEventEmitter()

        self._steps: list[BuildStep] = initialize_build_steps()
        self._registry = FileRegistry()
        self._buffer = ""
        self._streaming = False
        self._seeded = False
        self._pending_prompt: str | None = None
        self.history: list[ChatMessage] = []
        self.last_error: str | None = None

    # ========================================================================
    # Read-only views
    # ========================================================================

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    @property
    def steps(self) -> list[BuildStep]:
        return [step.model_copy() for step in self._steps]

    @property
    def files(self) -> list[GeneratedFile]:
        return self._registry.files()

    @property
    def progress(self) -> float:
        return calculate_progress(self._steps)

    def snapshot(self, changed_paths: list[str] | None = None) -> StreamUpdate:
        return StreamUpdate(
            files=self.files,
            steps=self.steps,
            progress=self.progress,
            current_step=active_step_id(self._steps),
            changed_paths=list(changed_paths or []),
        )

    # ========================================================================
    # Stream lifecycle
    # ========================================================================

    def begin(self, prompt: str | None = None) -> StreamUpdate:
        """Start a generation request.

        Args:
            prompt: The user's message; recorded in history when the
                request ends.

        Raises:
            GenerationInProgressError: If a generation is already streaming
        """
        if self._streaming:
            raise GenerationInProgressError(self.session_id)

        self._buffer = ""
        self._streaming = True
        self._pending_prompt = prompt
        self.last_error = None

        if not self._seeded:
            self._steps = set_step_active(self._steps, INITIAL_STEP_ID)
            self._seeded = True

        self._emit(GenerationEventType.GENERATION_STARTED, step_id=active_step_id(self._steps))
        return self.snapshot()

    def feed(self, delta: str) -> StreamUpdate:
        """Append a delta and re-derive files and progress from the buffer.

        Raises:
            NoActiveGenerationError: If begin() has not been called
        """
        if not self._streaming:
            raise NoActiveGenerationError(self.session_id)

        self._buffer += delta

        merge = self._registry.merge(extract_files(self._buffer))
        for path in merge.added:
            self._emit(GenerationEventType.FILE_DISCOVERED, file_path=path)
        for path in merge.updated:
            self._emit(GenerationEventType.FILE_UPDATED, file_path=path)

        before = active_step_id(self._steps)
        self._steps = advance_to_step(self._steps, infer_current_step(self._buffer))
        after = active_step_id(self._steps)
        if after != before:
            self._emit(GenerationEventType.STEP_ADVANCED, step_id=after)

        if merge.changed:
            logger.debug(
                f"Session {self.session_id}: {len(merge.added)} new, "
                f"{len(merge.updated)} updated file(s)"
            )
        return self.snapshot(merge.changed)

    def finish(self) -> GenerationResult:
        """End the stream normally: settle files and derive the narrative."""
        result = self._close(error=None)
        self._emit(
            GenerationEventType.GENERATION_COMPLETED,
            metadata={"file_count": len(result.files)},
        )
        return result

    def fail(self, message: str = GENERATION_ERROR_MESSAGE) -> GenerationResult:
        """End the stream after a transport failure.

        Files and steps keep their last consistent state; nothing is rolled
        back. The result carries message as the single user-visible error.
        """
        result = self._close(error=message)
        self._emit(GenerationEventType.GENERATION_FAILED, metadata={"error": message})
        return result

    def _close(self, error: str | None) -> GenerationResult:
        if not self._streaming:
            raise NoActiveGenerationError(self.session_id)

        self._streaming = False
        self._registry.settle_all()
        self.last_error = error
        narrative = extract_narrative(self._buffer)

        if self._pending_prompt is not None:
            self.history.append(ChatMessage(role="user", content=self._pending_prompt))
            if narrative:
                self.history.append(ChatMessage(role="assistant", content=narrative))
        self._pending_prompt = None

        return GenerationResult(
            session_id=self.session_id,
            narrative=narrative,
            files=self.files,
            steps=self.steps,
            progress=self.progress,
            error=error,
        )

    # ========================================================================
    # Driving a delta stream
    # ========================================================================

    async def consume(
        self,
        deltas: AsyncIterator[str],
        on_update: Callable[[StreamUpdate], None] | None = None,
    ) -> GenerationResult:
        """Feed every delta from an already-begun stream, then close it.

        Provider and transport errors end the stream with an error result
        instead of propagating. Cancellation and any other exception close
        the stream the same way and are then re-raised.
        """
        try:
            async for delta in deltas:
                update = self.feed(delta)
                if on_update is not None:
                    on_update(update)
        except (ProviderError, StreamError) as e:
            logger.warning(f"Generation failed for session {self.session_id}: {e}")
            return self.fail(str(e) or GENERATION_ERROR_MESSAGE)
        except asyncio.CancelledError:
            self.fail("Generation cancelled")
            raise
        except Exception as e:
            logger.error(f"Unexpected error in session {self.session_id}: {e}")
            if self.is_streaming:
                self.fail(GENERATION_ERROR_MESSAGE)
            raise
        return self.finish()

    async def generate(
        self,
        provider: StreamProvider,
        prompt: str,
        on_update: Callable[[StreamUpdate], None] | None = None,
    ) -> GenerationResult:
        """Run one request end to end against a provider."""
        history = list(self.history)
        self.begin(prompt)
        deltas = provider.astream(prompt, system_prompt=self.system_prompt, history=history)
        return await self.consume(deltas, on_update=on_update)

    def _emit(self, event_type: GenerationEventType, **kwargs) -> None:
        self.event_emitter.emit(
            GenerationEvent(
                event_type=event_type,
                session_id=self.session_id,
                timestamp=datetime.now(timezone.utc),
                progress=self.progress,
                **kwargs,
            )
        )
