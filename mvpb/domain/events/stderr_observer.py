"""Stderr event observer for CLI integration."""

import click

from mvpb.domain.events.event import GenerationEvent


class StderrEventObserver:
    """Emits events as structured lines to stderr."""

    def on_event(self, event: GenerationEvent) -> None:
        """Emit event as structured line to stderr."""
        parts = [f"[EVENT] {event.event_type.value}"]
        if event.step_id:
            parts.append(f"step={event.step_id}")
        if event.progress is not None:
            parts.append(f"progress={event.progress:.1f}")
        if event.file_path:
            parts.append(f"path={event.file_path}")
        if event.metadata.get("error"):
            parts.append(f"error={event.metadata['error']}")
        click.echo(" ".join(parts), err=True)
