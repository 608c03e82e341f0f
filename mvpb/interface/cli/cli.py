import asyncio
import logging
from pathlib import Path

import click
from pydantic import BaseModel

from mvpb.application.config_loader import load_builder_config
from mvpb.application.config_models import BuilderConfig
from mvpb.application.generation_session import GenerationSession
from mvpb.domain.build_steps import initialize_build_steps
from mvpb.domain.events.stderr_observer import StderrEventObserver
from mvpb.domain.file_tree import build_file_tree, render_file_tree
from mvpb.domain.models.generated_file import GeneratedFile
from mvpb.domain.models.stream_update import GenerationResult, StreamUpdate
from mvpb.domain.project_summary import generate_project_summary
from mvpb.domain.providers import ProviderFactory, StreamProvider
from mvpb.interface.cli.output_models import (
    GenerateOutput,
    ProvidersOutput,
    StepsOutput,
    provider_summary,
)
from mvpb.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., GenerateOutput.session_id on error).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _format_error(e: Exception) -> str:
    """Format exception into user-friendly message."""
    if isinstance(e, FileNotFoundError):
        return f"File not found: {e.filename}" if e.filename else str(e)
    if isinstance(e, KeyError):
        return str(e.args[0]) if e.args else str(e)
    return str(e)


def _load_config(ctx: click.Context, **overrides) -> BuilderConfig:
    config = load_builder_config(
        project_root=Path.cwd(),
        user_home=Path.home(),
        overrides=overrides,
    )
    if config.verbose and not (ctx.obj or {}).get("verbose"):
        configure_logging(verbose=True)
    return config


class _ProgressPrinter:
    """Prints step changes and newly discovered files to stderr."""

    def __init__(self) -> None:
        self._step: str | None = None
        self._seen: set[str] = set()

    def __call__(self, update: StreamUpdate) -> None:
        if update.current_step != self._step:
            self._step = update.current_step
            title = next(
                (s.title for s in update.steps if s.id == update.current_step),
                update.current_step,
            )
            click.echo(f"[{update.progress:5.1f}%] {title}", err=True)
        for path in update.changed_paths:
            if path not in self._seen:
                self._seen.add(path)
                click.echo(f"  + {path}", err=True)


def _run_generation(
    ctx: click.Context,
    provider: StreamProvider,
    prompt: str,
    config: BuilderConfig,
    events: bool,
) -> GenerationResult:
    session = GenerationSession(system_prompt=config.resolved_system_prompt())
    if events:
        session.event_emitter.subscribe(StderrEventObserver())

    logger.debug(f"Starting {type(provider).__name__} generation for session {session.session_id}")
    on_update = None if _get_json_mode(ctx) else _ProgressPrinter()
    return asyncio.run(session.generate(provider, prompt, on_update=on_update))


def _emit_result(
    ctx: click.Context,
    command: str,
    result: GenerationResult,
    show_tree: bool,
) -> None:
    exit_code = 0 if result.succeeded else 1

    if _get_json_mode(ctx):
        _json_emit(
            GenerateOutput(
                command=command,
                exit_code=exit_code,
                error=result.error,
                session_id=result.session_id,
                narrative=result.narrative,
                progress=result.progress,
                files=result.files,
                steps=result.steps,
                summary=generate_project_summary(result.files),
                tree=build_file_tree(result.files) if show_tree else None,
            )
        )
        raise click.exceptions.Exit(exit_code)

    if result.narrative:
        click.echo(result.narrative)
        click.echo("")

    _echo_files(result.files)
    if show_tree and result.files:
        click.echo("")
        for line in render_file_tree(build_file_tree(result.files)):
            click.echo(line)

    click.echo(f"\nprogress={result.progress:.1f}%")

    if result.error:
        click.echo(f"Error: {result.error}", err=True)
        raise click.exceptions.Exit(1)


def _echo_files(files: list[GeneratedFile]) -> None:
    summary = generate_project_summary(files)
    click.echo(f"Files ({summary.total_files}, {summary.total_lines} lines):")
    for f in files:
        click.echo(f"  {f.path}  [{f.language}]")


@click.group(help="MVP builder: stream an app scaffold from a model and track build progress.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    ctx.obj["verbose"] = bool(verbose)
    configure_logging(verbose=verbose)


@cli.command("generate")
@click.argument("idea", type=str)
@click.option("--provider", "provider_key", required=False, type=str, help="Provider key (overrides config).")
@click.option("--events", is_flag=True, help="Emit generation events on stderr.")
@click.option("--tree", "show_tree", is_flag=True, help="Show the generated file tree.")
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    idea: str,
    provider_key: str | None,
    events: bool,
    show_tree: bool,
) -> None:
    """Describe an app IDEA and stream the generated project."""
    try:
        config = _load_config(ctx, provider=provider_key)
        provider = ProviderFactory.create(config.provider, config.provider_config(config.provider))
        provider.validate()

        result = _run_generation(ctx, provider, idea, config, events)
        _emit_result(ctx, "generate", result, show_tree)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(GenerateOutput(command="generate", exit_code=1, error=_format_error(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(_format_error(e)) from e


@cli.command("replay")
@click.argument("transcript", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--chunk-size", "chunk_size", required=False, type=int, help="Characters per delta for plain-text transcripts.")
@click.option("--events", is_flag=True, help="Emit generation events on stderr.")
@click.option("--tree", "show_tree", is_flag=True, help="Show the generated file tree.")
@click.pass_context
def replay_cmd(
    ctx: click.Context,
    transcript: Path,
    chunk_size: int | None,
    events: bool,
    show_tree: bool,
) -> None:
    """Replay a recorded TRANSCRIPT (raw reply text or SSE frames) through the parser."""
    try:
        config = _load_config(ctx)
        provider_config = config.provider_config("replay")
        provider_config["transcript"] = str(transcript)
        if chunk_size is not None:
            provider_config["chunk_size"] = chunk_size

        provider = ProviderFactory.create("replay", provider_config)
        provider.validate()

        result = _run_generation(ctx, provider, f"replay {transcript.name}", config, events)
        _emit_result(ctx, "replay", result, show_tree)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(GenerateOutput(command="replay", exit_code=1, error=_format_error(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(_format_error(e)) from e


@cli.command("steps")
@click.pass_context
def steps_cmd(ctx: click.Context) -> None:
    """List the build steps used for progress tracking."""
    steps = initialize_build_steps()

    if _get_json_mode(ctx):
        _json_emit(StepsOutput(exit_code=0, steps=steps))
        raise click.exceptions.Exit(0)

    for index, step in enumerate(steps, start=1):
        click.echo(f"{index}. {step.id}: {step.title} ({step.description})")


@cli.command("providers")
@click.pass_context
def providers_cmd(ctx: click.Context) -> None:
    """List registered stream providers."""
    summaries = [provider_summary(m) for m in ProviderFactory.get_all_metadata()]

    if _get_json_mode(ctx):
        _json_emit(ProvidersOutput(exit_code=0, providers=summaries))
        raise click.exceptions.Exit(0)

    for summary in summaries:
        suffix = " (requires config)" if summary.requires_config else ""
        click.echo(f"{summary.name}: {summary.description}{suffix}")
