"""CLI tests for the steps, providers, generate and replay commands."""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from mvpb.cli import cli
from mvpb.domain.providers import ProviderFactory


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each command in an empty project with an empty home directory."""
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()
    monkeypatch.chdir(project)
    monkeypatch.setenv("HOME", str(home))
    return project


def _write_project_config(project: Path, data: dict) -> None:
    config_dir = project / ".mvpb"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.yml").write_text(yaml.safe_dump(data), encoding="utf-8")


class TestStepsCommand:
    def test_lists_catalog(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["steps"])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 9
        assert lines[0] == "1. analyze: Analyzing requirements (Understanding your app idea)"
        assert lines[-1] == "9. testing: Final checks (Verifying everything works)"

    def test_json(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["--json", "steps"])

        assert result.exit_code == 0
        obj = json.loads(result.stdout)
        assert obj["schema_version"] == 1
        assert obj["command"] == "steps"
        assert obj["exit_code"] == 0
        assert [s["status"] for s in obj["steps"]] == ["pending"] * 9
        assert "error" not in obj


class TestProvidersCommand:
    def test_lists_builtin_providers(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["providers"])

        assert result.exit_code == 0
        assert "anthropic: Anthropic Messages API (streaming)" in result.stdout
        assert "claude-code: " in result.stdout
        assert "replay: Replays a recorded transcript (raw text or SSE frames) (requires config)" in result.stdout

    def test_json(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["--json", "providers"])

        obj = json.loads(result.stdout)
        assert obj["command"] == "providers"
        assert [p["name"] for p in obj["providers"]] == ["anthropic", "claude-code", "replay"]
        assert obj["providers"][2]["config_keys"] == ["transcript", "chunk_size", "encoding"]


class TestReplayCommand:
    def test_plain_transcript(self, runner: CliRunner, workdir: Path, round_trip_text: str) -> None:
        transcript = workdir / "reply.txt"
        transcript.write_text(round_trip_text, encoding="utf-8")

        result = runner.invoke(cli, ["replay", str(transcript), "--chunk-size", "9"])

        assert result.exit_code == 0
        assert result.stdout.startswith("I'll create a button component.\n\nNow the page.\n")
        assert "Files (2, 2 lines):" in result.stdout
        assert "  src/components/Button.tsx  [typescript]" in result.stdout
        assert "  src/app/page.tsx  [typescript]" in result.stdout
        assert "progress=38.9%" in result.stdout
        assert "Building components" in result.stderr
        assert "  + src/components/Button.tsx" in result.stderr

    def test_tree(self, runner: CliRunner, workdir: Path, round_trip_text: str) -> None:
        transcript = workdir / "reply.txt"
        transcript.write_text(round_trip_text, encoding="utf-8")

        result = runner.invoke(cli, ["replay", str(transcript), "--tree"])

        assert result.exit_code == 0
        assert "src/\n  app/\n    page.tsx\n  components/\n    Button.tsx\n" in result.stdout

    def test_json(self, runner: CliRunner, workdir: Path, round_trip_text: str) -> None:
        transcript = workdir / "reply.txt"
        transcript.write_text(round_trip_text, encoding="utf-8")

        result = runner.invoke(cli, ["--json", "replay", str(transcript)])

        assert result.exit_code == 0
        assert result.stdout.count("\n") == 1
        obj = json.loads(result.stdout)
        assert obj["command"] == "replay"
        assert obj["session_id"].startswith("sess_")
        assert obj["narrative"] == "I'll create a button component.\n\nNow the page."
        assert [f["path"] for f in obj["files"]] == ["src/components/Button.tsx", "src/app/page.tsx"]
        assert all(f["is_generating"] is False for f in obj["files"])
        assert obj["progress"] == pytest.approx(38.89, abs=0.01)
        assert obj["summary"]["total_files"] == 2
        assert obj["summary"]["structure"] == ["src", "src/app", "src/components"]
        assert "tree" not in obj
        assert result.stderr == ""

    def test_sse_error_frame_keeps_files(self, runner: CliRunner, workdir: Path) -> None:
        transcript = workdir / "reply.sse"
        frames = [
            {"type": "text", "content": "Building the button component.\n\n"},
            {"type": "text", "content": "```tsx file:src/Button.tsx\nexport {};\n```\n"},
            {"type": "error", "content": "An error occurred during generation"},
        ]
        transcript.write_text(
            "".join(f"data: {json.dumps(frame)}\n\n" for frame in frames),
            encoding="utf-8",
        )

        result = runner.invoke(cli, ["replay", str(transcript)])

        assert result.exit_code == 1
        assert "  src/Button.tsx  [typescript]" in result.stdout
        assert "Error: An error occurred during generation" in result.stderr

    def test_sse_error_frame_json(self, runner: CliRunner, workdir: Path) -> None:
        transcript = workdir / "reply.sse"
        transcript.write_text(
            'data: {"type": "text", "content": "```ts file:a.ts\\nA\\n```"}\n'
            'data: {"type": "error", "content": "upstream failed"}\n',
            encoding="utf-8",
        )

        result = runner.invoke(cli, ["--json", "replay", str(transcript)])

        assert result.exit_code == 1
        obj = json.loads(result.stdout)
        assert obj["exit_code"] == 1
        assert obj["error"] == "upstream failed"
        assert [f["path"] for f in obj["files"]] == ["a.ts"]

    def test_events_flag(self, runner: CliRunner, workdir: Path, round_trip_text: str) -> None:
        transcript = workdir / "reply.txt"
        transcript.write_text(round_trip_text, encoding="utf-8")

        result = runner.invoke(cli, ["replay", str(transcript), "--events"])

        assert result.exit_code == 0
        assert "[EVENT] generation_started step=analyze" in result.stderr
        assert "[EVENT] file_discovered" in result.stderr
        assert "path=src/app/page.tsx" in result.stderr
        assert "[EVENT] generation_completed" in result.stderr

    def test_missing_transcript(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["replay", "missing.txt"])

        assert result.exit_code == 1
        assert "Transcript not found: missing.txt" in result.stderr

    def test_missing_transcript_json(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["--json", "replay", "missing.txt"])

        assert result.exit_code == 1
        obj = json.loads(result.stdout)
        assert obj["command"] == "replay"
        assert "Transcript not found" in obj["error"]
        assert obj["files"] == []

    def test_invalid_chunk_size(self, runner: CliRunner, workdir: Path) -> None:
        transcript = workdir / "reply.txt"
        transcript.write_text("hello", encoding="utf-8")

        result = runner.invoke(cli, ["replay", str(transcript), "--chunk-size", "0"])

        assert result.exit_code == 1
        assert "chunk_size must be >= 1" in result.stderr

    def test_chunk_size_from_config(self, runner: CliRunner, workdir: Path, round_trip_text: str) -> None:
        _write_project_config(workdir, {"providers": {"replay": {"chunk_size": 1000}}})
        transcript = workdir / "reply.txt"
        transcript.write_text(round_trip_text, encoding="utf-8")

        result = runner.invoke(cli, ["replay", str(transcript)])

        assert result.exit_code == 0
        # One delta: both files discovered by the same update
        assert result.stderr.count("[") == 1


class TestGenerateCommand:
    def test_uses_configured_provider(
        self,
        runner: CliRunner,
        workdir: Path,
        scripted_provider_cls,
        round_trip_text: str,
    ) -> None:
        ProviderFactory.register("scripted", scripted_provider_cls)
        _write_project_config(
            workdir,
            {"provider": "scripted", "providers": {"scripted": {"deltas": [round_trip_text]}}},
        )

        result = runner.invoke(cli, ["--json", "generate", "A button"])

        assert result.exit_code == 0
        obj = json.loads(result.stdout)
        assert obj["command"] == "generate"
        assert len(obj["files"]) == 2

    def test_provider_option_overrides_config(
        self,
        runner: CliRunner,
        workdir: Path,
        scripted_provider_cls,
    ) -> None:
        ProviderFactory.register("scripted", scripted_provider_cls)
        _write_project_config(workdir, {"provider": "anthropic"})

        result = runner.invoke(cli, ["generate", "Todo app", "--provider", "scripted"])

        assert result.exit_code == 0
        assert "Files (0, 0 lines):" in result.stdout

    def test_provider_failure_exits_nonzero(
        self,
        runner: CliRunner,
        workdir: Path,
        scripted_provider_cls,
    ) -> None:
        ProviderFactory.register("scripted", scripted_provider_cls)
        _write_project_config(
            workdir,
            {
                "provider": "scripted",
                "providers": {"scripted": {"deltas": ["a", "b"], "fail_after": 1}},
            },
        )

        result = runner.invoke(cli, ["generate", "Todo app"])

        assert result.exit_code == 1
        assert "Error: connection reset" in result.stderr

    def test_unknown_provider(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["generate", "Todo app", "--provider", "nonexistent"])

        assert result.exit_code == 1
        assert "Provider: 'nonexistent' not found" in result.stderr

    def test_anthropic_without_key(self, runner: CliRunner, workdir: Path) -> None:
        result = runner.invoke(cli, ["--json", "generate", "Todo app"])

        assert result.exit_code == 1
        obj = json.loads(result.stdout)
        assert "Anthropic API key not configured" in obj["error"]

    def test_invalid_config(self, runner: CliRunner, workdir: Path) -> None:
        _write_project_config(workdir, {"theme": "dark"})

        result = runner.invoke(cli, ["generate", "Todo app"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stderr
