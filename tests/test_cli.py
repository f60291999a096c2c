# tests/test_cli.py
"""
Tests for the shotstream command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `--help`, `replay` and `schema` are wired.
2.  **Argument Validation**: Typer's `exists=True` check on the events file.
3.  **Replay**: JSON array and JSON Lines inputs, rendering and JSON export.
4.  **Error Handling**: malformed event files exit with code 1.

We use `typer.testing.CliRunner` to invoke the app in-process.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shotstream.cli import app, load_events
from shotstream.core.contracts.events import MessageEvent, ResultEvent

STREAM = [
    {"type": "Message", "text": "prepare"},
    {"type": "StateSnapshot", "state": {"|00⟩": [0.7071, 0.0]}, "rendered_form": None},
    {"type": "Result", "success": True, "value": "[Zero, Zero]"},
    {"type": "Result", "success": False, "value": "runtime failure"},
    {"type": "Message", "text": "dangling"},
]


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Fresh CliRunner per test."""
    return CliRunner()


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    assert "replay" in result.output
    assert "schema" in result.output


def test_replay_fails_on_missing_file(runner: CliRunner) -> None:
    result = runner.invoke(app, ["replay", "ghost.jsonl"])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_load_events_accepts_array_and_lines(tmp_path: Path) -> None:
    as_array = tmp_path / "run.json"
    as_array.write_text(json.dumps(STREAM), encoding="utf-8")
    as_lines = tmp_path / "run.jsonl"
    as_lines.write_text("\n".join(json.dumps(e) for e in STREAM) + "\n\n", encoding="utf-8")

    from_array = load_events(as_array)
    from_lines = load_events(as_lines)

    assert from_array == from_lines
    assert isinstance(from_array[0], MessageEvent)
    assert isinstance(from_array[2], ResultEvent)


def test_replay_renders_shots_and_exports(runner: CliRunner, tmp_path: Path) -> None:
    events_file = tmp_path / "run.jsonl"
    events_file.write_text("\n".join(json.dumps(e) for e in STREAM), encoding="utf-8")
    out = tmp_path / "shots.json"

    result = runner.invoke(
        app,
        ["replay", str(events_file), "--delay-ms", "1", "--echo", "--output", str(out)],
    )

    assert result.exit_code == 0, f"CLI Failed with Output:\n{result.output}"
    assert "prepare" in result.output  # echoed live
    assert "Shots: 3 (2 closed)" in result.output
    assert "Refreshes: 1" in result.output
    assert "open" in result.output

    shots = json.loads(out.read_text(encoding="utf-8"))
    assert len(shots) == 3
    assert shots[0]["success"] is True
    assert [e["type"] for e in shots[0]["sub_events"]] == ["Message", "StateSnapshot"]
    assert shots[1] == {"sub_events": [], "success": False, "result": "runtime failure"}
    assert shots[2]["sub_events"] == [{"type": "Message", "message": "dangling"}]


def test_replay_rejects_malformed_events(runner: CliRunner, tmp_path: Path) -> None:
    bad = tmp_path / "bad.jsonl"
    bad.write_text('{"type": "Result", "value": "missing success"}\n', encoding="utf-8")

    result = runner.invoke(app, ["replay", str(bad)])

    assert result.exit_code == 1, f"Expected 1, got {result.exit_code}:\n{result.output}"
    assert "Invalid event file" in result.output


def test_schema_lists_event_kinds(runner: CliRunner) -> None:
    result = runner.invoke(app, ["schema"])
    assert result.exit_code == 0, result.output
    for kind in ("Message", "StateSnapshot", "Result"):
        assert kind in result.output
