# src/shotstream/cli.py
"""
shotstream Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.

Features
--------
- **Replay**: Feed a recorded event stream (JSON array or JSON Lines) through
  the aggregator on a real asyncio loop, with optional pacing.
- **Live Echo**: Print `Message` events as they are published.
- **Refresh Trace**: Show each coalesced refresh with the state read at fire time.
- **Export**: Save the reconstructed shots as JSON.

Usage
-----
    $ shotstream replay runs/bell.jsonl --interval-ms 5 --echo
    $ shotstream replay runs/bell.json --output shots.json
    $ shotstream schema
"""

from __future__ import annotations

import asyncio
import json
import traceback
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shotstream.core.contracts.events import (
    PRODUCER_EVENT_ADAPTER,
    PRODUCER_EVENT_LIST_ADAPTER,
    REFRESH_KIND,
    Event,
    MessageEvent,
)
from shotstream.core.contracts.shot import ShotRecord, StateSnapshotEntry
from shotstream.core.events.target import ShotEventTarget
from shotstream.core.events.timers import AsyncioTimer
from shotstream.core.settings import get_logger, load_settings

load_dotenv()

app = typer.Typer(
    help="shotstream: rebuild per-shot results from execution event streams.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: I/O
# --------------------------------------------------------------------------- #


def load_events(path: Path) -> list[Any]:
    """
    Read producer events from ``path``.

    A file whose first non-blank character is ``[`` is parsed as a JSON array;
    anything else is parsed as JSON Lines (blank lines skipped).

    Raises
    ------
    pydantic.ValidationError
        If an entry is not a valid producer event.
    """
    text = path.read_text(encoding="utf-8")
    if text.lstrip().startswith("["):
        return list(PRODUCER_EVENT_LIST_ADAPTER.validate_json(text))
    return [
        PRODUCER_EVENT_ADAPTER.validate_json(line) for line in text.splitlines() if line.strip()
    ]


def _write_results(shots: list[ShotRecord], output: Path) -> None:
    payload = [shot.model_dump(mode="json") for shot in shots]
    with output.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


# --------------------------------------------------------------------------- #
# Helpers: Rendering
# --------------------------------------------------------------------------- #


def _render_shots(shots: list[ShotRecord], closed: int) -> None:
    """Render the shot list as a table, marking an unterminated last shot."""
    table = Table(title="Shots", header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Messages", justify="right")
    table.add_column("Snapshots", justify="right")
    table.add_column("Outcome")
    table.add_column("Result")

    for idx, shot in enumerate(shots, start=1):
        snapshots = sum(1 for e in shot.sub_events if isinstance(e, StateSnapshotEntry))
        if idx > closed:
            outcome = "[yellow]open[/yellow]"
        elif shot.success:
            outcome = "[green]ok[/green]"
        else:
            outcome = "[red]failed[/red]"
        table.add_row(
            str(idx), str(len(shot.messages)), str(snapshots), outcome, escape(shot.result)
        )

    console.print(table)


# --------------------------------------------------------------------------- #
# Replay loop
# --------------------------------------------------------------------------- #


async def _replay(
    target: ShotEventTarget, events: list[Any], interval: float, echo: bool
) -> None:
    """Publish ``events`` on the running loop, then wait for the last refresh."""

    def on_refresh(_event: Event) -> None:
        # Read state now, not when the refresh was scheduled.
        console.print(
            f"[dim]refresh #{target.scheduler.fired_count}: "
            f"{len(target.results())} shot(s), {target.result_count()} closed[/dim]"
        )

    def on_message(event: Event) -> None:
        if isinstance(event, MessageEvent):
            console.print(f"[blue]>[/blue] {escape(event.text)}")

    target.subscribe(REFRESH_KIND, on_refresh)
    if echo:
        target.subscribe("Message", on_message)

    for event in events:
        target.publish(event)
        if interval > 0:
            await asyncio.sleep(interval)

    while target.scheduler.pending:
        await asyncio.sleep(target.scheduler.delay)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def replay(
    events_file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Event stream file: JSON array or JSON Lines.",
        ),
    ],
    delay_ms: Annotated[
        int | None,
        typer.Option("--delay-ms", "-d", min=0, help="Refresh coalescing window (ms)."),
    ] = None,
    interval_ms: Annotated[
        int,
        typer.Option("--interval-ms", "-i", min=0, help="Pause between published events (ms)."),
    ] = 0,
    echo: Annotated[
        bool,
        typer.Option("--echo/--no-echo", help="Print Message events as they arrive."),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the reconstructed shots as JSON."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Debug logging and full error tracebacks."),
    ] = False,
) -> None:
    """
    Replay a recorded event stream and show the reconstructed shots.
    """
    settings = load_settings()
    log_level = "DEBUG" if verbose else settings.log_level
    delay = settings.refresh_delay if delay_ms is None else delay_ms / 1000.0

    console.print(
        Panel.fit(
            f"[bold cyan]shotstream replay[/bold cyan]\nLoading: [u]{events_file.name}[/u]",
            border_style="cyan",
        )
    )

    try:
        events = load_events(events_file)
    except (ValidationError, ValueError, OSError) as e:
        console.print(f"\n[bold red]❌ Invalid event file:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    target = ShotEventTarget(
        True,
        timer=AsyncioTimer(),
        delay=delay,
        logger=get_logger("shotstream", log_level),
    )

    try:
        asyncio.run(_replay(target, events, interval_ms / 1000.0, echo))
    except Exception as e:
        console.print(f"\n[bold red]❌ Replay Error:[/bold red] {escape(str(e))}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    shots = target.results()
    closed = target.result_count()
    _render_shots(shots, closed)
    console.print(
        Panel(
            f"Events: {len(events)}\nShots: {len(shots)} ({closed} closed)\n"
            f"Refreshes: {target.scheduler.fired_count}",
            title="Summary",
            border_style="green",
        )
    )

    if output is not None:
        try:
            _write_results(shots, output)
        except OSError as e:
            console.print(f"[bold red]⚠️ Failed to save to {output}: {e}[/bold red]")
            raise typer.Exit(code=1) from e
        console.print(f"[dim]Shots saved to: {output}[/dim]")


@app.command()  # type: ignore[misc]
def schema() -> None:
    """Print the JSON Schema accepted for producer events."""
    console.print_json(json.dumps(PRODUCER_EVENT_ADAPTER.json_schema()))


if __name__ == "__main__":
    app()
