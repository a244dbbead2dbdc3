from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_latest, render_reading


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the weather station sink.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Sink API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("push")
def push_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Path to a JSON reading."
    ),
) -> None:
    """Send a raw reading to the sink as if it came from the device."""
    state = _get_state(ctx)
    typer.echo(f"Pushing {file} to {state.config.base_url} ...")
    processed = state.client.push_reading(file)
    typer.secho("Reading accepted.", fg=typer.colors.GREEN)
    typer.echo()
    render_reading(processed)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the latest processed reading and the recent history preview."""
    state = _get_state(ctx)
    render_latest(state.client.get_latest())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between checks for a new reading.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to keep watching before exiting.",
    ),
) -> None:
    """Print each new reading as it arrives."""
    state = _get_state(ctx)
    interval = poll_interval if poll_interval is not None else state.config.poll_interval
    watch_timeout = timeout if timeout is not None else state.config.watch_timeout
    typer.echo(f"Watching {state.config.base_url} (interval={interval}s, timeout={watch_timeout}s)...")

    def _show(reading: dict) -> None:
        typer.echo()
        render_reading(reading)

    seen = state.client.watch(interval=interval, timeout=watch_timeout, on_reading=_show)
    typer.echo()
    typer.echo(f"Saw {seen} new reading(s).")
