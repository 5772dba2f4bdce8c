from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_bin, render_bin_list, render_summary
from services.sample_data import sample_payloads


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the bin tracker service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_STATUS_HELP = "One of Empty, Half-Full or Full."


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Bin tracker API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("list")
def list_command(
    ctx: typer.Context,
    status: Optional[str] = typer.Option(None, "--status", "-s", help=_STATUS_HELP),
) -> None:
    """List bins, most recently added first."""
    state = _get_state(ctx)
    render_bin_list(state.client.list_bins(status=status))


@app.command("add")
def add_command(
    ctx: typer.Context,
    latitude: float = typer.Argument(..., help="Latitude between -90 and 90."),
    longitude: float = typer.Argument(..., help="Longitude between -180 and 180."),
    status: str = typer.Option("Empty", "--status", "-s", help=_STATUS_HELP),
) -> None:
    """Add a bin at the given coordinates."""
    state = _get_state(ctx)
    payload = state.client.create_bin(latitude, longitude, status)
    typer.secho(payload.get("message", "Bin added."), fg=typer.colors.GREEN)
    render_bin(payload["data"])


@app.command("update")
def update_command(
    ctx: typer.Context,
    bin_id: str = typer.Argument(..., help="Identifier of the bin."),
    status: str = typer.Argument(..., help=_STATUS_HELP),
) -> None:
    """Change the status of a bin."""
    state = _get_state(ctx)
    payload = state.client.update_status(bin_id, status)
    typer.secho(payload.get("message", "Bin updated."), fg=typer.colors.GREEN)
    render_bin(payload["data"])


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    bin_id: str = typer.Argument(..., help="Identifier of the bin."),
) -> None:
    """Delete a bin."""
    state = _get_state(ctx)
    payload = state.client.delete_bin(bin_id)
    typer.secho(payload.get("message", "Bin deleted."), fg=typer.colors.GREEN)


@app.command("nearby")
def nearby_command(
    ctx: typer.Context,
    latitude: float = typer.Argument(..., help="Latitude of the centre point."),
    longitude: float = typer.Argument(..., help="Longitude of the centre point."),
    radius: Optional[float] = typer.Option(None, "--radius", "-r", help="Radius in km (server default 5)."),
) -> None:
    """List bins within a radius of a point."""
    state = _get_state(ctx)
    payload = state.client.nearby(latitude, longitude, radius)
    render_bin_list(payload, heading=f"Bins within {payload.get('radius')}")


@app.command("stats")
def stats_command(ctx: typer.Context) -> None:
    """Show bin counts per status."""
    state = _get_state(ctx)
    render_summary(state.client.stats())


@app.command("seed")
def seed_command(ctx: typer.Context) -> None:
    """Add the sample Manhattan bins through the API."""
    state = _get_state(ctx)
    typer.echo(f"Seeding sample bins into {state.config.base_url} ...")
    created = state.client.seed(sample_payloads())
    typer.secho(f"Created {len(created)} bins.", fg=typer.colors.GREEN)
    typer.echo()
    render_summary(state.client.stats())
