from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

import typer

_STATUS_COLORS = {
    "Empty": typer.colors.GREEN,
    "Half-Full": typer.colors.YELLOW,
    "Full": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_bin(payload: Mapping[str, Any]) -> None:
    echo_key_values(
        [
            ("_id", payload.get("_id")),
            ("latitude", payload.get("latitude")),
            ("longitude", payload.get("longitude")),
            ("status", payload.get("status")),
            ("addedAt", payload.get("addedAt")),
            ("updatedAt", payload.get("updatedAt")),
        ]
    )


def render_bin_rows(bins: Iterable[Mapping[str, Any]]) -> None:
    rows = list(bins)
    if not rows:
        typer.echo("No bins found.")
        return
    for item in rows:
        status = str(item.get("status"))
        typer.echo(
            f"  - {item.get('_id')}  ({item.get('latitude')}, {item.get('longitude')})  ",
            nl=False,
        )
        typer.secho(status, fg=_STATUS_COLORS.get(status))


def render_bin_list(payload: Dict[str, Any], heading: str = "Bins") -> None:
    echo_heading(f"{heading} ({payload.get('count', 0)})")
    render_bin_rows(payload.get("data") or [])


def render_summary(payload: Mapping[str, Any]) -> None:
    echo_heading("Bin Summary")
    typer.echo(f"total: {payload.get('total', 0)}")
    by_status = payload.get("by_status") or {}
    for status, count in by_status.items():
        typer.echo(f"  - {status}: {count}")
