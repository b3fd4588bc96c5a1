"""Locate command - look up the position at a single instant."""

from datetime import datetime, timezone
from pathlib import Path

import typer
from rich.console import Console

from geostamp.core.exceptions import GeostampError
from geostamp.models.track import Track
from geostamp.services.locator import Locator
from geostamp.services.timeline_loader import TimelineLoader

console = Console()


def locate(
    timeline: Path = typer.Argument(
        ...,
        help="Location history file (.kml, .json or .gpx)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    instant: str = typer.Argument(
        ...,
        help="ISO 8601 time, e.g. 2017-04-05T14:32:00+02:00 (no offset means UTC)",
    ),
) -> None:
    """Print the position on the timeline at the given time."""
    try:
        when = datetime.fromisoformat(instant)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid time: {instant}")
        raise typer.Exit(2)

    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    try:
        track = Track.build(TimelineLoader().load(timeline))
    except GeostampError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    location = Locator(track).locate(when)
    if location is None:
        console.print(f"[yellow]Not found:[/yellow] no segment covers {when.isoformat()}")
        raise typer.Exit(1)

    console.print(f"{location.latitude:.6f}, {location.longitude:.6f}")
    if location.place_name:
        console.print(f"[dim]{location.place_name}[/dim]")
