"""Inspect command - summary of a timeline file."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from geostamp.core.exceptions import GeostampError
from geostamp.models.track import Track
from geostamp.services.timeline_loader import TimelineLoader

console = Console()


def inspect(
    timeline: Path = typer.Argument(
        ...,
        help="Location history file (.kml, .json or .gpx)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """Show what a timeline file contains."""
    try:
        track = Track.build(TimelineLoader().load(timeline))
    except GeostampError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    stationary = sum(1 for s in track if s.is_stationary)
    waypoints = sum(len(s.points) for s in track)
    distance = sum(s.length_km() for s in track)

    table = Table(title=f"Timeline: {timeline.name}")

    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Segments", str(len(track)))
    table.add_row("Stationary", str(stationary))
    table.add_row("Moving", str(len(track) - stationary))
    table.add_row("Waypoints", str(waypoints))
    table.add_row("Distance", f"{distance:.1f} km")
    table.add_row("From", track.start.isoformat() if track.start else "-")
    table.add_row("To", track.end.isoformat() if track.end else "-")

    console.print(table)
