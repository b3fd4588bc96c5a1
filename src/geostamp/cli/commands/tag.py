"""Tag command - write positions from the timeline into photos."""

import json
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from geostamp.core import logger
from geostamp.core.config import Config
from geostamp.core.exceptions import GeostampError
from geostamp.core.pipeline import Pipeline

console = Console()


def tag(
    photos_dir: Path = typer.Argument(
        ...,
        help="Folder with photos",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    timeline: Path = typer.Option(
        ...,
        "--timeline",
        "-t",
        help="Location history file (.kml, .json or .gpx)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    offset: Optional[str] = typer.Option(
        None,
        "--offset",
        "-z",
        help="UTC offset of the camera clock for photos without one, e.g. +02:00",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Only show matches, do not modify files",
    ),
    overwrite_gps: bool = typer.Option(
        False,
        "--overwrite-gps",
        help="Replace GPS that is already in the photo",
    ),
    xmp: bool = typer.Option(
        False,
        "--xmp",
        help="Also write XMP sidecar files",
    ),
    export: Optional[Path] = typer.Option(
        None,
        "--export",
        "-e",
        help="Save tagged positions to a JSON file",
        dir_okay=False,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Detailed log of service calls",
    ),
) -> None:
    """Tag photos with GPS positions interpolated from the timeline."""
    start_time = time.time()
    logger.set_verbose(verbose)

    config = Config(
        photos_dir=photos_dir,
        timeline_path=timeline,
        default_offset=offset,
        dry_run=dry_run,
        overwrite_gps=overwrite_gps,
        xmp=xmp,
        verbose=verbose,
        export_path=export,
    )

    def progress_callback(current: int, total: int, filename: str, status: str) -> None:
        style = "green" if status == "tagged" else "red" if status == "errors" else "dim"
        console.print(f"[{current}/{total}] {filename} - [{style}]{status.replace('_', ' ')}[/{style}]")

    try:
        pipeline = Pipeline(config=config, progress_callback=progress_callback)
        stats = pipeline.run()
    except GeostampError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)

    elapsed = time.time() - start_time

    console.print()
    verb = "Would tag" if dry_run else "Tagged"
    console.print(f"[green]Done![/green] {verb} {stats['tagged']} of {stats['total']} photos in {elapsed:.1f}s")
    console.print(f"  - {stats['not_found']} outside the timeline")
    console.print(f"  - {stats['skipped_no_time']} without capture time")
    console.print(f"  - {stats['skipped_has_gps']} already with GPS")

    if stats["errors"] > 0:
        console.print(f"  - [red]{stats['errors']} errors[/red]")

    if verbose:
        console.print(json.dumps(stats["coordinates"]))

    if export:
        console.print(f"Positions saved to: {export}")
