"""Main CLI definition for Geostamp."""

from typing import Optional

import typer

from geostamp import __version__
from geostamp.cli.commands.inspect import inspect
from geostamp.cli.commands.locate import locate
from geostamp.cli.commands.tag import tag


def version_callback(value: bool) -> None:
    if value:
        print(f"geostamp {__version__}")
        raise typer.Exit()


app = typer.Typer(help="Geotag photos from a location history timeline.")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the program version",
    ),
) -> None:
    """Geotag photos from a Google Location History export (KML/JSON) or a GPX track."""


app.command()(tag)
app.command()(locate)
app.command()(inspect)


if __name__ == "__main__":
    app()
