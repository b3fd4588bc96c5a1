"""Geostamp - CLI tool for geotagging photos from a location history timeline."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("geostamp")
except PackageNotFoundError:
    # Fallback for development without installation
    __version__ = "0.0.0-dev"
