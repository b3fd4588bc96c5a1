"""Core modules for Geostamp."""

from geostamp.core.config import Config
from geostamp.core.exceptions import GeostampError, MalformedTrackError, TimelineParseError, ExifError
from geostamp.core import logger

__all__ = ["Config", "GeostampError", "MalformedTrackError", "TimelineParseError", "ExifError", "logger"]
