"""Services for Geostamp."""

from geostamp.services.timeline_loader import TimelineLoader
from geostamp.services.locator import Locator, locate
from geostamp.services.time_resolver import TimeResolver, parse_offset
from geostamp.services.photo_scanner import PhotoScanner
from geostamp.services.exif_writer import ExifWriter, is_exiftool_available
from geostamp.services.xmp_writer import XmpWriter

__all__ = [
    "TimelineLoader",
    "Locator",
    "locate",
    "TimeResolver",
    "parse_offset",
    "PhotoScanner",
    "ExifWriter",
    "is_exiftool_available",
    "XmpWriter",
]
