"""Scanning photo files and reading their capture time and GPS."""

from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

import piexif

from geostamp.core.config import DEFAULT_EXTENSIONS
from geostamp.core.logger import log_info
from geostamp.models.location import GPSCoordinates
from geostamp.models.photo import Photo
from geostamp.services.exif_writer import is_exiftool_available, read_exiftool_tags
from geostamp.services.time_resolver import OFFSET_TAGS, TimeResolver

PIEXIF_READABLE = {".jpg", ".jpeg", ".tif", ".tiff"}

EXIFTOOL_TAGS = [
    "DateTimeOriginal",
    "CreateDate",
    "ModifyDate",
    "OffsetTimeOriginal",
    "OffsetTime",
    "TimeZone",
    "Composite:GPSLatitude",
    "Composite:GPSLongitude",
]


class PhotoScanner:
    """Scans a directory for photos and reads their EXIF data."""

    def __init__(self, resolver: Optional[TimeResolver] = None, extensions: FrozenSet[str] = DEFAULT_EXTENSIONS):
        self.resolver = resolver or TimeResolver()
        self.extensions = frozenset(ext.lower() for ext in extensions)

    def scan(self, directory: Path) -> List[Photo]:
        """Scan a directory and return its photos.

        Args:
            directory: Path to the directory with photos

        Returns:
            List of Photo objects sorted by file name
        """
        photos = []

        for file_path in sorted(directory.iterdir(), key=lambda p: p.name):
            if file_path.suffix.lower() in self.extensions and file_path.is_file():
                photos.append(self.read_photo(file_path))

        return photos

    def read_photo(self, path: Path) -> Photo:
        """Read capture time and existing GPS from a photo."""
        photo = Photo(path=path)

        tags = self._read_tags(path)
        photo.timestamp = self.resolver.resolve(tags)
        photo.original_gps = self._gps_from_tags(tags)

        if photo.timestamp is None:
            log_info(f"no timestamp in {path.name}")
        return photo

    def _read_tags(self, path: Path) -> Dict[str, object]:
        """Reads tags with piexif where possible, exiftool otherwise.

        piexif does not decode maker notes, so when it finds no offset tag
        exiftool is asked as well and fills in what is missing (Canon's
        TimeZone lives there).
        """
        if path.suffix.lower() in PIEXIF_READABLE:
            try:
                tags = self._tags_from_exif(piexif.load(str(path)))
            except Exception as e:
                log_info(f"piexif cannot read {path.name}: {e}")
            else:
                if not any(tags.get(name) for name in OFFSET_TAGS) and is_exiftool_available():
                    for name, value in read_exiftool_tags(path, EXIFTOOL_TAGS).items():
                        tags.setdefault(name, value)
                return tags

        return read_exiftool_tags(path, EXIFTOOL_TAGS)

    def _tags_from_exif(self, exif_dict: dict) -> Dict[str, object]:
        """Maps a piexif dict onto exiftool tag names."""
        exif_data = exif_dict.get("Exif", {})
        ifd0_data = exif_dict.get("0th", {})

        raw = {
            "DateTimeOriginal": exif_data.get(piexif.ExifIFD.DateTimeOriginal),
            "CreateDate": exif_data.get(piexif.ExifIFD.DateTimeDigitized),
            "ModifyDate": ifd0_data.get(piexif.ImageIFD.DateTime),
            "OffsetTimeOriginal": exif_data.get(piexif.ExifIFD.OffsetTimeOriginal),
            "OffsetTime": exif_data.get(piexif.ExifIFD.OffsetTime),
        }
        tags: Dict[str, object] = {}
        for name, value in raw.items():
            if isinstance(value, bytes):
                value = value.decode("utf-8", errors="ignore").strip("\x00 ")
            if value:
                tags[name] = value

        gps = self._extract_gps(exif_dict)
        if gps:
            tags["GPSLatitude"] = gps.latitude
            tags["GPSLongitude"] = gps.longitude
        return tags

    def _gps_from_tags(self, tags: Dict[str, object]) -> Optional[GPSCoordinates]:
        lat = tags.get("GPSLatitude")
        lng = tags.get("GPSLongitude")
        if lat is None or lng is None:
            return None
        try:
            return GPSCoordinates(latitude=float(lat), longitude=float(lng))
        except (TypeError, ValueError):
            return None

    def _extract_gps(self, exif_dict: dict) -> Optional[GPSCoordinates]:
        """Extract GPS coordinates from EXIF data."""
        gps_data = exif_dict.get("GPS", {})

        if not gps_data:
            return None

        lat = gps_data.get(piexif.GPSIFD.GPSLatitude)
        lat_ref = gps_data.get(piexif.GPSIFD.GPSLatitudeRef)
        lng = gps_data.get(piexif.GPSIFD.GPSLongitude)
        lng_ref = gps_data.get(piexif.GPSIFD.GPSLongitudeRef)

        if not all([lat, lat_ref, lng, lng_ref]):
            return None

        try:
            latitude = self._dms_to_decimal(lat)
            longitude = self._dms_to_decimal(lng)

            if isinstance(lat_ref, bytes):
                lat_ref = lat_ref.decode("utf-8")
            if isinstance(lng_ref, bytes):
                lng_ref = lng_ref.decode("utf-8")

            if lat_ref == "S":
                latitude = -latitude
            if lng_ref == "W":
                longitude = -longitude

            return GPSCoordinates(latitude=latitude, longitude=longitude)
        except (ValueError, TypeError, ZeroDivisionError):
            return None

    @staticmethod
    def _dms_to_decimal(dms: tuple) -> float:
        """Convert degrees, minutes, seconds to decimal degrees."""
        # dms is a tuple of tuples: ((degrees, 1), (minutes, 1), (seconds, denom))
        degrees = dms[0][0] / dms[0][1]
        minutes = dms[1][0] / dms[1][1]
        seconds = dms[2][0] / dms[2][1]
        return degrees + minutes / 60 + seconds / 3600
