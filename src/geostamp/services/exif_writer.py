"""Reading and writing photo metadata (exiftool, with piexif as fallback)."""

import json
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Iterable

import piexif

from geostamp.core.exceptions import ExifError
from geostamp.core.logger import log_call, log_info, log_result
from geostamp.models.location import GPSCoordinates

PIEXIF_EXTENSIONS = {".jpg", ".jpeg"}


def is_exiftool_available() -> bool:
    """Checks whether exiftool is on PATH."""
    return shutil.which("exiftool") is not None


def read_exiftool_tags(photo_path: Path, tags: Iterable[str]) -> Dict[str, object]:
    """Reads the given tags with exiftool as numeric values.

    Args:
        photo_path: Path to the photo
        tags: exiftool tag names, optionally group-qualified

    Returns:
        Dict of tag name (without group) to value; empty if exiftool is
        missing or fails
    """
    if not is_exiftool_available():
        return {}

    args = ["exiftool", "-j", "-n"] + [f"-{tag}" for tag in tags] + [str(photo_path)]
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired) as e:
        log_info(f"exiftool failed for {photo_path.name}: {e}")
        return {}

    if result.returncode != 0 or not result.stdout.strip():
        return {}

    try:
        records = json.loads(result.stdout)
    except json.JSONDecodeError:
        return {}
    if not records:
        return {}
    return {key: value for key, value in records[0].items() if key != "SourceFile"}


class ExifWriter:
    """Writes GPS coordinates into photo metadata."""

    def supports_in_place(self, photo_path: Path) -> bool:
        """Whether GPS can be written into the file itself."""
        return is_exiftool_available() or photo_path.suffix.lower() in PIEXIF_EXTENSIONS

    def write(self, photo_path: Path, gps: GPSCoordinates, skip_existing_gps: bool = True) -> bool:
        """Writes GPS into the photo's EXIF.

        Args:
            photo_path: Path to the photo
            gps: GPS coordinates
            skip_existing_gps: Leave the file alone if it already has GPS

        Returns:
            True if GPS was written

        Raises:
            ExifError: If writing fails
        """
        log_call(
            "ExifWriter",
            "write",
            file=photo_path.name,
            gps=str(gps),
            skip_existing_gps=skip_existing_gps,
        )

        if is_exiftool_available():
            written = self._write_with_exiftool(photo_path, gps, skip_existing_gps)
        elif photo_path.suffix.lower() in PIEXIF_EXTENSIONS:
            written = self._write_with_piexif(photo_path, gps, skip_existing_gps)
        else:
            raise ExifError(f"Cannot write {photo_path.suffix} files without exiftool")

        log_result("ExifWriter", "write", "written" if written else "skipped")
        return written

    def _write_with_exiftool(self, photo_path: Path, gps: GPSCoordinates, skip_existing_gps: bool) -> bool:
        """Writes GPS using exiftool."""
        if skip_existing_gps and read_exiftool_tags(photo_path, ["GPSLatitude"]):
            log_info("GPS already exists, skipping")
            return False

        lat_ref = "N" if gps.latitude >= 0 else "S"
        lng_ref = "E" if gps.longitude >= 0 else "W"
        args = [
            "exiftool",
            "-overwrite_original",
            f"-GPSLatitude={abs(gps.latitude)}",
            f"-GPSLatitudeRef={lat_ref}",
            f"-GPSLongitude={abs(gps.longitude)}",
            f"-GPSLongitudeRef={lng_ref}",
            str(photo_path),
        ]

        try:
            result = subprocess.run(args, capture_output=True, text=True, timeout=30)
        except subprocess.TimeoutExpired:
            raise ExifError("exiftool timeout")
        except OSError as e:
            raise ExifError(f"Error running exiftool: {e}")

        if result.returncode != 0:
            raise ExifError(f"exiftool failed: {result.stderr.strip()}")
        log_info("GPS written with exiftool")
        return True

    def _write_with_piexif(self, photo_path: Path, gps: GPSCoordinates, skip_existing_gps: bool) -> bool:
        """Writes GPS using piexif (JPEG only)."""
        try:
            try:
                exif_dict = piexif.load(str(photo_path))
            except piexif.InvalidImageDataError:
                exif_dict = {"0th": {}, "Exif": {}, "GPS": {}, "1st": {}, "thumbnail": None}

            if skip_existing_gps and self._has_gps(exif_dict):
                log_info("GPS already exists, skipping")
                return False

            self._write_gps(exif_dict, gps)
            piexif.insert(piexif.dump(exif_dict), str(photo_path))
        except Exception as e:
            raise ExifError(f"Error writing EXIF to {photo_path}: {e}")
        return True

    def _has_gps(self, exif_dict: dict) -> bool:
        gps_data = exif_dict.get("GPS", {})
        return bool(
            gps_data.get(piexif.GPSIFD.GPSLatitude)
            and gps_data.get(piexif.GPSIFD.GPSLongitude)
        )

    def _write_gps(self, exif_dict: dict, gps: GPSCoordinates) -> None:
        """Puts GPS coordinates into the EXIF dict, keeping other GPS tags."""
        lat_dms, lat_ref, lng_dms, lng_ref = gps.to_exif_format()
        log_info(f"Writing GPS to EXIF: {gps} -> lat={lat_dms} {lat_ref}, lng={lng_dms} {lng_ref}")

        gps_ifd = exif_dict.setdefault("GPS", {})
        gps_ifd[piexif.GPSIFD.GPSVersionID] = (2, 3, 0, 0)
        gps_ifd[piexif.GPSIFD.GPSLatitude] = lat_dms
        gps_ifd[piexif.GPSIFD.GPSLatitudeRef] = lat_ref.encode("utf-8")
        gps_ifd[piexif.GPSIFD.GPSLongitude] = lng_dms
        gps_ifd[piexif.GPSIFD.GPSLongitudeRef] = lng_ref.encode("utf-8")
