"""Main pipeline for geotagging photos."""

import json
from pathlib import Path
from typing import Callable, List, Optional

from geostamp.core.config import Config
from geostamp.core.exceptions import ExifError
from geostamp.core.logger import log_info, log_warning
from geostamp.models.photo import Photo
from geostamp.models.track import Track
from geostamp.services.exif_writer import ExifWriter
from geostamp.services.locator import Locator
from geostamp.services.photo_scanner import PhotoScanner
from geostamp.services.time_resolver import TimeResolver, parse_offset
from geostamp.services.timeline_loader import TimelineLoader
from geostamp.services.xmp_writer import XmpWriter


class Pipeline:
    """Orchestrates loading the track, matching photos and writing GPS."""

    def __init__(
        self,
        config: Config,
        progress_callback: Optional[Callable[[int, int, str, str], None]] = None,
    ):
        """
        Args:
            config: Configuration
            progress_callback: Progress callback (current, total, filename, status)

        Raises:
            GeostampError: If the default offset in the config is invalid
        """
        self.config = config
        self.progress_callback = progress_callback

        default_offset = parse_offset(config.default_offset) if config.default_offset else None

        self.timeline_loader = TimelineLoader()
        self.scanner = PhotoScanner(TimeResolver(default_offset), config.extensions)
        self.exif_writer = ExifWriter()
        self.xmp_writer = XmpWriter()

    def load_track(self) -> Track:
        """Loads the timeline file into a Track."""
        return Track.build(self.timeline_loader.load(self.config.timeline_path))

    def run(self) -> dict:
        """Runs the whole pipeline.

        Returns:
            Processing statistics

        Raises:
            TimelineParseError: If the timeline cannot be read
            MalformedTrackError: If the timeline contains invalid segments
        """
        track = self.load_track()
        if not len(track):
            log_warning("timeline contains no segments")
        locator = Locator(track)

        photos = self.scanner.scan(self.config.photos_dir)

        stats = {
            "total": len(photos),
            "tagged": 0,
            "skipped_no_time": 0,
            "skipped_has_gps": 0,
            "not_found": 0,
            "errors": 0,
            "coordinates": [],
        }

        for idx, photo in enumerate(photos, 1):
            status = self._process_photo(photo, locator)
            stats[status] += 1
            if status == "tagged":
                stats["coordinates"].append([photo.matched_location.latitude, photo.matched_location.longitude])
            self._report_progress(idx, len(photos), photo.filename, status)

        if self.config.export_path:
            self._export(photos, self.config.export_path)

        return stats

    def _process_photo(self, photo: Photo, locator: Locator) -> str:
        """Processes one photo and returns the stats key it counts under."""
        if photo.timestamp is None:
            return "skipped_no_time"

        if photo.has_original_gps and not self.config.overwrite_gps:
            log_info(f"{photo.filename} already has GPS")
            return "skipped_has_gps"

        photo.matched_location = locator.locate(photo.timestamp)
        if photo.matched_location is None:
            log_info(f"{photo.filename}: no segment at {photo.timestamp.isoformat()}")
            return "not_found"

        if self.config.dry_run:
            return "tagged"

        try:
            written = self._write(photo)
        except ExifError as e:
            photo.error = str(e)
            log_warning(f"{photo.filename}: {e}")
            return "errors"

        if not written:
            photo.matched_location = None
            log_info(f"{photo.filename} already has GPS")
            return "skipped_has_gps"

        photo.processed = True
        return "tagged"

    def _write(self, photo: Photo) -> bool:
        """Writes the matched position; False when the photo already carried GPS."""
        gps = photo.matched_location.coordinates
        in_place = self.exif_writer.supports_in_place(photo.path)

        if in_place:
            if not self.exif_writer.write(photo.path, gps, skip_existing_gps=not self.config.overwrite_gps):
                return False

        if self.config.xmp or not in_place:
            self.xmp_writer.write(photo.path, gps, location_name=photo.place_name)
        return True

    def _export(self, photos: List[Photo], path: Path) -> None:
        """Writes the tagged positions as a JSON list."""
        records = [
            {
                "file": photo.filename,
                "time": photo.timestamp.isoformat(),
                "lat": photo.matched_location.latitude,
                "lng": photo.matched_location.longitude,
                "place": photo.place_name,
            }
            for photo in photos
            if photo.matched_location and not photo.error
        ]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        log_info(f"exported {len(records)} positions to {path}")

    def _report_progress(self, current: int, total: int, filename: str, status: str) -> None:
        if self.progress_callback:
            self.progress_callback(current, total, filename, status)
