"""Model for a photo."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from geostamp.models.location import Location, GPSCoordinates


@dataclass
class Photo:
    """Photo with the metadata relevant for geotagging."""

    path: Path
    timestamp: Optional[datetime] = None  # capture time resolved to UTC
    original_gps: Optional[GPSCoordinates] = None  # GPS already in the file
    matched_location: Optional[Location] = None  # position from the track
    processed: bool = False
    error: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def has_original_gps(self) -> bool:
        return self.original_gps is not None

    @property
    def place_name(self) -> Optional[str]:
        if self.matched_location:
            return self.matched_location.place_name
        return None
