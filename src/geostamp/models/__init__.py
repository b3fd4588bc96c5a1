"""Data models for Geostamp."""

from geostamp.models.photo import Photo
from geostamp.models.location import Location, GPSCoordinates, Waypoint
from geostamp.models.track import RawSegment, Segment, Track

__all__ = ["Photo", "Location", "GPSCoordinates", "Waypoint", "RawSegment", "Segment", "Track"]
