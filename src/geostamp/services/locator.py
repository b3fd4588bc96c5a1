"""Resolving a capture instant to a position on the track."""

import math
from datetime import datetime
from typing import Optional

from geostamp.core.exceptions import GeostampError
from geostamp.core.logger import log_call, log_result
from geostamp.models.location import GPSCoordinates, Location
from geostamp.models.track import Segment, Track


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + t * (b - a)


def duration_fraction(start: datetime, end: datetime, instant: datetime) -> float:
    """Share of [start, end] elapsed at instant, clamped to [0, 1].

    A zero-length span gives 0.
    """
    total = end - start
    if not total:
        return 0.0
    return min(1.0, max(0.0, (instant - start) / total))


def locate(track: Track, instant: datetime) -> Optional[Location]:
    """Finds the position on the track at the given instant.

    Segments are scanned in track order and the first one whose closed
    interval [start, end] contains the instant is used.

    Args:
        track: Track to search
        instant: Timezone-aware query time

    Returns:
        Location labelled with the segment name, or None if no segment
        covers the instant
    """
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise GeostampError(f"Query time has no timezone: {instant.isoformat()}")

    for segment in track:
        if segment.contains(instant):
            return Location(
                coordinates=position_in_segment(segment, instant),
                place_name=segment.label,
            )
    return None


def position_in_segment(segment: Segment, instant: datetime) -> GPSCoordinates:
    """Uniform-time interpolation along the segment's waypoints."""
    points = segment.points

    # Stationary period, or no time to spread the points over
    if len(points) == 1 or segment.start == segment.end:
        return points[0]

    index = duration_fraction(segment.start, segment.end, instant) * (len(points) - 1)
    lower = int(math.floor(index))
    if lower >= len(points) - 1:
        return points[-1]

    fraction = index - lower
    before, after = points[lower], points[lower + 1]
    return GPSCoordinates(
        latitude=lerp(before.latitude, after.latitude, fraction),
        longitude=lerp(before.longitude, after.longitude, fraction),
    )


class Locator:
    """Matches photo times to positions on a track."""

    def __init__(self, track: Track):
        self.track = track

    def locate(self, instant: datetime) -> Optional[Location]:
        """Finds the interpolated position for the given time.

        Args:
            instant: Time the photo was taken (timezone-aware)

        Returns:
            Location or None if the track does not cover the instant
        """
        log_call("Locator", "locate", instant=instant.isoformat())
        result = locate(self.track, instant)
        log_result("Locator", "locate", result if result else "not found")
        return result
