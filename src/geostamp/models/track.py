"""Model for the location-history track."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from geostamp.core.exceptions import MalformedTrackError
from geostamp.models.location import Waypoint


@dataclass
class RawSegment:
    """Segment as decoded from a timeline file, before validation.

    Points are (latitude, longitude) pairs; decoders swap axes before
    handing them over.
    """

    start: datetime
    end: datetime
    points: Sequence[Tuple[float, float]]
    name: Optional[str] = None


@dataclass(frozen=True)
class Segment:
    """Time-bounded run of waypoints (motion, or stillness if it has one point)."""

    start: datetime
    end: datetime
    points: Tuple[Waypoint, ...]
    label: Optional[str] = None

    @property
    def is_stationary(self) -> bool:
        return len(self.points) == 1

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def contains(self, instant: datetime) -> bool:
        """Closed-interval test, both boundaries match."""
        return self.start <= instant <= self.end

    def length_km(self) -> float:
        """Path length along the waypoints."""
        return sum(a.distance_to(b) for a, b in zip(self.points, self.points[1:]))


class Track:
    """Read-only ordered collection of segments, in source order."""

    def __init__(self, segments: Iterable[Segment] = ()):
        self._segments: Tuple[Segment, ...] = tuple(segments)

    @classmethod
    def build(cls, raw_segments: Iterable[RawSegment]) -> "Track":
        """Validates decoded segments and builds a Track.

        Args:
            raw_segments: Segments from a timeline decoder

        Returns:
            Track with every instant normalized to UTC

        Raises:
            MalformedTrackError: If a segment has no points, ends before it
                starts, or carries a naive timestamp
        """
        segments = []
        for position, raw in enumerate(raw_segments):
            if not raw.points:
                raise MalformedTrackError(f"Segment {position} has no points")

            start = _to_utc(raw.start, position, "start")
            end = _to_utc(raw.end, position, "end")
            if end < start:
                raise MalformedTrackError(
                    f"Segment {position} ends before it starts ({end.isoformat()} < {start.isoformat()})"
                )

            try:
                points = tuple(Waypoint(latitude=float(lat), longitude=float(lng)) for lat, lng in raw.points)
            except (TypeError, ValueError) as e:
                raise MalformedTrackError(f"Segment {position} has an invalid point: {e}")

            segments.append(Segment(start=start, end=end, points=points, label=raw.name))

        return cls(segments)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def start(self) -> Optional[datetime]:
        """Earliest segment start, None for an empty track."""
        if not self._segments:
            return None
        return min(s.start for s in self._segments)

    @property
    def end(self) -> Optional[datetime]:
        """Latest segment end, None for an empty track."""
        if not self._segments:
            return None
        return max(s.end for s in self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index: int) -> Segment:
        return self._segments[index]

    def __repr__(self) -> str:
        return f"Track({len(self._segments)} segments)"


def _to_utc(value: datetime, position: int, field_name: str) -> datetime:
    if not isinstance(value, datetime):
        raise MalformedTrackError(f"Segment {position} {field_name} is not a datetime: {value!r}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise MalformedTrackError(f"Segment {position} {field_name} has no timezone")
    return value.astimezone(timezone.utc)
