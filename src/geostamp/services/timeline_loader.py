"""Loading location history files into track segments."""

import json
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import gpxpy
import gpxpy.gpx

from geostamp.core.exceptions import TimelineParseError
from geostamp.core.logger import log_call, log_info, log_result
from geostamp.models.location import GPSCoordinates
from geostamp.models.track import RawSegment


class TimelineLoader:
    """Loads a Google Location History export (KML or JSON) or a GPX track.

    Segments are returned in file order; coordinates are normalized to
    (latitude, longitude) here, whatever the source axis order.
    """

    def load(self, path: Path) -> List[RawSegment]:
        """Loads a timeline file and returns its segments.

        Args:
            path: Path to a .kml, .json or .gpx file

        Returns:
            List of RawSegment in source order

        Raises:
            TimelineParseError: If the file cannot be loaded or parsed
        """
        log_call("TimelineLoader", "load", path=str(path))

        suffix = path.suffix.lower()
        if suffix == ".kml":
            segments = self._load_kml(path)
        elif suffix == ".json":
            segments = self._load_json(path)
        elif suffix == ".gpx":
            segments = self._load_gpx(path)
        else:
            raise TimelineParseError(f"Unsupported timeline format: {path.suffix or path.name}")

        log_result("TimelineLoader", "load", f"{len(segments)} segments")
        return segments

    # KML

    def _load_kml(self, path: Path) -> List[RawSegment]:
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise TimelineParseError(f"Invalid KML format: {e}")
        except FileNotFoundError:
            raise TimelineParseError(f"File not found: {path}")
        except OSError as e:
            raise TimelineParseError(f"Error reading file: {e}")

        segments = []
        skipped = 0
        for placemark in root.iter():
            if _local_name(placemark.tag) != "Placemark":
                continue
            segment = self._extract_placemark(placemark)
            if segment:
                segments.append(segment)
            else:
                skipped += 1

        if skipped:
            log_info(f"skipped {skipped} placemarks without time span or geometry")
        return segments

    def _extract_placemark(self, placemark: ET.Element) -> Optional[RawSegment]:
        """Builds a segment from a Placemark with a TimeSpan."""
        time_span = _find_child(placemark, "TimeSpan")
        if time_span is None:
            return None

        start = _parse_timestamp(_child_text(time_span, "begin"))
        end = _parse_timestamp(_child_text(time_span, "end"))
        if not start or not end:
            return None

        points = self._extract_geometry(placemark)
        if not points:
            return None

        return RawSegment(start=start, end=end, points=points, name=_child_text(placemark, "name"))

    def _extract_geometry(self, placemark: ET.Element) -> List[Tuple[float, float]]:
        """Returns the points of the placemark's geometry.

        Inside a MultiGeometry the first LineString wins; a Point is used
        only when the collection has no LineString.
        """
        for element in placemark:
            kind = _local_name(element.tag)
            if kind in ("Point", "LineString"):
                return _geometry_points(element)
            if kind == "MultiGeometry":
                parts = [e for e in element.iter() if _local_name(e.tag) in ("Point", "LineString")]
                lines = [e for e in parts if _local_name(e.tag) == "LineString"]
                for geometry in lines or parts:
                    points = _geometry_points(geometry)
                    if points:
                        return points
        return []

    # JSON

    def _load_json(self, path: Path) -> List[RawSegment]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise TimelineParseError(f"Invalid JSON format: {e}")
        except UnicodeDecodeError as e:
            raise TimelineParseError(f"Invalid file encoding: {e}")
        except FileNotFoundError:
            raise TimelineParseError(f"File not found: {path}")
        except OSError as e:
            raise TimelineParseError(f"Error reading file: {e}")

        # Takeout wraps the records, the on-device export is a bare list
        if isinstance(data, dict) and "semanticSegments" in data:
            data = data["semanticSegments"]

        if not isinstance(data, list):
            raise TimelineParseError("Expected a list of records in timeline JSON")

        segments = []
        for record in data:
            if not isinstance(record, dict):
                continue
            segment = self._extract_record(record)
            if segment:
                segments.append(segment)
        return segments

    def _extract_record(self, record: dict) -> Optional[RawSegment]:
        """Extracts a segment from a single record (visit, activity or path)."""
        start = _parse_timestamp(record.get("startTime"))
        end = _parse_timestamp(record.get("endTime"))
        if not start or not end:
            return None

        # Sub-objects can be null or of the wrong type
        if "visit" in record:
            top_candidate = _as_dict(_as_dict(record["visit"]).get("topCandidate"))
            coords = _json_coordinates(top_candidate.get("placeLocation"))
            if not coords:
                return None
            name = top_candidate.get("semanticType") or top_candidate.get("placeId")
            return RawSegment(start=start, end=end, points=[coords], name=name)

        if "activity" in record:
            activity = _as_dict(record["activity"])
            points = [
                c for c in (_json_coordinates(activity.get("start")), _json_coordinates(activity.get("end"))) if c
            ]
            if not points:
                return None
            name = _as_dict(activity.get("topCandidate")).get("type")
            return RawSegment(start=start, end=end, points=points, name=name)

        if "timelinePath" in record:
            path = record["timelinePath"]
            if not isinstance(path, list):
                return None
            points = [c for c in (_json_coordinates(_as_dict(p).get("point")) for p in path) if c]
            if not points:
                return None
            return RawSegment(start=start, end=end, points=points)

        return None

    # GPX

    def _load_gpx(self, path: Path) -> List[RawSegment]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                gpx = gpxpy.parse(f)
        except gpxpy.gpx.GPXException as e:
            raise TimelineParseError(f"Invalid GPX format: {e}")
        except UnicodeDecodeError as e:
            raise TimelineParseError(f"Invalid file encoding: {e}")
        except FileNotFoundError:
            raise TimelineParseError(f"File not found: {path}")
        except OSError as e:
            raise TimelineParseError(f"Error reading file: {e}")

        segments = []
        for track in gpx.tracks:
            for track_segment in track.segments:
                segments.extend(self._pair_points(track_segment.points, track.name))
        return segments

    def _pair_points(self, points: Iterable[gpxpy.gpx.GPXTrackPoint], name: Optional[str]) -> List[RawSegment]:
        """Turns consecutive timed track points into two-point segments."""
        timed = [p for p in points if p.time]
        segments = []
        for before, after in zip(timed, timed[1:]):
            segments.append(
                RawSegment(
                    start=_assume_utc(before.time),
                    end=_assume_utc(after.time),
                    points=[(before.latitude, before.longitude), (after.latitude, after.longitude)],
                    name=name,
                )
            )
        return segments


def _local_name(tag: str) -> str:
    """Tag name without its XML namespace."""
    return tag.rsplit("}", 1)[-1]


def _find_child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = _find_child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def _geometry_points(geometry: ET.Element) -> List[Tuple[float, float]]:
    text = _child_text(geometry, "coordinates")
    if not text:
        return []
    return _parse_kml_coordinates(text)


def _parse_kml_coordinates(text: str) -> List[Tuple[float, float]]:
    """Parses 'lng,lat[,alt]' tuples into (lat, lng) pairs."""
    points = []
    for chunk in text.split():
        parts = chunk.split(",")
        if len(parts) < 2:
            continue
        try:
            lng, lat = float(parts[0]), float(parts[1])
        except ValueError:
            continue
        points.append((lat, lng))
    return points


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _json_coordinates(value) -> Optional[Tuple[float, float]]:
    """Reads a 'geo:' string or a {'latLng': ...} object."""
    if isinstance(value, dict):
        value = value.get("latLng")
    if not isinstance(value, str):
        return None
    coords = GPSCoordinates.from_geo_string(value)
    if not coords:
        return None
    return coords.latitude, coords.longitude


def _assume_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """Parses an ISO 8601 timestamp; values without an offset are UTC."""
    if not timestamp_str:
        return None

    if timestamp_str.endswith("Z"):
        timestamp_str = timestamp_str[:-1] + "+00:00"

    try:
        return _assume_utc(datetime.fromisoformat(timestamp_str))
    except ValueError:
        return None
