"""Resolving photo capture time to a UTC instant."""

import re
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from geostamp.core.exceptions import GeostampError
from geostamp.core.logger import log_warning

# Tag priority, highest first (exiftool names)
TIMESTAMP_TAGS = ("DateTimeOriginal", "CreateDate", "ModifyDate")
OFFSET_TAGS = ("OffsetTimeOriginal", "OffsetTime", "TimeZone")

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

_OFFSET_RE = re.compile(r"^([+-])(\d{1,2})(?::?(\d{2}))?$")


def parse_offset(text: str) -> timedelta:
    """Parses a UTC offset such as "+02:00", "-05:30", "+0100" or "Z".

    The sign applies to the whole offset, minutes included.

    Raises:
        GeostampError: If the offset is not recognized
    """
    value = text.strip()
    if value.upper() == "Z":
        return timedelta(0)

    match = _OFFSET_RE.match(value)
    if not match:
        raise GeostampError(f"Invalid UTC offset: {text!r}")

    sign, hours, minutes = match.groups()
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    if offset > timedelta(hours=14):
        raise GeostampError(f"UTC offset out of range: {text!r}")
    return -offset if sign == "-" else offset


def parse_exif_datetime(text: str) -> Optional[datetime]:
    """Parses an EXIF "YYYY:MM:DD hh:mm:ss" value (naive, local time)."""
    # Some cameras append subseconds or an offset after the seconds
    try:
        return datetime.strptime(text.strip()[:19], EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


class TimeResolver:
    """Turns a photo's date/time tags into the UTC instant it was taken."""

    def __init__(self, default_offset: Optional[timedelta] = None):
        """
        Args:
            default_offset: Offset for photos that record no timezone;
                None means their local time is taken as UTC
        """
        self.default_offset = default_offset

    def resolve(self, tags: Mapping[str, object]) -> Optional[datetime]:
        """Resolves the capture time from metadata tags.

        Args:
            tags: Metadata values keyed by exiftool tag name

        Returns:
            Timezone-aware UTC datetime, or None if there is no usable timestamp
        """
        local = None
        for name in TIMESTAMP_TAGS:
            value = tags.get(name)
            if value:
                local = parse_exif_datetime(str(value))
                if local:
                    break

        if local is None:
            return None

        offset = self._offset_from_tags(tags)
        # local = UTC + offset
        return (local - offset).replace(tzinfo=timezone.utc)

    def _offset_from_tags(self, tags: Mapping[str, object]) -> timedelta:
        for name in OFFSET_TAGS:
            value = tags.get(name)
            if value is None or value == "":
                continue
            # exiftool -n reports Canon TimeZone in minutes
            if isinstance(value, (int, float)):
                return timedelta(minutes=value)
            try:
                return parse_offset(str(value))
            except GeostampError as e:
                log_warning(f"{e}, using the default offset")
                break

        return self.default_offset or timedelta(0)
