"""Custom exceptions for Geostamp."""


class GeostampError(Exception):
    """Base exception for Geostamp."""

    pass


class MalformedTrackError(GeostampError):
    """Track segment is structurally invalid (no points, end before start)."""

    pass


class TimelineParseError(GeostampError):
    """Error while reading or decoding a timeline file."""

    pass


class ExifError(GeostampError):
    """Error while writing photo metadata."""

    pass
