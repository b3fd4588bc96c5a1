"""Tests for capture time resolution."""

from datetime import datetime, timedelta, timezone

import pytest
from geostamp.core.exceptions import GeostampError
from geostamp.services.time_resolver import TimeResolver, parse_exif_datetime, parse_offset


class TestParseOffset:
    """Tests for parse_offset."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("+02:00", timedelta(hours=2)),
            ("-05:30", -timedelta(hours=5, minutes=30)),
            ("+0545", timedelta(hours=5, minutes=45)),
            ("-3", timedelta(hours=-3)),
            ("Z", timedelta(0)),
        ],
    )
    def test_valid(self, text, expected):
        """Test recognized offset forms."""
        assert parse_offset(text) == expected

    def test_sign_applies_to_minutes(self):
        """Test that a negative offset also negates its minutes."""
        assert parse_offset("-00:30") == timedelta(minutes=-30)

    @pytest.mark.parametrize("text", ["", "02:00", "+2:5", "+15:00", "east"])
    def test_invalid(self, text):
        """Test that malformed offsets are rejected."""
        with pytest.raises(GeostampError):
            parse_offset(text)


class TestParseExifDatetime:
    """Tests for parse_exif_datetime."""

    def test_valid(self):
        """Test the standard EXIF format."""
        assert parse_exif_datetime("2017:04:05 14:32:00") == datetime(2017, 4, 5, 14, 32, 0)

    def test_with_trailing_data(self):
        """Test values with subseconds or an offset appended."""
        assert parse_exif_datetime("2017:04:05 14:32:00.45+02:00") == datetime(2017, 4, 5, 14, 32, 0)

    def test_invalid(self):
        """Test an unparseable value."""
        assert parse_exif_datetime("0000:00:00 00:00:00") is None


class TestTimeResolver:
    """Tests for TimeResolver."""

    def test_offset_tag(self):
        """Test that local time minus the offset gives UTC."""
        resolver = TimeResolver()
        result = resolver.resolve({"DateTimeOriginal": "2017:04:05 14:32:00", "OffsetTimeOriginal": "+02:00"})

        assert result == datetime(2017, 4, 5, 12, 32, 0, tzinfo=timezone.utc)

    def test_negative_offset_with_minutes(self):
        """Test a negative offset with a minute part."""
        resolver = TimeResolver()
        result = resolver.resolve({"DateTimeOriginal": "2017:04:05 14:32:00", "OffsetTime": "-03:30"})

        assert result == datetime(2017, 4, 5, 18, 2, 0, tzinfo=timezone.utc)

    def test_numeric_timezone(self):
        """Test a Canon TimeZone value in minutes."""
        resolver = TimeResolver()
        result = resolver.resolve({"DateTimeOriginal": "2017:04:05 14:32:00", "TimeZone": -60})

        assert result == datetime(2017, 4, 5, 15, 32, 0, tzinfo=timezone.utc)

    def test_default_offset(self):
        """Test the configured offset for photos without a timezone."""
        resolver = TimeResolver(default_offset=timedelta(hours=1))
        result = resolver.resolve({"DateTimeOriginal": "2017:04:05 14:32:00"})

        assert result == datetime(2017, 4, 5, 13, 32, 0, tzinfo=timezone.utc)

    def test_no_offset_is_utc(self):
        """Test that without any offset the local time is taken as UTC."""
        result = TimeResolver().resolve({"DateTimeOriginal": "2017:04:05 14:32:00"})

        assert result == datetime(2017, 4, 5, 14, 32, 0, tzinfo=timezone.utc)

    def test_tag_priority(self):
        """Test that DateTimeOriginal wins over the other timestamps."""
        result = TimeResolver().resolve(
            {
                "ModifyDate": "2020:01:01 00:00:00",
                "CreateDate": "2019:01:01 00:00:00",
                "DateTimeOriginal": "2017:04:05 14:32:00",
            }
        )

        assert result.year == 2017

    def test_fallback_to_modify_date(self):
        """Test the last-resort ModifyDate."""
        result = TimeResolver().resolve({"DateTimeOriginal": "garbage", "ModifyDate": "2020:01:01 10:00:00"})

        assert result == datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_invalid_offset_uses_default(self):
        """Test that an unparseable offset tag falls back to the default."""
        resolver = TimeResolver(default_offset=timedelta(hours=2))
        result = resolver.resolve({"DateTimeOriginal": "2017:04:05 14:32:00", "OffsetTimeOriginal": "bogus"})

        assert result == datetime(2017, 4, 5, 12, 32, 0, tzinfo=timezone.utc)

    def test_no_timestamp(self):
        """Test metadata without any timestamp."""
        assert TimeResolver().resolve({"OffsetTime": "+02:00"}) is None
