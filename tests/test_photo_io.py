"""Tests for reading and writing photo metadata."""

from datetime import datetime, timezone

import piexif
import pytest
from geostamp.core.exceptions import ExifError
from geostamp.models.location import GPSCoordinates
from geostamp.services import exif_writer, photo_scanner
from geostamp.services.exif_writer import ExifWriter
from geostamp.services.photo_scanner import PhotoScanner
from geostamp.services.xmp_writer import XmpWriter


@pytest.fixture
def no_exiftool(monkeypatch):
    monkeypatch.setattr(exif_writer, "is_exiftool_available", lambda: False)
    monkeypatch.setattr(photo_scanner, "is_exiftool_available", lambda: False)


class TestPhotoScanner:
    """Tests for PhotoScanner."""

    def test_scan_filters_and_sorts(self, tmp_path, no_exiftool):
        """Test that only photo files are listed, by name."""
        for name in ["b.JPG", "a.dng", "notes.txt", "c.png"]:
            (tmp_path / name).write_bytes(b"not really an image")
        (tmp_path / "folder.jpg").mkdir()

        photos = PhotoScanner().scan(tmp_path)

        assert [p.filename for p in photos] == ["a.dng", "b.JPG", "c.png"]
        assert all(p.timestamp is None for p in photos)

    def test_tags_from_exif(self):
        """Test mapping a piexif dict to tag names."""
        exif_dict = {
            "0th": {piexif.ImageIFD.DateTime: b"2017:04:05 18:00:00"},
            "Exif": {
                piexif.ExifIFD.DateTimeOriginal: b"2017:04:05 14:32:00",
                piexif.ExifIFD.OffsetTimeOriginal: b"+02:00\x00",
            },
            "GPS": {
                piexif.GPSIFD.GPSLatitude: ((50, 1), (4, 1), (321, 100)),
                piexif.GPSIFD.GPSLatitudeRef: b"N",
                piexif.GPSIFD.GPSLongitude: ((15, 1), (45, 1), (0, 1)),
                piexif.GPSIFD.GPSLongitudeRef: b"W",
            },
        }

        tags = PhotoScanner()._tags_from_exif(exif_dict)

        assert tags["DateTimeOriginal"] == "2017:04:05 14:32:00"
        assert tags["ModifyDate"] == "2017:04:05 18:00:00"
        assert tags["OffsetTimeOriginal"] == "+02:00"
        assert tags["GPSLatitude"] == pytest.approx(50 + 4 / 60 + 3.21 / 3600)
        assert tags["GPSLongitude"] == pytest.approx(-15.75)

    def test_read_photo_resolves_time(self, tmp_path, monkeypatch):
        """Test that a photo gets its UTC capture time and existing GPS."""
        path = tmp_path / "a.jpg"
        path.write_bytes(b"")
        scanner = PhotoScanner()
        monkeypatch.setattr(
            scanner,
            "_read_tags",
            lambda p: {
                "DateTimeOriginal": "2017:04:05 14:32:00",
                "OffsetTimeOriginal": "+02:00",
                "GPSLatitude": 50.0,
                "GPSLongitude": 14.0,
            },
        )

        photo = scanner.read_photo(path)

        assert photo.timestamp == datetime(2017, 4, 5, 12, 32, 0, tzinfo=timezone.utc)
        assert photo.original_gps == GPSCoordinates(latitude=50.0, longitude=14.0)

    def test_time_zone_from_maker_notes(self, tmp_path, monkeypatch):
        """Test that exiftool fills in an offset piexif cannot see."""
        path = tmp_path / "IMG_0001.JPG"
        path.write_bytes(b"")
        exif_dict = {"0th": {}, "Exif": {piexif.ExifIFD.DateTimeOriginal: b"2017:04:05 14:32:00"}, "GPS": {}}
        monkeypatch.setattr(piexif, "load", lambda p: exif_dict)
        monkeypatch.setattr(photo_scanner, "is_exiftool_available", lambda: True)
        monkeypatch.setattr(
            photo_scanner,
            "read_exiftool_tags",
            lambda p, tags: {"DateTimeOriginal": "2017:04:05 18:00:00", "TimeZone": 120},
        )

        photo = PhotoScanner().read_photo(path)

        assert photo.timestamp == datetime(2017, 4, 5, 12, 32, 0, tzinfo=timezone.utc)

    def test_exif_offset_skips_exiftool(self, tmp_path, monkeypatch):
        """Test that exiftool is not run when piexif already has an offset."""
        path = tmp_path / "a.jpg"
        path.write_bytes(b"")
        exif_dict = {
            "Exif": {
                piexif.ExifIFD.DateTimeOriginal: b"2017:04:05 14:32:00",
                piexif.ExifIFD.OffsetTimeOriginal: b"+01:00",
            }
        }
        calls = []
        monkeypatch.setattr(piexif, "load", lambda p: exif_dict)
        monkeypatch.setattr(photo_scanner, "is_exiftool_available", lambda: True)
        monkeypatch.setattr(photo_scanner, "read_exiftool_tags", lambda p, tags: calls.append(p) or {})

        photo = PhotoScanner().read_photo(path)

        assert photo.timestamp == datetime(2017, 4, 5, 13, 32, 0, tzinfo=timezone.utc)
        assert calls == []


class TestExifWriter:
    """Tests for ExifWriter without exiftool."""

    def test_supports_in_place(self, tmp_path, no_exiftool):
        """Test which files piexif can write."""
        writer = ExifWriter()
        assert writer.supports_in_place(tmp_path / "a.JPG")
        assert not writer.supports_in_place(tmp_path / "a.cr2")

    def test_unsupported_format(self, tmp_path, no_exiftool):
        """Test that a RAW file cannot be written without exiftool."""
        with pytest.raises(ExifError):
            ExifWriter().write(tmp_path / "a.cr2", GPSCoordinates(latitude=1.0, longitude=2.0))

    def test_invalid_jpeg(self, tmp_path, no_exiftool):
        """Test that a broken JPEG raises ExifError."""
        path = tmp_path / "a.jpg"
        path.write_bytes(b"garbage")

        with pytest.raises(ExifError):
            ExifWriter().write(path, GPSCoordinates(latitude=1.0, longitude=2.0))

    def test_write_gps_keeps_other_tags(self):
        """Test that GPS refs follow the sign and other GPS tags survive."""
        exif_dict = {"GPS": {piexif.GPSIFD.GPSAltitude: (300, 1)}}

        ExifWriter()._write_gps(exif_dict, GPSCoordinates(latitude=-33.8688, longitude=151.2093))

        gps = exif_dict["GPS"]
        assert gps[piexif.GPSIFD.GPSLatitudeRef] == b"S"
        assert gps[piexif.GPSIFD.GPSLongitudeRef] == b"E"
        assert gps[piexif.GPSIFD.GPSAltitude] == (300, 1)


class TestXmpWriter:
    """Tests for XmpWriter."""

    def test_write(self, tmp_path):
        """Test the sidecar content."""
        photo = tmp_path / "IMG_0001.CR2"

        xmp_path = XmpWriter().write(photo, GPSCoordinates(latitude=50.5, longitude=-14.25), "Café & Bar")

        assert xmp_path == tmp_path / "IMG_0001.xmp"
        content = xmp_path.read_text(encoding="utf-8")
        assert "<exif:GPSLatitude>50,30.000000N</exif:GPSLatitude>" in content
        assert "<exif:GPSLongitude>14,15.000000W</exif:GPSLongitude>" in content
        assert "Café &amp; Bar" in content

    def test_write_without_location(self, tmp_path):
        """Test a sidecar without a place name."""
        xmp_path = XmpWriter().write(tmp_path / "a.jpg", GPSCoordinates(latitude=1.0, longitude=2.0))

        assert "Iptc4xmpCore:Location>" not in xmp_path.read_text(encoding="utf-8")

    def test_write_error(self, tmp_path):
        """Test that an unwritable sidecar raises ExifError."""
        (tmp_path / "a.xmp").mkdir()

        with pytest.raises(ExifError):
            XmpWriter().write(tmp_path / "a.cr2", GPSCoordinates(latitude=1.0, longitude=2.0))
