"""Generating XMP sidecar files."""

from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from geostamp.core.exceptions import ExifError
from geostamp.core.logger import log_call, log_result
from geostamp.models.location import GPSCoordinates


class XmpWriter:
    """Creates XMP sidecar files carrying a photo's GPS position."""

    XMP_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<x:xmpmeta xmlns:x="adobe:ns:meta/" x:xmptk="Geostamp">
  <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
    <rdf:Description rdf:about=""
      xmlns:exif="http://ns.adobe.com/exif/1.0/"
      xmlns:Iptc4xmpCore="http://iptc.org/std/Iptc4xmpCore/1.0/xmlns/">
      <exif:GPSVersionID>2.3.0.0</exif:GPSVersionID>
      <exif:GPSLatitude>{lat_dms}</exif:GPSLatitude>
      <exif:GPSLongitude>{lng_dms}</exif:GPSLongitude>
{location_section}
    </rdf:Description>
  </rdf:RDF>
</x:xmpmeta>"""

    LOCATION_SECTION = """      <Iptc4xmpCore:Location>{location}</Iptc4xmpCore:Location>"""

    def sidecar_path(self, photo_path: Path) -> Path:
        return photo_path.with_suffix(".xmp")

    def write(self, photo_path: Path, gps: GPSCoordinates, location_name: Optional[str] = None) -> Path:
        """Create an XMP sidecar file for a photo.

        Args:
            photo_path: Path to the original photo
            gps: GPS coordinates
            location_name: Place name (optional)

        Returns:
            Path to the created XMP file

        Raises:
            ExifError: If the sidecar cannot be written
        """
        log_call("XmpWriter", "write", file=photo_path.name, gps=str(gps), location_name=location_name)

        xmp_path = self.sidecar_path(photo_path)

        location_section = ""
        if location_name:
            location_section = self.LOCATION_SECTION.format(location=escape(location_name))

        xmp_content = self.XMP_TEMPLATE.format(
            lat_dms=self._format_gps_for_xmp(gps.latitude, "N", "S"),
            lng_dms=self._format_gps_for_xmp(gps.longitude, "E", "W"),
            location_section=location_section,
        )

        try:
            with open(xmp_path, "w", encoding="utf-8") as f:
                f.write(xmp_content)
        except OSError as e:
            raise ExifError(f"Error writing XMP sidecar {xmp_path.name}: {e}")

        log_result("XmpWriter", "write", xmp_path.name)
        return xmp_path

    def _format_gps_for_xmp(self, decimal: float, pos_ref: str, neg_ref: str) -> str:
        """Formats a GPS coordinate into XMP format (DD,MM.MMM[N|S|E|W])."""
        ref = pos_ref if decimal >= 0 else neg_ref
        decimal = abs(decimal)

        degrees = int(decimal)
        minutes = (decimal - degrees) * 60

        return f"{degrees},{minutes:.6f}{ref}"
