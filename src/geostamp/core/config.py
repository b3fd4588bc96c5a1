"""Configuration for Geostamp."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

DEFAULT_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".tiff", ".tif", ".cr2", ".raw", ".dng"})


@dataclass
class Config:
    """Configuration for a tagging run."""

    # Folder with photos
    photos_dir: Path

    # Timeline file (KML, JSON or GPX)
    timeline_path: Path

    # Offset used when a photo carries no timezone of its own, e.g. "+02:00"
    default_offset: Optional[str] = None

    # Only report matches, do not touch the files
    dry_run: bool = False

    # Replace GPS that is already in the photo
    overwrite_gps: bool = False

    # Also write XMP sidecar files
    xmp: bool = False

    # Verbose mode
    verbose: bool = False

    # JSON file for the list of tagged coordinates
    export_path: Optional[Path] = None

    # File extensions considered photos (lowercase)
    extensions: FrozenSet[str] = field(default_factory=lambda: DEFAULT_EXTENSIONS)
