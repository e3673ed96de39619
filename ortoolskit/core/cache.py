"""
Cache state of the installed library.

The cache is valid exactly when the normalized library directory exists.
There is no invalidation: once present, the directory is trusted for the
lifetime of the output directory.

A small JSON marker recording where the library came from is written into
the library directory once it is in place. The marker is
informational only and is never used to decide the cache state.

Example:
    >>> layout = NormalizedLibraryLayout.in_directory(out_dir)
    >>> if inspect_cache(layout) is CacheState.ABSENT:
    ...     install(...)
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from ortoolskit.core.filesystem import atomic_write
from ortoolskit.core.layout import NormalizedLibraryLayout

logger = logging.getLogger(__name__)

MARKER_FILE_NAME = ".ortoolskit.json"


class CacheState(Enum):
    """Presence of the normalized library directory."""

    ABSENT = "absent"
    PRESENT = "present"


@dataclass
class CacheMarker:
    """Provenance of an installed library directory."""

    version: str
    source_url: str
    archive_sha256: str
    installed_at: str

    @classmethod
    def create(cls, version: str, source_url: str, archive_sha256: str) -> "CacheMarker":
        return cls(
            version=version,
            source_url=source_url,
            archive_sha256=archive_sha256,
            installed_at=datetime.now(timezone.utc).isoformat(),
        )


def inspect_cache(layout: NormalizedLibraryLayout) -> CacheState:
    """
    Determine the cache state from filesystem presence only.

    This performs no writes.
    """
    if layout.exists():
        return CacheState.PRESENT
    return CacheState.ABSENT


def write_cache_marker(library_dir: Path, marker: CacheMarker) -> Path:
    """
    Write the marker file into library_dir.

    Returns:
        Path to the marker file
    """
    marker_path = Path(library_dir) / MARKER_FILE_NAME
    atomic_write(marker_path, json.dumps(asdict(marker), indent=2) + "\n")
    logger.debug(f"Wrote cache marker: {marker_path}")
    return marker_path


def read_cache_marker(layout: NormalizedLibraryLayout) -> Optional[CacheMarker]:
    """
    Read the marker of an installed library.

    Returns:
        CacheMarker, or None if there is no readable marker
    """
    marker_path = layout.root / MARKER_FILE_NAME
    if not marker_path.is_file():
        return None

    try:
        data = json.loads(marker_path.read_text(encoding="utf-8"))
        return CacheMarker(**data)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Ignoring unreadable cache marker {marker_path}: {e}")
        return None
