"""
Normalized on-disk layout of the installed library.

Upstream archives unpack into a version-named top-level directory whose
name differs per platform (e.g. 'or-tools_x86_64_Debian-12_cpp_v9.14.6206').
Normalization renames that directory to a fixed path so that every later
build step can rely on '<out_dir>/ortools/include' and
'<out_dir>/ortools/lib'.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Pattern, Union

from ortoolskit.core.exceptions import (
    AmbiguousExtractionError,
    ExtractedLibsNotFoundError,
)
from ortoolskit.core.platform import ORTOOLS_VERSION

logger = logging.getLogger(__name__)

LIBRARY_DIR_NAME = "ortools"

EXTRACTED_DIR_PATTERN = re.compile(
    r"or.*?tools.*?" + re.escape(ORTOOLS_VERSION)
)


@dataclass(frozen=True)
class NormalizedLibraryLayout:
    """
    Fixed-path layout of the installed library.

    Attributes:
        root: Normalized library directory (independent of archive naming)
    """

    root: Path

    @classmethod
    def in_directory(cls, out_dir: Union[str, Path]) -> "NormalizedLibraryLayout":
        """Layout rooted at '<out_dir>/ortools'."""
        return cls(root=Path(out_dir) / LIBRARY_DIR_NAME)

    @property
    def include_dir(self) -> Path:
        return self.root / "include"

    @property
    def lib_dir(self) -> Path:
        return self.root / "lib"

    def exists(self) -> bool:
        return self.root.exists()


def find_extracted_directories(
    work_dir: Path, pattern: Pattern[str] = EXTRACTED_DIR_PATTERN
) -> List[Path]:
    """
    List immediate child directories of work_dir whose name matches pattern.

    Returns:
        Matching directories, sorted by name
    """
    return sorted(
        entry
        for entry in Path(work_dir).iterdir()
        if entry.is_dir() and pattern.search(entry.name)
    )


def find_extracted_directory(
    work_dir: Path, pattern: Pattern[str] = EXTRACTED_DIR_PATTERN
) -> Path:
    """
    Find the single extracted library directory in work_dir.

    Args:
        work_dir: Directory the archive was extracted into
        pattern: Version-anchored directory name pattern

    Returns:
        Path to the matching directory

    Raises:
        ExtractedLibsNotFoundError: If nothing matches
        AmbiguousExtractionError: If more than one directory matches
    """
    matches = find_extracted_directories(work_dir, pattern)

    if not matches:
        raise ExtractedLibsNotFoundError(work_dir)
    if len(matches) > 1:
        raise AmbiguousExtractionError(matches)
    return matches[0]


def normalize_extracted_directory(
    work_dir: Path,
    target: Path,
    pattern: Pattern[str] = EXTRACTED_DIR_PATTERN,
) -> Path:
    """
    Rename the extracted library directory in work_dir to target.

    Nothing is changed on disk unless exactly one directory matches.

    Args:
        work_dir: Directory the archive was extracted into
        target: Fixed destination path
        pattern: Version-anchored directory name pattern

    Returns:
        target

    Raises:
        ExtractedLibsNotFoundError: If nothing matches
        AmbiguousExtractionError: If more than one directory matches
        OSError: If the rename fails
    """
    extracted = find_extracted_directory(work_dir, pattern)
    logger.debug(f"Renaming {extracted} -> {target}")
    extracted.rename(target)
    return target
