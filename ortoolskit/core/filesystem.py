"""
File system utilities for ortoolskit.

This module provides the file operations the install pipeline needs:
- gzip-compressed tar extraction with path validation
- staging directories inside the working directory
- safe deletion and atomic writes
- executable lookup on PATH
"""

import gzip
import logging
import os
import shutil
import sys
import tarfile
import tempfile
import zlib
from pathlib import Path
from typing import Optional, Union

from ortoolskit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def find_executable(
    name: str, search_paths: Optional[list[Path]] = None
) -> Optional[Path]:
    """
    Find an executable in the system PATH or provided search paths.

    Absolute or relative paths containing a separator are checked as-is.

    Args:
        name: Executable name (e.g., 'c++', 'protoc') or path
        search_paths: Optional list of directories to search

    Returns:
        Path to executable if found, None otherwise

    Example:
        >>> find_executable('protoc')
        PosixPath('/usr/bin/protoc')
    """
    candidate = Path(name)
    if candidate.parent != Path("."):
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
        return None

    if search_paths is None:
        path_env = os.environ.get("PATH", "")
        search_paths = [Path(p) for p in path_env.split(os.pathsep) if p]

    for directory in search_paths:
        exe_path = directory / name
        if exe_path.is_file() and os.access(exe_path, os.X_OK):
            return exe_path

    return None


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_tar_gz(archive_path: Union[str, Path], destination: Union[str, Path]) -> int:
    """
    Extract a gzip-compressed tar archive into destination.

    The archive is read through a gzip decompression stream; a malformed
    gzip or tar stream is reported as ArchiveExtractionError. All member
    paths are validated before anything is written.

    Args:
        archive_path: Path to the .tar.gz file
        destination: Directory to extract into (created if missing)

    Returns:
        Number of archive members extracted

    Raises:
        ArchiveExtractionError: If the archive is missing or malformed
        InsecureArchiveError: If the archive contains malicious paths
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with gzip.open(archive_path, "rb") as stream:
            with tarfile.open(fileobj=stream, mode="r:") as tar:
                members = tar.getmembers()
                for member in members:
                    _validate_archive_path(member.name, destination)

                if sys.version_info >= (3, 12):
                    tar.extractall(destination, filter="data")
                else:
                    tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {len(members)} members into {destination}")
    return len(members)


# ============================================================================
# Safe File Operations
# ============================================================================


def create_staging_directory(parent: Path, prefix: str) -> Path:
    """
    Create a fresh, uniquely named directory under parent.

    Args:
        parent: Directory to create the staging directory in
        prefix: Name prefix (e.g., '.ortools-staging-')

    Returns:
        Path to the new, empty directory
    """
    parent.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=prefix, dir=parent))


def atomic_write(
    file_path: Union[str, Path], content: str, encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write('marker.json', '{"version": "9.14"}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory so the rename stays on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "w", encoding=encoding) as f:
            f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree(out_dir / '.ortools-staging-x1y2', require_prefix=out_dir)
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def directory_size(path: Union[str, Path]) -> int:
    """
    Total size in bytes of all regular files below path.

    Returns:
        Size in bytes (0 if path doesn't exist)
    """
    path = Path(path)
    if not path.exists():
        return 0
    return sum(
        f.stat().st_size for f in path.rglob("*") if f.is_file() and not f.is_symlink()
    )
