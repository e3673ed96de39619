"""
Prebuilt OR-Tools library installation.
"""

from .installer import (
    ARCHIVE_FILE_NAME,
    InstallResult,
    LibraryInstaller,
)

__all__ = [
    "ARCHIVE_FILE_NAME",
    "InstallResult",
    "LibraryInstaller",
]
