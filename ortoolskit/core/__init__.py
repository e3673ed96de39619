"""
Core functionality for ortoolskit.

This package contains the foundational modules the install pipeline
depends on: platform resolution, download, extraction, layout
normalization, cache state and locking.
"""

from .cache import (
    CacheMarker,
    CacheState,
    inspect_cache,
    read_cache_marker,
    write_cache_marker,
)

from .exceptions import (
    OrToolsKitError,
    ConfigurationError,
    UnsupportedPlatformError,
    InstallError,
    DownloadError,
    FilesystemError,
    ArchiveExtractionError,
    InsecureArchiveError,
    ExtractedLibsNotFoundError,
    AmbiguousExtractionError,
    InstallLockTimeout,
    BuildError,
    CompileError,
    SchemaCompileError,
)

from .layout import (
    NormalizedLibraryLayout,
    find_extracted_directory,
    normalize_extracted_directory,
)

from .locking import (
    LockManager,
    InstallCoordinator,
)

from .platform import (
    PlatformFamily,
    PlatformDescriptor,
    classify_os,
    detect_platform,
    lookup_artifact_location,
    resolve_artifact_location,
    clear_platform_cache,
)

__all__ = [
    "CacheMarker",
    "CacheState",
    "inspect_cache",
    "read_cache_marker",
    "write_cache_marker",
    "OrToolsKitError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "InstallError",
    "DownloadError",
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "ExtractedLibsNotFoundError",
    "AmbiguousExtractionError",
    "InstallLockTimeout",
    "BuildError",
    "CompileError",
    "SchemaCompileError",
    "NormalizedLibraryLayout",
    "find_extracted_directory",
    "normalize_extracted_directory",
    "LockManager",
    "InstallCoordinator",
    "PlatformFamily",
    "PlatformDescriptor",
    "classify_os",
    "detect_platform",
    "lookup_artifact_location",
    "resolve_artifact_location",
    "clear_platform_cache",
]
