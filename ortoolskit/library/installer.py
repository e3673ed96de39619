"""
Library download and installation.

This module orchestrates placing the prebuilt OR-Tools distribution in the
build output directory:

1. Check whether the normalized library directory already exists
2. Resolve the archive URL for the running platform
3. Download the archive into the output directory
4. Extract it into a fresh staging directory
5. Rename the extracted, version-named directory to the fixed layout path
6. Remove the temporary archive and staging directory

The final rename is the only step that touches the canonical path, so an
interrupted install never leaves something that looks like a valid cache.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ortoolskit.core.cache import CacheMarker, CacheState, inspect_cache, write_cache_marker
from ortoolskit.core.download import DownloadProgress, download_file
from ortoolskit.core.filesystem import (
    create_staging_directory,
    directory_size,
    extract_tar_gz,
    safe_rmtree,
)
from ortoolskit.core.layout import NormalizedLibraryLayout, normalize_extracted_directory
from ortoolskit.core.locking import DEFAULT_LOCK_TIMEOUT, InstallCoordinator, LockManager
from ortoolskit.core.platform import (
    ORTOOLS_VERSION,
    PlatformDescriptor,
    detect_platform,
    resolve_artifact_location,
)

logger = logging.getLogger(__name__)

ARCHIVE_FILE_NAME = "ortools.tar.gz"
STAGING_PREFIX = ".ortools-staging-"


@dataclass
class InstallResult:
    """Result of an install operation."""

    layout: NormalizedLibraryLayout
    """Normalized library layout"""

    was_cached: bool
    """Whether the library was already present (nothing downloaded)"""

    source_url: Optional[str] = None
    """Archive URL, when a download happened"""

    download_time: float = 0.0
    """Time spent downloading in seconds"""

    extraction_time: float = 0.0
    """Time spent extracting and normalizing in seconds"""

    total_size_bytes: int = 0
    """Size of the installed library, when a download happened"""


class LibraryInstaller:
    """
    Installs the prebuilt library into an output directory.

    Example:
        >>> installer = LibraryInstaller(Path(os.environ["OUT_DIR"]))
        >>> result = installer.ensure_installed()
        >>> print(result.layout.include_dir)
    """

    def __init__(
        self,
        out_dir: Path,
        descriptor: Optional[PlatformDescriptor] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        """
        Initialize installer.

        Args:
            out_dir: Build output directory (also the working directory)
            descriptor: Platform to install for. If None, detects the running OS
                when an install is needed.
            lock_timeout: Seconds to wait for a concurrent install to finish
        """
        self.out_dir = Path(out_dir)
        self.layout = NormalizedLibraryLayout.in_directory(self.out_dir)
        self.descriptor = descriptor
        self.coordinator = InstallCoordinator(LockManager(self.out_dir), lock_timeout)

    @property
    def archive_path(self) -> Path:
        return self.out_dir / ARCHIVE_FILE_NAME

    def cache_state(self) -> CacheState:
        return inspect_cache(self.layout)

    def ensure_installed(
        self,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> InstallResult:
        """
        Make sure the normalized library exists, installing it if needed.

        On a warm cache this performs no network access and no writes.

        Args:
            progress_callback: Optional callback for download progress

        Returns:
            InstallResult

        Raises:
            UnsupportedPlatformError: If the platform has no prebuilt archive
            DownloadError: If the download fails
            ArchiveExtractionError: If the archive is malformed
            ExtractedLibsNotFoundError: If the archive has no library directory
            AmbiguousExtractionError: If the archive has several candidates
        """
        if self.cache_state() is CacheState.PRESENT:
            logger.info(f"OR-Tools already installed: {self.layout.root}")
            return InstallResult(layout=self.layout, was_cached=True)

        descriptor = self.descriptor or detect_platform()
        url = resolve_artifact_location(descriptor)

        with self.coordinator.coordinate_install(self.layout.root) as should_install:
            if not should_install:
                return InstallResult(layout=self.layout, was_cached=True)
            return self._install(descriptor, url, progress_callback)

    def _install(
        self,
        descriptor: PlatformDescriptor,
        url: str,
        progress_callback: Optional[Callable[[DownloadProgress], None]],
    ) -> InstallResult:
        logger.info(f"Installing OR-Tools v{ORTOOLS_VERSION} for {descriptor}")

        self.out_dir.mkdir(parents=True, exist_ok=True)
        staging_dir = create_staging_directory(self.out_dir, STAGING_PREFIX)

        try:
            # Phase 1: Download
            download_start = time.time()
            download = download_file(url, self.archive_path, progress_callback)
            download_time = time.time() - download_start
            logger.info(f"Download complete in {download_time:.2f}s")

            # Phase 2: Extract into staging, then move into place
            extraction_start = time.time()
            extract_tar_gz(self.archive_path, staging_dir)
            self.archive_path.unlink()

            normalize_extracted_directory(staging_dir, self.layout.root)
            write_cache_marker(
                self.layout.root,
                CacheMarker.create(ORTOOLS_VERSION, url, download.sha256),
            )
            extraction_time = time.time() - extraction_start
            logger.info(f"Extraction complete in {extraction_time:.2f}s")

        except Exception:
            logger.error(f"Installing OR-Tools into {self.out_dir} failed")
            raise

        finally:
            self.archive_path.unlink(missing_ok=True)
            safe_rmtree(staging_dir, require_prefix=self.out_dir)

        return InstallResult(
            layout=self.layout,
            was_cached=False,
            source_url=url,
            download_time=download_time,
            extraction_time=extraction_time,
            total_size_bytes=directory_size(self.layout.root),
        )
