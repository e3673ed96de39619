"""
Concurrent access control for the library install.

Two build processes pointed at the same output directory would otherwise
race on the download, the extraction and the final rename. The install is
serialized with a file lock stored next to the library directory.

The lock is only taken when the library is missing, so a warm cache
never creates a lock file.

Usage:
    coordinator = InstallCoordinator(LockManager(out_dir))
    with coordinator.coordinate_install(layout.root) as should_install:
        if should_install:
            install(...)
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from ortoolskit.core.exceptions import InstallLockTimeout

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 600


class LockManager:
    """
    Manages install locks inside a directory.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic cleanup on process death.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Path):
        self.lock_dir = Path(lock_dir)

    def lock_path(self, name: str) -> Path:
        safe_name = name.replace("/", "-").replace("\\", "-").replace(":", "-")
        return self.lock_dir / f"{safe_name}.lock"

    @contextmanager
    def install_lock(self, name: str, timeout: float = DEFAULT_LOCK_TIMEOUT):
        """
        Acquire the install lock for name.

        Args:
            name: Name of the installed directory (e.g., 'ortools')
            timeout: Maximum wait time in seconds

        Raises:
            InstallLockTimeout: If lock can't be acquired within timeout
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        lock_path = self.lock_path(name)
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {lock_path}")
                yield
                logger.debug(f"Released install lock: {lock_path}")
        except LockTimeout as e:
            raise InstallLockTimeout(
                f"Could not acquire install lock {lock_path} after {timeout}s. "
                "Another build may be installing into the same directory."
            ) from e


class InstallCoordinator:
    """
    Decide whether this process has to install the library.

    If the destination already exists nothing needs to be done. Otherwise
    the install lock is acquired and the destination checked again, so a
    process that waited for another one to finish sees the finished install.
    """

    def __init__(self, lock_manager: LockManager, timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.lock_manager = lock_manager
        self.timeout = timeout

    @contextmanager
    def coordinate_install(self, destination: Path):
        """
        Yields:
            bool: True if this process should install, False otherwise
        """
        # Quick check without lock
        if destination.exists():
            logger.debug(f"Destination already exists, no install needed: {destination}")
            yield False
            return

        with self.lock_manager.install_lock(destination.name, timeout=self.timeout):
            if destination.exists():
                logger.info(f"Another process completed install: {destination}")
                yield False
            else:
                yield True
