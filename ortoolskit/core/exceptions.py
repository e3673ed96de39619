"""
Centralized exception hierarchy for ortoolskit.

Every failure in the install and build pipeline is fatal; callers are
expected to let these propagate up to the CLI, which maps them to a
non-zero exit code.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class OrToolsKitError(Exception):
    """Base exception for all ortoolskit errors."""

    pass


class ConfigurationError(OrToolsKitError):
    """Raised when the build environment or config file is invalid."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatformError(OrToolsKitError):
    """Raised when no prebuilt distribution exists for the running OS."""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(
            f"support for {os_name} operating system is not implemented"
        )


# ============================================================================
# Install Exceptions
# ============================================================================


class InstallError(OrToolsKitError):
    """Base exception for fetch/extract/normalize failures."""

    pass


class DownloadError(InstallError):
    """Raised when the prebuilt archive cannot be downloaded."""

    pass


class FilesystemError(InstallError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class ExtractedLibsNotFoundError(InstallError):
    """Raised when no extracted directory matches the expected naming."""

    def __init__(self, work_dir):
        self.work_dir = work_dir
        super().__init__(f"cannot find extracted libs in {work_dir}")


class AmbiguousExtractionError(InstallError):
    """Raised when more than one extracted directory matches."""

    def __init__(self, matches):
        self.matches = list(matches)
        names = ", ".join(sorted(p.name for p in self.matches))
        super().__init__(f"found more than one extracted libs directory: {names}")


class InstallLockTimeout(InstallError):
    """Raised when the install lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Build Exceptions
# ============================================================================


class BuildError(OrToolsKitError):
    """Base exception for native build steps."""

    pass


class CompileError(BuildError):
    """Raised when the native adapter fails to compile or archive."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class SchemaCompileError(BuildError):
    """Raised when the external schema compiler fails."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)
