"""
Network download of the prebuilt archive.

The archive is fetched with a single blocking HTTP GET and streamed to disk.
There is no timeout, retry or resumable transfer. Any failure aborts the
install and the next invocation starts from scratch.

The SHA-256 of the streamed bytes is computed on the fly so it can be
recorded next to the installed library. It is never compared against an
expected value.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from ortoolskit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    speed_bps: float  # bytes per second

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


@dataclass
class DownloadResult:
    """Result of a completed download."""

    path: Path
    size_bytes: int
    sha256: str


class StreamingHasher:
    """Compute a SHA-256 digest incrementally while streaming."""

    def __init__(self):
        self.hasher = hashlib.sha256()

    def update(self, data: bytes):
        """Add data to hash computation."""
        self.hasher.update(data)

    def finalize(self) -> str:
        """Get final hash value as hex string."""
        return self.hasher.hexdigest()


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> DownloadResult:
    """
    Download url into destination.

    Args:
        url: URL to download from
        destination: Local path to save file (overwritten if present)
        progress_callback: Optional callback for progress updates

    Returns:
        DownloadResult with path, size and SHA-256 of the body

    Raises:
        DownloadError: If the request fails or returns an error status
        OSError: If the destination can't be written
        ValueError: If URL or destination is empty

    Example:
        >>> result = download_file(ARCH_BINARIES, out_dir / "ortools.tar.gz")
        >>> result.size_bytes
        153092345
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    logger.info(f"Downloading from {url}")

    try:
        response = requests.get(url, stream=True, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e

    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    hasher = StreamingHasher()
    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with response, open(destination, "wb") as f:
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                hasher.update(chunk)
                downloaded += len(chunk)

                # Report progress (max once per 0.5 seconds to avoid spam)
                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5
                    or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size,
                            speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                        )
                    )
                    last_progress_time = current_time
        except RequestException as e:
            raise DownloadError(f"Connection lost while downloading {url}: {e}") from e

    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return DownloadResult(
        path=destination, size_bytes=downloaded, sha256=hasher.finalize()
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 1048576)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        mb_total = progress.total_bytes / 1024 / 1024
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
