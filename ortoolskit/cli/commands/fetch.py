"""
Fetch command implementation.

Downloads, extracts and normalizes the prebuilt library.
"""

import logging

from ortoolskit.cli.utils import format_size, load_build_config
from ortoolskit.core.download import DownloadProgress
from ortoolskit.library.installer import LibraryInstaller

logger = logging.getLogger(__name__)


def _log_progress(progress: DownloadProgress) -> None:
    logger.info(f"  {progress}")


def run(args) -> int:
    """
    Run the fetch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_build_config(args)
    installer = LibraryInstaller(config.out_dir, lock_timeout=config.lock_timeout)
    result = installer.ensure_installed(progress_callback=_log_progress)

    if not result.was_cached:
        logger.info(
            f"Installed {format_size(result.total_size_bytes)} from {result.source_url}"
        )
    print(result.layout.root)
    return 0
