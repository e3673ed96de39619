"""
Verify command implementation.

Reports the cache state and provenance of the installed library.
"""

import logging

from ortoolskit.cli.utils import format_size, load_build_config
from ortoolskit.core.cache import CacheState, inspect_cache, read_cache_marker
from ortoolskit.core.filesystem import directory_size
from ortoolskit.core.layout import NormalizedLibraryLayout
from ortoolskit.core.platform import ORTOOLS_VERSION

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the library is installed with a complete layout)
    """
    config = load_build_config(args)
    layout = NormalizedLibraryLayout.in_directory(config.out_dir)
    state = inspect_cache(layout)

    print(f"Library: {layout.root}")
    print(f"State:   {state.value}")
    if state is CacheState.ABSENT:
        return 1

    ok = True
    for name, path in (("include", layout.include_dir), ("lib", layout.lib_dir)):
        present = path.is_dir()
        ok = ok and present
        print(f"  {name + '/':10} {'ok' if present else 'MISSING'}")
    print(f"  size:      {format_size(directory_size(layout.root))}")

    marker = read_cache_marker(layout)
    if marker is None:
        print("  marker:    none")
    else:
        print(f"  version:   {marker.version}")
        print(f"  source:    {marker.source_url}")
        print(f"  sha256:    {marker.archive_sha256}")
        print(f"  installed: {marker.installed_at}")
        if marker.version != ORTOOLS_VERSION:
            logger.warning(
                f"Installed version {marker.version} differs from expected "
                f"{ORTOOLS_VERSION}; remove {layout.root} to reinstall"
            )

    return 0 if ok else 1
