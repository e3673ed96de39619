"""
Resolve command implementation.

Shows which prebuilt archive the running (or a given) OS resolves to.
"""

import logging

from ortoolskit.cli.utils import print_error
from ortoolskit.core.platform import (
    classify_os,
    detect_platform,
    get_supported_platforms,
    lookup_artifact_location,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the platform is supported)
    """
    if args.os_name:
        descriptor = classify_os(args.os_name)
    else:
        descriptor = detect_platform()

    url = lookup_artifact_location(descriptor)
    if url is None:
        print_error(
            f"support for {descriptor.os_name} operating system is not implemented",
            f"Supported: {', '.join(get_supported_platforms())}",
        )
        return 1

    print(f"OS:       {descriptor.os_name}")
    print(f"Platform: {descriptor.family.value}")
    print(f"Archive:  {url}")
    return 0
