"""
Build command implementation.

Runs the full pipeline: schemas, library install, adapter, linker directives.
"""

import logging

from ortoolskit.cli.utils import load_build_config
from ortoolskit.pipeline import BuildPipeline

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_build_config(args)
    result = BuildPipeline(config).run()

    if result.adapter_archive:
        logger.info(f"Adapter archive: {result.adapter_archive}")
    return 0
