"""
Protos command implementation.

Compiles the protocol schemas only.
"""

import logging

from ortoolskit.cli.utils import load_build_config
from ortoolskit.pipeline import BuildPipeline

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the protos command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_build_config(args)
    output_dir = BuildPipeline(config).compile_schemas()
    logger.info(f"Generated bindings in {output_dir}")
    return 0
