"""
Shared utilities for CLI commands.
"""

import logging
import os
import sys
from typing import Optional

from ortoolskit.build.linker import DirectiveStyle
from ortoolskit.config import OUT_DIR_VAR, BuildConfig

logger = logging.getLogger(__name__)


def load_build_config(args) -> BuildConfig:
    """
    Build configuration for a CLI invocation.

    '--out-dir' takes precedence over $OUT_DIR; '--style' (build command)
    over the configured directive style.

    Raises:
        ConfigurationError: If no output directory is known or the
            configuration file is invalid
    """
    environ = dict(os.environ)
    if getattr(args, "out_dir", None):
        environ[OUT_DIR_VAR] = str(args.out_dir)

    config = BuildConfig.from_environment(
        environ,
        config_file=getattr(args, "config", None),
        project_root=getattr(args, "project_root", None),
    )

    style = getattr(args, "style", None)
    if style:
        config.directive_style = DirectiveStyle(style)

    logger.debug(f"Configuration: {config}")
    return config


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def format_size(size_bytes: int) -> str:
    """Format a byte count as MB."""
    return f"{size_bytes / (1024 * 1024):.1f} MB"
