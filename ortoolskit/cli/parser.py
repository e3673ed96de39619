"""
ortoolskit CLI argument parser.

This module implements the command-line interface for ortoolskit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ortoolskit import __version__
from ortoolskit.core.exceptions import OrToolsKitError

logger = logging.getLogger(__name__)


class CLI:
    """ortoolskit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="ortoolskit",
            description="ortoolskit - fetch, install and link prebuilt OR-Tools",
            epilog='Use "ortoolskit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"ortoolskit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./ortoolskit.yaml)",
        )
        parser.add_argument(
            "--out-dir",
            type=Path,
            metavar="PATH",
            help="Output directory (default: $OUT_DIR)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            help="Project root directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_build_command(subparsers)
        self._add_fetch_command(subparsers)
        self._add_protos_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_verify_command(subparsers)

        return parser

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        parser = subparsers.add_parser(
            "build",
            help="Run the full build pipeline",
            description=(
                "Compile schemas, install OR-Tools, build the native adapter "
                "and print linker directives"
            ),
        )
        parser.add_argument(
            "--style",
            choices=["cargo", "flags"],
            metavar="STYLE",
            help="Linker directive style (cargo|flags) [default: from config]",
        )

    def _add_fetch_command(self, subparsers):
        """Add 'fetch' subcommand."""
        subparsers.add_parser(
            "fetch",
            help="Download and install the prebuilt library",
            description="Download, extract and normalize the prebuilt OR-Tools library",
        )

    def _add_protos_command(self, subparsers):
        """Add 'protos' subcommand."""
        subparsers.add_parser(
            "protos",
            help="Compile protocol schemas",
            description="Compile the CP-SAT protocol schemas with protoc",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show the prebuilt archive for this platform",
            description="Detect the running OS and print the matching archive URL",
        )
        parser.add_argument(
            "--os",
            dest="os_name",
            metavar="NAME",
            help="Resolve for this OS identity instead of detecting it",
        )

    def _add_verify_command(self, subparsers):
        """Add 'verify' subcommand."""
        subparsers.add_parser(
            "verify",
            help="Report the state of the installed library",
            description="Report cache state, layout and provenance of the installed library",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except OrToolsKitError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Logs go to stderr; stdout carries build directives only.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "build": "ortoolskit.cli.commands.build",
            "fetch": "ortoolskit.cli.commands.fetch",
            "protos": "ortoolskit.cli.commands.protos",
            "resolve": "ortoolskit.cli.commands.resolve",
            "verify": "ortoolskit.cli.commands.verify",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
