"""
Entry point for running ortoolskit as a module.

Usage: python -m ortoolskit [command] [options]
"""

from ortoolskit.cli.parser import main

if __name__ == "__main__":
    main()
