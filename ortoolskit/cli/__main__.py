"""
Entry point for running the ortoolskit CLI as a module.

Usage: python -m ortoolskit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
