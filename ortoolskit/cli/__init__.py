"""
ortoolskit CLI module.

This module provides the command-line interface for ortoolskit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
