"""
ortoolskit - fetch, install and link the prebuilt OR-Tools C++ library.
"""

__version__ = "0.1.0"
