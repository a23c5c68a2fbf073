"""Parse, filter, sort and save M3U playlists of IPTV streams, with a command-line tool."""

__version__ = "0.1.0"
__all__ = ["__version__"]