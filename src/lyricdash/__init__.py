"""lyricdash - now-playing dashboard with lyrics for the terminal."""

__version__ = "0.1.0"
