"""repo-mirror — Mirror a git repository onto GitHub with a forced mirror push."""

__version__ = "1.0.0"
