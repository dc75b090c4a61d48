"""Project hours tracking with a remote store and a local fallback store."""

__version__ = "0.1.0"
