"""Terminal task tracker with a JSON file store."""

__version__ = "0.1.0"
