"""Architecture graph query engine."""

__version__ = "0.1.0"
