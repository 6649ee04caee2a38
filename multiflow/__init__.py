"""MultiFlow deal analysis core."""

__version__ = "0.1.0"
