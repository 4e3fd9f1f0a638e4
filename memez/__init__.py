"""Social feed API for memecoins."""

__version__ = "1.0.0"
