"""diskclean - find and remove reclaimable directories."""

__version__ = "0.1.0"
