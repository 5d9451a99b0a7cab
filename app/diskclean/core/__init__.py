"""Core entry model, selection, interchange and settings."""
