"""Find duplicate files by size first, then content digest."""

__version__ = "0.1.0"
