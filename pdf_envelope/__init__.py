"""
PDF envelope feature.

Adds a generated cover page plus header/footer bands (with date and page
number placeholders) to an existing PDF and writes the result atomically.
"""
from .version import __version__

__all__ = ["__version__"]
