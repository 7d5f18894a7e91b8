"""Command-line interface module for xmpeek.

This module provides the ``xmpeek`` tool for displaying XMP trees, exporting
raw packets and scanning many files for packet positions.
"""

from .main import main

__all__ = ["main"]
