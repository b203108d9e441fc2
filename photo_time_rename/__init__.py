"""
Photo Time Rename - A tool to rename photos after the time they were taken.

This package provides functionality to:
- Read the capture time from EXIF metadata
- Fall back to the file creation time for files without it
- Rename files as YYYY-MM-DD_HH-MM-SS with collision-safe suffixes
"""

__version__ = "1.0.0"
__author__ = "Vibe Tools"
__email__ = "tools@vibe.dev"

from .core import PhotoRenamer, ClaimTable, RenameResult, format_stem

__all__ = ["PhotoRenamer", "ClaimTable", "RenameResult", "format_stem"]
