"""
Packagecloud utilities package for uploading and managing packages.

This package provides utilities for interacting with packagecloud repositories,
including uploading, promoting and deleting package files.
"""

__version__ = "1.0.0"
