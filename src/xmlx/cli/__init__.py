"""Command-line interface module for xmlx.

This module provides the ``xmlx`` tool for querying XML files from the shell.
"""

from .main import main

__all__ = ["main"]
