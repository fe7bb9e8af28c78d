"""
Interface module - External interfaces to profstore.

This module contains:
- cli.py: Command-line interface
"""

from profstore.interface.cli import app as cli_app

__all__ = [
    "cli_app",
]
