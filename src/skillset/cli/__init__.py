"""
CLI module for skillset.

Provides the command-line interface using Click.
"""

from skillset.cli.main import cli, main

__all__ = ["main", "cli"]
