"""
Configuration module for skillset.

Uses pydantic-settings for environment variable loading.
"""

from skillset.config.settings import (
    Settings,
    find_git_root,
    find_project_root,
)
from skillset.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings", "find_git_root", "find_project_root"]
