"""
Uploader configuration using Pydantic settings.

Configuration comes from environment variables with sensible defaults.
"""

from .settings import UploaderSettings, get_settings

__all__ = ["UploaderSettings", "get_settings"]
