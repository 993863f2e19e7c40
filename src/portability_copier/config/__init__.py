"""Configuration layer."""

from .manager import ConfigManager

__all__ = ["ConfigManager"]
