"""Configuration module for the wasignup service."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
