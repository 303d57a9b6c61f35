"""Configuration module for kv-collections."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
