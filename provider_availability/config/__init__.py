"""
Configuration package: settings and logging setup.
"""

from provider_availability.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
