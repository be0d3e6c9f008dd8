"""Configuration package.

Usage:
    from whatschanging.config import get_settings

    settings = get_settings()
    width, height = settings.decode_size
"""

from .settings import WhatschangingSettings, get_settings, reset_settings

__all__ = ["WhatschangingSettings", "get_settings", "reset_settings"]
