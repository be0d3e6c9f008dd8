"""Configuration management for whatschanging using pydantic-settings.

Settings come from ``WHATSCHANGING_*`` environment variables or a ``.env``
file, with type validation on every field.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class WhatschangingSettings(BaseSettings):
    """Main configuration settings for whatschanging."""

    # Decoding
    decode_width: int = Field(346, gt=0, description="Width images are decoded at")
    decode_height: int = Field(382, gt=0, description="Height images are decoded at")
    preserve_aspect: bool = Field(
        True, description="Keep the aspect ratio when scaling to the decode size"
    )

    # Rendering
    pane_offset: int = Field(350, gt=0, description="Horizontal distance between panes")

    # Performance
    workers: int = Field(1, ge=1, description="Worker threads used to compare row bands")

    # Logging
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_file: Path | None = Field(None, description="Optional path of a log file")
    structured_logs: bool = Field(False, description="Render logs as JSON")

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_prefix = "WHATSCHANGING_"
        case_sensitive = False
        extra = "ignore"

    @property
    def decode_size(self) -> tuple[int, int]:
        """Return the (width, height) decode box."""
        return self.decode_width, self.decode_height


# Singleton instance
_settings: WhatschangingSettings | None = None


def get_settings() -> WhatschangingSettings:
    """Get the singleton settings instance.

    Returns:
        WhatschangingSettings instance
    """
    global _settings

    if _settings is None:
        _settings = WhatschangingSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
