"""Exception hierarchy for whatschanging.

This module re-exports all exceptions from domain-specific modules
for convenience.
"""

from .base_exceptions import WhatschangingException
from .config_exceptions import ConfigurationException, InvalidConfigurationException
from .diff_exceptions import (
    ChannelLayoutMismatch,
    DiffException,
    DimensionMismatch,
    ImageLoadError,
    InvalidImageException,
    RowstrideMismatch,
)

__all__ = [
    "WhatschangingException",
    "ConfigurationException",
    "InvalidConfigurationException",
    "DiffException",
    "DimensionMismatch",
    "ChannelLayoutMismatch",
    "RowstrideMismatch",
    "InvalidImageException",
    "ImageLoadError",
]
