"""
Configuration de Dialogue Compression.
"""

from .loader import load_config, reload_config, get_config, load_settings
from .settings import (
    Settings,
    CompressionConfig,
    ChatConfig,
    AnthropicConfig,
    SessionConfig,
)

__all__ = [
    "load_config",
    "reload_config",
    "get_config",
    "load_settings",
    "Settings",
    "CompressionConfig",
    "ChatConfig",
    "AnthropicConfig",
    "SessionConfig",
]
