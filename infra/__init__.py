"""
Infrastructure module exports.

Configuration and bootstrap for all bot backends.
"""

from .config import InfraConfig, get_config, WeatherBackendType, SendBackendType, MemoryBackendType
from .bootstrap import BotBootstrap, get_bootstrap

__all__ = [
    "InfraConfig",
    "get_config",
    "WeatherBackendType",
    "SendBackendType",
    "MemoryBackendType",
    "BotBootstrap",
    "get_bootstrap",
]
