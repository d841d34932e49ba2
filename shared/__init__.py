"""Shared utilities and components for the tracker and its HTTP service."""

from .config import BaseLoggingConfig, BaseRedisConfig, BaseServiceConfig
from .constants import RedisKeys

__all__ = [
    "RedisKeys",
    "BaseServiceConfig",
    "BaseLoggingConfig",
    "BaseRedisConfig",
]
