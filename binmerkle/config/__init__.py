"""
Runtime Configuration Module

Provides configuration loading and management for tree construction.
"""

from .runtime import (
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
)

__all__ = [
    "LoggingConfig",
    "RuntimeConfig",
    "TreeConfig",
]
