"""Configuration package.

This package provides centralized configuration management.
Implementation is in config.py - this __init__.py only handles imports/exports.
"""

from src.core.config.config import LISTENER_ERROR_POLICIES, SCHEDULER_BACKENDS, AppConfig

# Singleton instance - use this throughout the application
config = AppConfig()

__all__ = ["AppConfig", "config", "LISTENER_ERROR_POLICIES", "SCHEDULER_BACKENDS"]
