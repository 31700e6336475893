"""Configuration management implementation.

Contains the AppConfig class implementation.
Separated from __init__.py so the package only handles imports/exports.
"""

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LISTENER_ERROR_POLICIES = ("log", "raise")
SCHEDULER_BACKENDS = ("asyncio", "manual")


class AppConfig:
    """Application configuration (Singleton pattern).

    Centralizes all configuration management with environment variable support.

    This class should only be instantiated once (Singleton pattern).
    Use the `config` instance from __init__.py instead of creating new instances.
    """

    _instance: "AppConfig | None" = None
    _initialized: bool

    def __new__(cls) -> "AppConfig":
        """Singleton implementation - only one instance allowed."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        if self._initialized:
            return

        self._load_from_env()
        self._initialized = True
        logger.info("Configuration initialized")

    def _load_from_env(self) -> None:
        """Internal method to load values from environment variables."""
        self.project_root = self._get_project_root()

        # Observable / Promise behavior
        self.listener_error_policy = os.getenv("LISTENER_ERROR_POLICY", "log").strip().lower()
        self.scheduler_backend = os.getenv("PROMISE_SCHEDULER", "asyncio").strip().lower()

        # Demo CLI defaults (milliseconds)
        self.demo_timeout_ms = float(os.getenv("DEMO_TIMEOUT_MS", "1000"))
        self.demo_resolve_after_ms = float(os.getenv("DEMO_RESOLVE_AFTER_MS", "200"))

    def reload(self) -> None:
        """Force reload configuration from environment variables."""
        logger.info("Reloading configuration from environment...")
        self._load_from_env()

    def _get_project_root(self) -> Path:
        """Get project root directory. Assumes config is in src/core/config/"""
        return Path(__file__).parent.parent.parent.parent

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []
        if self.listener_error_policy not in LISTENER_ERROR_POLICIES:
            issues.append(
                f"Unknown LISTENER_ERROR_POLICY '{self.listener_error_policy}' "
                f"(expected one of {', '.join(LISTENER_ERROR_POLICIES)})"
            )
        if self.scheduler_backend not in SCHEDULER_BACKENDS:
            issues.append(
                f"Unknown PROMISE_SCHEDULER '{self.scheduler_backend}' "
                f"(expected one of {', '.join(SCHEDULER_BACKENDS)})"
            )
        if self.demo_timeout_ms <= 0:
            issues.append(f"DEMO_TIMEOUT_MS must be positive, got {self.demo_timeout_ms}")
        if self.demo_resolve_after_ms < 0:
            issues.append(
                f"DEMO_RESOLVE_AFTER_MS must not be negative, got {self.demo_resolve_after_ms}"
            )
        return issues

    def to_dict(self) -> dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "listener_error_policy": self.listener_error_policy,
            "scheduler_backend": self.scheduler_backend,
            "demo_timeout_ms": self.demo_timeout_ms,
            "demo_resolve_after_ms": self.demo_resolve_after_ms,
        }


__all__ = ["AppConfig", "LISTENER_ERROR_POLICIES", "SCHEDULER_BACKENDS"]
