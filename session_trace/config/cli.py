"""
CLI configuration.

Extends base configuration with CLI-specific settings.
"""

from __future__ import annotations

from session_trace.config.base import BaseTraceSettings, lazy_settings


class CliSettings(BaseTraceSettings):
    """CLI-specific configuration."""

    pass  # Empty for now, room for CLI-specific settings


# Module-level singleton (lazy-loaded)
settings = lazy_settings(CliSettings)
