"""
Base configuration for session-trace.

Shared settings and helper functions for all entry points.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='BaseTraceSettings')


class BaseTraceSettings(pydantic_settings.BaseSettings):
    """Shared configuration across entry points."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',  # Reject unknown keys in .env
    )

    # Application metadata
    APP_NAME: str = 'session-trace'
    VERSION: str = '0.1.0'

    # Publish server (e.g. https://traces.example.com), used when no target is given
    PI_PUBLISH_URL: str | None = None

    # Credentials
    ANTHROPIC_API_KEY: str | None = None
    GITHUB_TOKEN: str | None = None

    # Title generation
    TITLE_MODEL: str = 'claude-3-5-haiku-latest'
    TITLE_TIMEOUT_SECONDS: float = 10.0

    @pydantic.field_validator('PI_PUBLISH_URL')
    @classmethod
    def validate_publish_url(cls, v: str | None) -> str | None:
        """Require an http(s) URL and drop any trailing slash."""
        if v is None or not v.strip():
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError('PI_PUBLISH_URL must start with http:// or https://')
        return v.rstrip('/')

    @pydantic.field_validator('TITLE_TIMEOUT_SECONDS')
    @classmethod
    def validate_title_timeout(cls, v: float) -> float:
        """Validate title timeout is positive."""
        if v <= 0:
            raise ValueError('TITLE_TIMEOUT_SECONDS must be greater than 0')
        return v


def get_settings(settings_class: type[T], env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class(_env_file=None)  # No .env file, load from environment only

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """
    Lazy settings - defers instantiation until first access.

    Args:
        settings_class: Settings class to instantiate

    Returns:
        Proxy that instantiates settings on first access
    """
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
