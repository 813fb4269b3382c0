"""
Tests for settings loading.
"""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from session_trace.config.base import get_settings
from session_trace.config.cli import CliSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ('LOAD_ENV_FILE', 'PI_PUBLISH_URL', 'TITLE_TIMEOUT_SECONDS', 'TITLE_MODEL'):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = get_settings(CliSettings)

    assert settings.APP_NAME == 'session-trace'
    assert settings.PI_PUBLISH_URL is None
    assert settings.TITLE_TIMEOUT_SECONDS == 10.0


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('PI_PUBLISH_URL', 'https://traces.example.com/')
    monkeypatch.setenv('TITLE_MODEL', 'claude-haiku')

    settings = get_settings(CliSettings)

    assert settings.PI_PUBLISH_URL == 'https://traces.example.com'
    assert settings.TITLE_MODEL == 'claude-haiku'


def test_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / 'test.env'
    env_file.write_text('PI_PUBLISH_URL=http://localhost:8787\nTITLE_TIMEOUT_SECONDS=2.5\n')

    settings = get_settings(CliSettings, env_file=str(env_file))

    assert settings.PI_PUBLISH_URL == 'http://localhost:8787'
    assert settings.TITLE_TIMEOUT_SECONDS == 2.5


def test_missing_env_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        get_settings(CliSettings, env_file=str(tmp_path / 'missing.env'))


def test_rejects_non_http_publish_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('PI_PUBLISH_URL', 'traces.example.com')

    with pytest.raises(pydantic.ValidationError, match='http'):
        get_settings(CliSettings)


def test_rejects_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('TITLE_TIMEOUT_SECONDS', '0')

    with pytest.raises(pydantic.ValidationError, match='greater than 0'):
        get_settings(CliSettings)
