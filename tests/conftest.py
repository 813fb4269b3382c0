"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

# Path to fixtures directory (relative to repo root)
FIXTURES_DIR = Path(__file__).parent.parent / 'fixtures'
SESSIONS_DIR = FIXTURES_DIR / 'sessions'


@pytest.fixture
def tool_loop_session() -> Path:
    """Two-turn session with thinking, narration, a read, a failed bash and a final reply."""
    return SESSIONS_DIR / 'tool_loop.jsonl'


@pytest.fixture
def header_only_session() -> Path:
    """Session file with a header and no entries."""
    return SESSIONS_DIR / 'header_only.jsonl'
