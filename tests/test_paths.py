"""
Tests for path shortening.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from session_trace.paths import home_prefixes, shorten_path

CWD = '/projects/myapp'


def test_path_under_cwd_is_relative() -> None:
    assert shorten_path('/projects/myapp/src/main.ts', CWD) == 'src/main.ts'


def test_cwd_itself_is_dot() -> None:
    assert shorten_path('/projects/myapp', CWD) == '.'


def test_outside_path_is_unchanged() -> None:
    assert shorten_path('/tmp/x.ts', CWD) == '/tmp/x.ts'


def test_sibling_with_shared_prefix_is_not_under_cwd() -> None:
    assert shorten_path('/projects/myapp-old/a.ts', CWD) == '/projects/myapp-old/a.ts'


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    return str(home)


def test_short_home_path_uses_tilde(fake_home: str) -> None:
    assert shorten_path(f'{fake_home}/notes/todo.md', CWD) == '~/notes/todo.md'


def test_deep_home_path_keeps_last_three_segments(fake_home: str) -> None:
    assert shorten_path(f'{fake_home}/a/b/c/d/e.txt', CWD) == '~/.../c/d/e.txt'


def test_cwd_wins_over_home(fake_home: str) -> None:
    assert shorten_path(f'{fake_home}/proj/a/b/c/d.py', f'{fake_home}/proj') == 'a/b/c/d.py'


def test_resolved_home_alias_matches(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real_home = tmp_path / 'private' / 'home'
    real_home.mkdir(parents=True)
    link = tmp_path / 'home-link'
    link.symlink_to(real_home)
    monkeypatch.setenv('HOME', str(link))

    resolved = os.path.realpath(real_home)

    assert home_prefixes() == [str(link), resolved]
    assert shorten_path(f'{resolved}/x/y.txt', CWD) == '~/x/y.txt'
    assert shorten_path(f'{link}/x/y.txt', CWD) == '~/x/y.txt'
