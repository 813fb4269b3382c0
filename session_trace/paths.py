"""
Path display utilities.

Tool arguments carry absolute paths. For display they are shortened relative to
the session working directory, or to the user's home directory:

    /projects/myapp/src/main.ts   (cwd=/projects/myapp)  -> src/main.ts
    /Users/me/notes/todo.md                              -> ~/notes/todo.md
    /Users/me/a/b/c/d/e.txt                              -> ~/.../c/d/e.txt
"""

from __future__ import annotations

import os
from pathlib import Path

__all__ = ['home_prefixes', 'shorten_path']

# Segments kept after '~/' before collapsing to '~/.../'
MAX_HOME_SEGMENTS = 3


def home_prefixes() -> list[str]:
    """
    Home directory spellings to match against.

    On macOS /var -> /private/var style symlinks mean tool arguments may carry
    either the nominal or the resolved home path, so both are returned when
    they differ.
    """
    home = str(Path.home())
    try:
        home_real = os.path.realpath(home)
    except OSError:
        home_real = home
    return [home] if home == home_real else [home, home_real]


def shorten_path(full_path: str, cwd: str) -> str:
    """
    Shorten a path for display.

    Args:
        full_path: Path taken from tool arguments
        cwd: Session working directory

    Returns:
        '.' for the cwd itself, a cwd-relative path for paths under cwd,
        a '~'-prefixed path for paths under home, otherwise full_path unchanged

    Examples:
        >>> shorten_path('/projects/myapp/src/main.ts', '/projects/myapp')
        'src/main.ts'

        >>> shorten_path('/tmp/x.ts', '/projects/myapp')
        '/tmp/x.ts'
    """
    if full_path == cwd:
        return '.'
    if full_path.startswith(cwd + '/'):
        return full_path[len(cwd) + 1 :]

    for prefix in home_prefixes():
        if full_path == prefix or full_path.startswith(prefix + '/'):
            segments = [s for s in full_path[len(prefix) + 1 :].split('/') if s]
            if len(segments) <= MAX_HOME_SEGMENTS:
                return '~/' + '/'.join(segments)
            return '~/.../' + '/'.join(segments[-MAX_HOME_SEGMENTS:])

    return full_path
