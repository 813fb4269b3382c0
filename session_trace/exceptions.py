"""
Shared exceptions for session-trace.

The transform itself never raises for malformed-but-typed input; these cover
the I/O glue around it.

Exception Hierarchy:
    SessionTraceError (base)
    ├── SessionFileError (unreadable session file record)
    │   └── SessionHeaderError (missing or invalid session header)
    ├── EmptySessionError (nothing to publish)
    └── PublishError (publish server rejected a request)
"""

from __future__ import annotations

from pathlib import Path


class SessionTraceError(Exception):
    """Base exception for all session-trace errors."""


class SessionFileError(SessionTraceError):
    """Raised when a session file record cannot be parsed or validated."""

    def __init__(self, path: Path, line_num: int, reason: str) -> None:
        self.path = path
        self.line_num = line_num
        self.reason = reason
        super().__init__(f'{path}:{line_num}: {reason}')


class SessionHeaderError(SessionFileError):
    """Raised when a session file does not start with a session header."""


class EmptySessionError(SessionTraceError):
    """Raised when a session has no entries to compile."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f'Nothing to publish: session {session_id} has no conversation yet.')


class PublishError(SessionTraceError):
    """Raised when the publish server answers with a non-success status."""

    def __init__(self, status_code: int, body: str = '') -> None:
        self.status_code = status_code
        self.body = body
        detail = f': {body}' if body else ''
        super().__init__(f'HTTP {status_code}{detail}')
