"""
Services for session-trace.

The transform is pure and synchronous; the other services wrap it with
file reading, title generation and publishing.
"""

from __future__ import annotations

from session_trace.services.parser import ParsedSession, SessionParserService
from session_trace.services.publish import TracePublishService
from session_trace.services.title import TitleService
from session_trace.services.transform import build_trace

__all__ = [
    'ParsedSession',
    'SessionParserService',
    'TitleService',
    'TracePublishService',
    'build_trace',
]
