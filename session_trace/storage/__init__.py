"""Publish sinks for compiled traces."""

from __future__ import annotations

from session_trace.storage.gist import GistStorage
from session_trace.storage.http import PublishServerStorage
from session_trace.storage.local import LocalFileSystemStorage
from session_trace.storage.protocol import TraceStorage

__all__ = ['GistStorage', 'LocalFileSystemStorage', 'PublishServerStorage', 'TraceStorage']
