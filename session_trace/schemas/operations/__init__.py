"""
Operation schemas for service results.

Pydantic models for operation results returned by services.
"""

from __future__ import annotations

from session_trace.schemas.operations.publish import PublishResult, UnpublishResult

__all__ = [
    'PublishResult',
    'UnpublishResult',
]
