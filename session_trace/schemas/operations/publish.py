"""
Publish operation result models.
"""

from __future__ import annotations

from session_trace.schemas.types import BaseStrictModel


class PublishResult(BaseStrictModel):
    """Result of publishing a trace."""

    trace_id: str
    location: str  # Viewer URL, gist URL or file path
    title: str
    turn_count: int
    total_cost: float
    size_bytes: int


class UnpublishResult(BaseStrictModel):
    """Result of removing a published trace."""

    trace_id: str
