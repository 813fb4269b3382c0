"""
Storage backend protocol for compiled traces.

Defines interface for different publish sinks (local, publish server, Gist).
Backends treat the trace as opaque JSON bytes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TraceStorage(Protocol):
    """Protocol for trace storage backends."""

    async def save(self, trace_id: str, data: bytes) -> str:
        """
        Save a compiled trace.

        Args:
            trace_id: Trace (session) ID
            data: UTF-8 JSON document

        Returns:
            Final URL/path where the trace can be viewed

        Raises:
            ValueError: If save location or payload is invalid
            PublishError: If a remote backend rejects the request
        """
        ...

    async def delete(self, trace_id: str) -> None:
        """
        Remove a previously saved trace (optional - not all backends support it).

        Args:
            trace_id: Trace (session) ID

        Raises:
            NotImplementedError: If backend doesn't support deletion
        """
        raise NotImplementedError(f'{type(self).__name__} does not support deletion')
