"""
Local filesystem storage backend.

Implements TraceStorage protocol for local filesystem storage.
"""

from __future__ import annotations

import pathlib


class LocalFileSystemStorage:
    """Local filesystem storage backend. Writes <trace_id>.json files."""

    def __init__(self, base_path: pathlib.Path) -> None:
        """
        Initialize local filesystem storage.

        Args:
            base_path: Directory for storing traces

        Raises:
            ValueError: If base_path doesn't exist or is not a directory (fail-fast)
        """
        if not base_path.exists():
            raise ValueError(f'Storage path does not exist: {base_path}. Please create it first.')

        if not base_path.is_dir():
            raise ValueError(f'Storage path is not a directory: {base_path}')

        self.base_path = base_path

    def _file_path(self, trace_id: str) -> pathlib.Path:
        return self.base_path / f'{trace_id}.json'

    async def save(self, trace_id: str, data: bytes) -> str:
        """
        Save trace to local filesystem.

        Returns:
            Absolute path to saved file
        """
        file_path = self._file_path(trace_id)
        file_path.write_bytes(data)
        return str(file_path.absolute())

    async def delete(self, trace_id: str) -> None:
        """
        Delete a saved trace.

        Raises:
            FileNotFoundError: If no trace with this ID was saved here
        """
        self._file_path(trace_id).unlink()
