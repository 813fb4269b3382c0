"""
GitHub Gist storage backend for compiled traces.

Stores each trace as trace-<id>.json in a gist. Creates a new gist on first
save, or updates an existing one when gist_id is known.
"""

from __future__ import annotations

from typing import Literal

import httpx

GITHUB_HEADERS = {
    'Accept': 'application/vnd.github.v3+json',
    'X-GitHub-Api-Version': '2022-11-28',
}


class GistStorage:
    """GitHub Gist storage backend."""

    # GitHub API limit: 100MB per file
    MAX_FILE_SIZE_MB = 100

    def __init__(
        self,
        token: str,
        gist_id: str | None = None,
        visibility: Literal['public', 'secret'] = 'secret',
        description: str = 'Agent Session Trace',
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Gist storage backend.

        Args:
            token: GitHub Personal Access Token with 'gist' scope
            gist_id: Optional existing gist ID (if None, creates new gist on save)
            visibility: 'public' or 'secret' (default: secret)
            description: Gist description
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.token = token
        self.gist_id = gist_id
        self.visibility = visibility
        self.description = description
        self.transport = transport
        self.base_url = 'https://api.github.com'

    @staticmethod
    def filename(trace_id: str) -> str:
        return f'trace-{trace_id}.json'

    def _headers(self) -> dict[str, str]:
        return {'Authorization': f'Bearer {self.token}', **GITHUB_HEADERS}

    async def save(self, trace_id: str, data: bytes) -> str:
        """
        Save trace to GitHub Gist.

        Returns:
            Gist URL (e.g., https://gist.github.com/{user}/{gist_id})

        Raises:
            ValueError: If file too large (>100MB) or token missing
            httpx.HTTPStatusError: If GitHub API call fails
        """
        if not self.token:
            raise ValueError('GitHub token is required to save to Gist')

        size_mb = len(data) / (1024 * 1024)
        if size_mb > self.MAX_FILE_SIZE_MB:
            raise ValueError(
                f'Trace too large for Gist: {size_mb:.2f}MB. '
                f'GitHub Gist files are limited to {self.MAX_FILE_SIZE_MB}MB.'
            )

        content = data.decode('utf-8')
        files = {self.filename(trace_id): {'content': content}}

        async with httpx.AsyncClient(transport=self.transport) as client:
            if self.gist_id:
                response = await client.patch(
                    f'{self.base_url}/gists/{self.gist_id}',
                    headers=self._headers(),
                    json={'files': files},
                )
            else:
                response = await client.post(
                    f'{self.base_url}/gists',
                    headers=self._headers(),
                    json={
                        'description': self.description,
                        'public': self.visibility == 'public',
                        'files': files,
                    },
                )
            response.raise_for_status()

        gist_data = response.json()
        self.gist_id = gist_data['id']  # Store for future updates
        return gist_data['html_url']

    async def delete(self, trace_id: str) -> None:
        """
        Delete the gist holding the trace.

        Raises:
            ValueError: If gist_id or token is not set
            httpx.HTTPStatusError: If GitHub API call fails
        """
        if not self.gist_id:
            raise ValueError(f'Cannot delete trace {trace_id} from gist: no gist_id provided')
        if not self.token:
            raise ValueError('GitHub token is required to delete a Gist')

        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.delete(f'{self.base_url}/gists/{self.gist_id}', headers=self._headers())
            response.raise_for_status()
