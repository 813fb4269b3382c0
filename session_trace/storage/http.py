"""
Publish server storage backend.

Talks to a trace publish server:
    PUT    {base_url}/api/traces/{id}   store or replace a trace
    DELETE {base_url}/api/traces/{id}   remove a trace
    GET    {base_url}/t/{id}            viewer page (returned to the user)
"""

from __future__ import annotations

import httpx

from session_trace.exceptions import PublishError


class PublishServerStorage:
    """Publish server backend."""

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """
        Initialize publish server storage.

        Args:
            base_url: Server root, e.g. https://traces.example.com
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ValueError: If base_url is not an http(s) URL
        """
        if not base_url.startswith(('http://', 'https://')):
            raise ValueError(f'Publish URL must start with http:// or https://: {base_url}')

        self.base_url = base_url.rstrip('/')
        self.transport = transport

    def api_url(self, trace_id: str) -> str:
        return f'{self.base_url}/api/traces/{trace_id}'

    def viewer_url(self, trace_id: str) -> str:
        return f'{self.base_url}/t/{trace_id}'

    async def save(self, trace_id: str, data: bytes) -> str:
        """
        Upload a trace.

        Returns:
            Viewer URL for the published trace

        Raises:
            PublishError: If the server answers with a non-success status
        """
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.put(
                self.api_url(trace_id),
                content=data,
                headers={'Content-Type': 'application/json'},
            )
            self._check(response)

        return self.viewer_url(trace_id)

    async def delete(self, trace_id: str) -> None:
        """
        Remove a published trace.

        Raises:
            PublishError: If the server answers with a non-success status
        """
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.delete(self.api_url(trace_id))
            self._check(response)

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if not response.is_success:
            raise PublishError(response.status_code, response.text.strip())
