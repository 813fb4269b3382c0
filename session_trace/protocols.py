"""
Logging seam for session-trace services.

Services take a logger argument instead of importing one, so the same
parse/compile/publish code runs quietly under tests and chatty under the CLI.
"""

from __future__ import annotations

from typing import Protocol


class LoggerProtocol(Protocol):
    """
    Async logger accepted by the parser, title and publish services.

    - info: progress (entries loaded, turns compiled, bytes published)
    - warning: degraded results (title generation fell back to the first line)
    - error: command failures reported by the CLI

    Implementations: CLILogger (cli/logger.py) and NullLogger (below).
    """

    async def info(self, message: str) -> None: ...
    async def warning(self, message: str) -> None: ...
    async def error(self, message: str) -> None: ...


class NullLogger:
    """Discards everything. Default for library callers and tests."""

    async def info(self, message: str) -> None:
        pass

    async def warning(self, message: str) -> None:
        pass

    async def error(self, message: str) -> None:
        pass
