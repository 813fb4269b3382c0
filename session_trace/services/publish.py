"""
Trace publish service - compile a session file and hand it to a storage backend.

Framework-agnostic: the CLI chooses the storage backend and title policy.
"""

from __future__ import annotations

from pathlib import Path

from session_trace.exceptions import EmptySessionError
from session_trace.protocols import LoggerProtocol
from session_trace.schemas.operations import PublishResult, UnpublishResult
from session_trace.schemas.trace import Trace
from session_trace.services.parser import ParsedSession, SessionParserService
from session_trace.services.title import TitleService, title_from_first_user_line
from session_trace.services.transform import build_trace
from session_trace.storage.protocol import TraceStorage


class TracePublishService:
    """Service for compiling and publishing session traces."""

    def __init__(self, parser_service: SessionParserService, title_service: TitleService | None = None) -> None:
        """
        Initialize publish service.

        Args:
            parser_service: Loads session files
            title_service: Optional title generator (used when generate_title=True)
        """
        self.parser_service = parser_service
        self.title_service = title_service

    async def resolve_title(
        self,
        session: ParsedSession,
        title: str | None,
        generate_title: bool,
        logger: LoggerProtocol,
    ) -> str:
        """
        Pick the trace title.

        Explicit title wins, then a generated one (if requested and a title
        service is configured), then the first-line rule.
        """
        if title:
            return title
        if generate_title and self.title_service is not None:
            return await self.title_service.generate(session.messages, logger)
        return title_from_first_user_line(session.messages)

    async def compile(
        self,
        session_file: Path,
        logger: LoggerProtocol,
        title: str | None = None,
        generate_title: bool = False,
    ) -> Trace:
        """
        Load and compile a session file.

        Args:
            session_file: Path to session JSONL file
            logger: Logger instance
            title: Explicit title (skips title generation)
            generate_title: Ask the title service for a title

        Returns:
            Compiled Trace
        """
        session = await self.parser_service.load_session(session_file, logger)
        resolved_title = await self.resolve_title(session, title, generate_title, logger)

        trace = build_trace(session.header, session.entries, resolved_title)
        await logger.info(f'Compiled {len(trace.turns)} turns (total cost ${trace.totalCost:.4f})')
        return trace

    async def publish(
        self,
        session_file: Path,
        storage: TraceStorage,
        logger: LoggerProtocol,
        title: str | None = None,
        generate_title: bool = False,
    ) -> PublishResult:
        """
        Compile a session file and save it to a storage backend.

        Raises:
            EmptySessionError: If the session has no entries
        """
        session = await self.parser_service.load_session(session_file, logger)
        if not session.entries:
            raise EmptySessionError(session.header.id)

        resolved_title = await self.resolve_title(session, title, generate_title, logger)
        trace = build_trace(session.header, session.entries, resolved_title)
        data = trace.to_json_bytes()

        await logger.info(f'Publishing {trace.id} ({len(data):,} bytes)')
        location = await storage.save(trace.id, data)

        return PublishResult(
            trace_id=trace.id,
            location=location,
            title=trace.title,
            turn_count=len(trace.turns),
            total_cost=trace.totalCost,
            size_bytes=len(data),
        )

    async def unpublish(self, trace_id: str, storage: TraceStorage, logger: LoggerProtocol) -> UnpublishResult:
        """Remove a published trace from a storage backend."""
        await logger.info(f'Unpublishing {trace_id}')
        await storage.delete(trace_id)
        return UnpublishResult(trace_id=trace_id)
