"""
Session parser service - JSONL file parsing and validation.

The event source for the transform: loads a session file into a typed header
and the ordered entry list.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import attrs
import pydantic

from session_trace.exceptions import SessionFileError, SessionHeaderError
from session_trace.protocols import LoggerProtocol
from session_trace.schemas.session import (
    Message,
    MessageEntry,
    SessionEntry,
    SessionEntryAdapter,
    SessionHeader,
    UnknownEntry,
)


@attrs.define(frozen=True)
class ParsedSession:
    """A session file loaded into typed records."""

    header: SessionHeader
    entries: Sequence[SessionEntry]

    @property
    def messages(self) -> list[Message]:
        """Messages in entry order (for title generation)."""
        return [entry.message for entry in self.entries if isinstance(entry, MessageEntry)]


class SessionParserService:
    """
    Service for parsing agent session JSONL files.

    Pure domain logic - loads and validates JSONL files into typed records.
    Unknown entry kinds are kept (as UnknownEntry); malformed lines fail fast.
    """

    async def load_session(self, file_path: Path, logger: LoggerProtocol) -> ParsedSession:
        """
        Load a session file.

        Args:
            file_path: Path to the session JSONL file
            logger: Logger instance

        Returns:
            ParsedSession with header and entries

        Raises:
            FileNotFoundError: If the file does not exist
            SessionHeaderError: If the first record is not a session header
            SessionFileError: If a line is not valid JSON or fails validation
        """
        await logger.info(f'Loading {file_path.name}')

        header: SessionHeader | None = None
        entries: list[SessionEntry] = []

        with open(file_path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    raw_data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise SessionFileError(file_path, line_num, f'invalid JSON: {e}') from e

                if header is None:
                    header = self._parse_header(file_path, line_num, raw_data)
                    continue

                try:
                    entries.append(SessionEntryAdapter.validate_python(raw_data))
                except pydantic.ValidationError as e:
                    raise SessionFileError(file_path, line_num, f'invalid entry: {e}') from e

        if header is None:
            raise SessionHeaderError(file_path, 0, 'empty session file')

        unknown = sum(1 for entry in entries if isinstance(entry, UnknownEntry))
        await logger.info(f'Loaded {len(entries)} entries from {file_path.name} ({unknown} not used by the transform)')

        return ParsedSession(header=header, entries=entries)

    def _parse_header(self, file_path: Path, line_num: int, raw_data: object) -> SessionHeader:
        """Validate the first record as a session header."""
        if not isinstance(raw_data, dict) or raw_data.get('type') != 'session':
            raise SessionHeaderError(file_path, line_num, 'first record is not a session header')
        try:
            return SessionHeader.model_validate(raw_data)
        except pydantic.ValidationError as e:
            raise SessionHeaderError(file_path, line_num, f'invalid session header: {e}') from e
