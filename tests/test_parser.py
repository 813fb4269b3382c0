"""
Tests for the session file parser and end-to-end compilation of fixtures.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from session_trace.exceptions import SessionFileError, SessionHeaderError
from session_trace.protocols import NullLogger
from session_trace.schemas.session import (
    MessageEntry,
    ModelChangeEntry,
    ThinkingLevelChangeEntry,
    UnknownEntry,
)
from session_trace.schemas.trace import ActionStep, NarrationStep
from session_trace.services.parser import ParsedSession, SessionParserService
from session_trace.services.transform import build_trace


def _load(path: Path) -> ParsedSession:
    return asyncio.run(SessionParserService().load_session(path, NullLogger()))


def test_loads_header_and_entries(tool_loop_session: Path) -> None:
    session = _load(tool_loop_session)

    assert session.header.id == '0b6c2a9e-5d1f-4f7e-9c1a-2f3e4d5c6b7a'
    assert session.header.cwd == '/projects/myapp'
    assert [type(e) for e in session.entries[:3]] == [ModelChangeEntry, ThinkingLevelChangeEntry, MessageEntry]
    assert isinstance(session.entries[-2], UnknownEntry)
    assert len(session.messages) == 7


def test_header_only_session(header_only_session: Path) -> None:
    session = _load(header_only_session)

    assert session.entries == []
    assert build_trace(session.header, session.entries, 'Empty').turns == []


def test_compiles_fixture_session(tool_loop_session: Path) -> None:
    session = _load(tool_loop_session)

    trace = build_trace(session.header, session.entries, 'CI failure')

    first, second = trace.turns
    assert first.prompt == 'Why does the build fail on CI?\nIt passes locally.'
    assert first.thinkingLevel == 'high'
    assert first.steps[:2] == [
        NarrationStep(type='narration', text='Check the CI config first.'),
        NarrationStep(type='narration', text='Let me look at the workflow.'),
    ]
    read, bash = first.steps[2:]
    assert isinstance(read, ActionStep)
    assert (read.summary, read.ok, read.output) == ('.github/workflows/ci.yml', True, None)
    assert isinstance(bash, ActionStep)
    assert (bash.summary, bash.ok, bash.output) == ('npm test', False, 'sh: jest: command not found')
    assert first.response == 'jest is not installed on CI.\n\nAdd it to devDependencies.'
    assert (first.inputTokens, first.outputTokens, first.cost, first.elapsed) == (600, 170, 0.006, 9)

    assert second.prompt == 'thanks'
    assert second.steps == []
    assert second.thinkingLevel == 'high'
    assert trace.totalCost == 0.006


def test_blank_lines_are_skipped(tmp_path: Path, tool_loop_session: Path) -> None:
    path = tmp_path / 'spaced.jsonl'
    path.write_text('\n\n' + tool_loop_session.read_text().replace('\n', '\n\n'))

    assert len(_load(path).entries) == 10


def test_invalid_json_reports_line(tmp_path: Path, tool_loop_session: Path) -> None:
    lines = tool_loop_session.read_text().splitlines()
    path = tmp_path / 'broken.jsonl'
    path.write_text('\n'.join([*lines[:3], '{not json', *lines[3:]]))

    with pytest.raises(SessionFileError) as exc_info:
        _load(path)

    assert exc_info.value.line_num == 4
    assert 'invalid JSON' in str(exc_info.value)


def test_non_object_entry_is_rejected(tmp_path: Path, tool_loop_session: Path) -> None:
    header = tool_loop_session.read_text().splitlines()[0]
    path = tmp_path / 'array.jsonl'
    path.write_text(f'{header}\n[1, 2, 3]\n')

    with pytest.raises(SessionFileError) as exc_info:
        _load(path)

    assert exc_info.value.line_num == 2


def test_missing_header_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / 'headless.jsonl'
    path.write_text('{"type":"message","message":{"role":"user","content":"hi"}}\n')

    with pytest.raises(SessionHeaderError, match='not a session header'):
        _load(path)


def test_empty_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / 'empty.jsonl'
    path.write_text('\n')

    with pytest.raises(SessionHeaderError, match='empty session file'):
        _load(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        _load(tmp_path / 'nope.jsonl')


def test_null_and_float_usage_from_file(tmp_path: Path, tool_loop_session: Path) -> None:
    header = tool_loop_session.read_text().splitlines()[0]
    path = tmp_path / 'odd-usage.jsonl'
    path.write_text(
        '\n'.join(
            [
                header,
                '{"type":"message","message":{"role":"user","content":"go","timestamp":1000}}',
                '{"type":"message","message":{"role":"assistant","content":[{"type":"text","text":"ok"}],'
                '"model":"claude-sonnet-4-5","usage":{"input":120.0,"output":NaN,"cost":{"total":null}},'
                '"timestamp":3000}}',
            ]
        )
    )

    session = _load(path)
    trace = build_trace(session.header, session.entries, 'Odd usage')

    (turn,) = trace.turns
    assert turn.response == 'ok'
    assert (turn.model, turn.inputTokens, turn.outputTokens, turn.cost) == ('claude-sonnet-4-5', 120, 0, 0.0)
    assert trace.totalCost == 0.0
