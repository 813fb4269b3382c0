"""
Tests for session titles: the first-line rule and the model-backed service.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import pytest

from session_trace.protocols import NullLogger
from session_trace.schemas.session import Message, MessageAdapter
from session_trace.services.title import (
    DEFAULT_TITLE,
    TitleService,
    clean_title,
    collect_user_prompts,
    title_from_first_user_line,
)


def _user(content: Any) -> Message:
    return MessageAdapter.validate_python({'role': 'user', 'content': content, 'timestamp': 1})


def _assistant(text: str) -> Message:
    return MessageAdapter.validate_python({'role': 'assistant', 'content': [{'type': 'text', 'text': text}]})


# ==============================================================================
# First-line rule
# ==============================================================================


def test_title_from_string_content() -> None:
    assert title_from_first_user_line([_user('Fix the login bug\nDetails follow')]) == 'Fix the login bug'


def test_title_from_block_content() -> None:
    messages = [_user([{'type': 'image', 'data': 'abc'}, {'type': 'text', 'text': '  Refactor parser  \nmore'}])]

    assert title_from_first_user_line(messages) == 'Refactor parser'


def test_title_truncated_to_30_characters() -> None:
    title = title_from_first_user_line([_user('Investigate why the nightly export job times out')])

    assert title == 'Investigate why the nightly ex'
    assert len(title) == 30


def test_title_skips_blank_prompts_and_other_roles() -> None:
    messages = [_assistant('ignored'), _user('   \nsecond line'), _user('Real prompt')]

    assert title_from_first_user_line(messages) == 'Real prompt'


def test_title_default_without_user_messages() -> None:
    assert title_from_first_user_line([]) == DEFAULT_TITLE
    assert title_from_first_user_line([_assistant('hello')]) == DEFAULT_TITLE


def test_collect_user_prompts() -> None:
    messages = [_user(' one '), _assistant('x'), _user(''), _user('two')]

    assert collect_user_prompts(messages) == 'one\n\ntwo'


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [
        ('# Fix login bug', 'Fix login bug'),
        ('"Fix login bug"', 'Fix login bug'),
        ('`Fix login bug`', 'Fix login bug'),
        ('Fix login bug...', 'Fix login bug'),
        ('  Fix login bug.  ', 'Fix login bug'),
        ('""', ''),
    ],
)
def test_clean_title(raw: str, expected: str) -> None:
    assert clean_title(raw) == expected


# ==============================================================================
# TitleService
# ==============================================================================


class FakeMessages:
    def __init__(self, reply: str = '', error: Exception | None = None, delay: float = 0.0) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type='text', text=self.reply)])


def _service(messages: FakeMessages, timeout: float = 5.0) -> TitleService:
    return TitleService(
        api_key='test-key',
        model='test-model',
        timeout_seconds=timeout,
        client=SimpleNamespace(messages=messages),
    )


def test_generate_uses_cleaned_model_reply() -> None:
    fake = FakeMessages(reply='"Debug CI jest failure."')

    title = asyncio.run(_service(fake).generate([_user('Why does CI fail?'), _user('and fix it')], NullLogger()))

    assert title == 'Debug CI jest failure'
    assert fake.calls[0]['model'] == 'test-model'
    assert fake.calls[0]['messages'] == [{'role': 'user', 'content': 'Why does CI fail?\n\nand fix it'}]


def test_generate_falls_back_on_error() -> None:
    fake = FakeMessages(error=RuntimeError('overloaded'))

    title = asyncio.run(_service(fake).generate([_user('Why does CI fail?')], NullLogger()))

    assert title == 'Why does CI fail?'


def test_generate_falls_back_on_timeout() -> None:
    fake = FakeMessages(reply='Too late', delay=1.0)

    title = asyncio.run(_service(fake, timeout=0.01).generate([_user('Slow prompt')], NullLogger()))

    assert title == 'Slow prompt'


def test_generate_falls_back_on_empty_reply() -> None:
    fake = FakeMessages(reply='  "" ')

    title = asyncio.run(_service(fake).generate([_user('Empty reply')], NullLogger()))

    assert title == 'Empty reply'


def test_generate_without_api_key_skips_model() -> None:
    service = TitleService(api_key=None, model='test-model')

    title = asyncio.run(service.generate([_user('No key')], NullLogger()))

    assert title == 'No key'


def test_generate_without_user_text_skips_model() -> None:
    fake = FakeMessages(reply='Unused')

    title = asyncio.run(_service(fake).generate([_assistant('only me')], NullLogger()))

    assert title == DEFAULT_TITLE
    assert fake.calls == []
