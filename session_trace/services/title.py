"""
Session title service.

Two ways to title a trace:
- title_from_first_user_line(): pure fallback rule, never fails
- TitleService.generate(): asks a model for a short summary, falling back to
  the first-line rule on any failure (no key, timeout, API error, empty reply)
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence
from typing import Any

import anthropic

from session_trace.protocols import LoggerProtocol
from session_trace.schemas.session import Message, UserMessage
from session_trace.services.transform import message_text

__all__ = [
    'DEFAULT_TITLE',
    'MAX_TITLE_CHARS',
    'TitleService',
    'clean_title',
    'collect_user_prompts',
    'title_from_first_user_line',
]

DEFAULT_TITLE = 'Shared session'
MAX_TITLE_CHARS = 30

SYSTEM_PROMPT = (
    'Summarize this session in 6 words or fewer. '
    'Reply with only the title, no markdown, no quotes, no punctuation at the end.'
)
MAX_TITLE_TOKENS = 64

_HEADING_RE = re.compile(r'^#+\s*')
_QUOTES_RE = re.compile(r'^["\'`]+|["\'`]+$')
_TRAILING_PERIODS_RE = re.compile(r'\.+$')


def title_from_first_user_line(messages: Sequence[Message]) -> str:
    """
    Title from the first non-empty first line of a user message.

    Truncated to 30 characters. Returns 'Shared session' when no user
    message has text.
    """
    for message in messages:
        if not isinstance(message, UserMessage):
            continue
        first_line = message_text(message).split('\n', 1)[0].strip()
        if first_line:
            return first_line[:MAX_TITLE_CHARS]

    return DEFAULT_TITLE


def collect_user_prompts(messages: Sequence[Message]) -> str:
    """All non-empty user prompts, trimmed and joined with blank lines."""
    prompts = [message_text(m).strip() for m in messages if isinstance(m, UserMessage)]
    return '\n\n'.join(p for p in prompts if p)


def clean_title(raw: str) -> str:
    """Strip markdown artifacts a model may add around a title."""
    title = _HEADING_RE.sub('', raw.strip())
    title = _QUOTES_RE.sub('', title)
    title = _TRAILING_PERIODS_RE.sub('', title)
    return title.strip()


class TitleService:
    """
    Generates session titles with an Anthropic model.

    Any failure degrades to the first-line rule; generate() never raises.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout_seconds: float = 10.0,
        client: Any = None,
    ) -> None:
        """
        Initialize title service.

        Args:
            api_key: Anthropic API key (None disables generation)
            model: Model ID used for summarization
            timeout_seconds: Upper bound on the model call
            client: Optional pre-built AsyncAnthropic-compatible client
        """
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def generate(self, messages: Sequence[Message], logger: LoggerProtocol) -> str:
        """
        Generate a title for a session.

        Args:
            messages: Session messages in chronological order
            logger: Logger instance

        Returns:
            Generated title, or the first-line fallback
        """
        fallback = title_from_first_user_line(messages)

        if not self.api_key and self._client is None:
            await logger.info('No API key configured, using first-line title')
            return fallback

        user_text = collect_user_prompts(messages)
        if not user_text:
            return fallback

        try:
            response = await asyncio.wait_for(
                self._get_client().messages.create(
                    model=self.model,
                    max_tokens=MAX_TITLE_TOKENS,
                    system=SYSTEM_PROMPT,
                    messages=[{'role': 'user', 'content': user_text}],
                ),
                timeout=self.timeout_seconds,
            )
        except Exception as e:
            await logger.warning(f'Title generation failed, using first-line title: {e!r}')
            return fallback

        raw = ''.join(block.text for block in response.content if getattr(block, 'type', None) == 'text')
        title = clean_title(raw)
        if not title:
            await logger.info('Model returned an empty title, using first-line title')
        return title or fallback
