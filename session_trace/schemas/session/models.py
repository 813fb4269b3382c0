"""
Pydantic models for coding-agent session JSONL records.

A session file is JSON Lines:
- line 1: the session header ({"type": "session", "id", "cwd", "timestamp", ...})
- every following line: one entry, in chronological order

Entry kinds the transform reacts to:
- message: a user, assistant or toolResult message
- thinking_level_change: the reasoning level switched

Everything else (model_change, compaction, labels, custom extension data)
validates into a typed or permissive model and is skipped by the transform.

Key findings from real session files:
- Entries carry id/parentId linkage; arrival order is already chronological,
  so the linkage is modeled but never followed
- Message timestamps are epoch milliseconds, entry timestamps are ISO strings
- User content can be a plain string or a list of content blocks
- Assistant messages without usage (aborted streams) exist

Unions are validated left-to-right with a PermissiveModel fallback LAST,
so unknown structures degrade to an ignorable type instead of failing.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

import pydantic

from session_trace.schemas.types import PermissiveModel, ThinkingLevel

# ==============================================================================
# Base Configuration
# ==============================================================================


class SessionModel(PermissiveModel):
    """Session-layer model.

    Inherits from PermissiveModel (extra='allow', strict=True, frozen=True).
    """

    pass


# ==============================================================================
# Lenient Field Types
# ==============================================================================
# Null optionals (a NaN cost is written as null), float token counts and
# wrong-typed values coerce to the field's neutral value, keeping the
# enclosing message typed.


def _null_as_empty_str(v: Any) -> Any:
    return '' if v is None else v


def _null_as_false(v: Any) -> Any:
    return False if v is None else v


def _coerce_token_count(v: Any) -> Any:
    """Token counts: null, non-numeric and non-finite to 0, floats truncated to int."""
    if isinstance(v, bool) or not isinstance(v, int | float):
        return 0
    if isinstance(v, float):
        return int(v) if math.isfinite(v) else 0
    return v


def _coerce_dollars(v: Any) -> Any:
    """Costs: null, non-numeric and non-finite to 0.0."""
    if isinstance(v, bool) or not isinstance(v, int | float):
        return 0.0
    return float(v) if math.isfinite(v) else 0.0


def _coerce_arguments(v: Any) -> Any:
    """Tool arguments: anything but an object becomes {}."""
    return v if isinstance(v, Mapping) else {}


def _mapping_or_none(v: Any) -> Any:
    return v if isinstance(v, Mapping) else None


def _str_or_none(v: Any) -> Any:
    return v if isinstance(v, str) else None


def _null_as_no_blocks(v: Any) -> Any:
    return () if v is None else v


NullableText = Annotated[str, pydantic.BeforeValidator(_null_as_empty_str)]
NullableFlag = Annotated[bool, pydantic.BeforeValidator(_null_as_false)]
TokenCount = Annotated[int, pydantic.BeforeValidator(_coerce_token_count)]
Dollars = Annotated[float, pydantic.BeforeValidator(_coerce_dollars)]
ToolArguments = Annotated[Mapping[str, Any], pydantic.BeforeValidator(_coerce_arguments)]
OptionalText = Annotated[str | None, pydantic.BeforeValidator(_str_or_none)]


# ==============================================================================
# Session Header
# ==============================================================================


class SessionHeader(SessionModel):
    """First record of a session file."""

    type: Literal['session'] = 'session'
    id: str
    cwd: str  # Absolute working directory, used for path shortening
    timestamp: str  # ISO-8601 creation time
    version: int | None = None


# ==============================================================================
# Content Blocks
# ==============================================================================


class ThinkingContent(SessionModel):
    """Reasoning text from an assistant message."""

    type: Literal['thinking']
    thinking: NullableText = ''


class TextContent(SessionModel):
    """Free-form text from a user, assistant or tool result message."""

    type: Literal['text']
    text: NullableText = ''


class ToolCallContent(SessionModel):
    """Tool invocation from an assistant message."""

    type: Literal['toolCall']
    id: NullableText = ''
    name: NullableText = ''
    arguments: ToolArguments = pydantic.Field(default_factory=dict)


class ImageContent(SessionModel):
    """Inline image (user uploads, screenshot tool results)."""

    type: Literal['image']
    data: str = ''
    mimeType: str | None = None


class UnknownContent(SessionModel):
    """Fallback for content block kinds we don't model."""

    type: str


ContentBlock = Annotated[
    ThinkingContent | TextContent | ToolCallContent | ImageContent | UnknownContent,
    pydantic.Field(union_mode='left_to_right'),
]

ContentBlocks = Annotated[Sequence[ContentBlock], pydantic.BeforeValidator(_null_as_no_blocks)]


# ==============================================================================
# Usage
# ==============================================================================


class UsageCost(SessionModel):
    """Dollar cost breakdown for one assistant response."""

    total: Dollars = 0.0


class Usage(SessionModel):
    """Token usage for one assistant response."""

    input: TokenCount = 0
    output: TokenCount = 0
    cost: Annotated[UsageCost | None, pydantic.BeforeValidator(_mapping_or_none)] = None


# ==============================================================================
# Messages
# ==============================================================================

# Epoch milliseconds
Timestamp = int | float


class UserMessage(SessionModel):
    """Prompt submitted by the user."""

    role: Literal['user']
    content: NullableText | Sequence[ContentBlock] = ''
    timestamp: Timestamp | None = None


class AssistantMessage(SessionModel):
    """One model response within the tool loop."""

    role: Literal['assistant']
    content: ContentBlocks = ()
    model: OptionalText = None
    usage: Annotated[Usage | None, pydantic.BeforeValidator(_mapping_or_none)] = None
    timestamp: Timestamp | None = None

    @property
    def has_tool_call(self) -> bool:
        """True when the response invokes at least one tool."""
        return any(isinstance(block, ToolCallContent) for block in self.content)


class ToolResultMessage(SessionModel):
    """Result of a tool invocation, correlated by toolCallId."""

    role: Literal['toolResult']
    toolCallId: str
    toolName: str | None = None
    content: ContentBlocks = ()
    isError: NullableFlag = False
    timestamp: Timestamp | None = None


class UnknownMessage(SessionModel):
    """Fallback for message roles we don't model (extension messages, etc.)."""

    role: str
    timestamp: Timestamp | None = None


Message = Annotated[
    UserMessage | AssistantMessage | ToolResultMessage | UnknownMessage,
    pydantic.Field(union_mode='left_to_right'),
]


# ==============================================================================
# Entries
# ==============================================================================


class BaseEntry(SessionModel):
    """Fields shared by all entries (never read by the transform)."""

    id: str | None = None
    parentId: str | None = None
    timestamp: str | None = None  # ISO-8601


class MessageEntry(BaseEntry):
    """Entry carrying one message."""

    type: Literal['message']
    message: Message


class ThinkingLevelChangeEntry(BaseEntry):
    """Entry recording a reasoning level switch."""

    type: Literal['thinking_level_change']
    thinkingLevel: ThinkingLevel


class ModelChangeEntry(BaseEntry):
    """Entry recording a model switch (recognized, ignored by the transform)."""

    type: Literal['model_change']
    provider: str | None = None
    modelId: str | None = None


class UnknownEntry(BaseEntry):
    """Fallback for entry kinds we don't model (compaction, labels, custom data)."""

    type: str


# NOTE: A thinking_level_change with a missing or unrecognized level falls
# through to UnknownEntry and therefore never changes the active level.
SessionEntry = Annotated[
    MessageEntry | ThinkingLevelChangeEntry | ModelChangeEntry | UnknownEntry,
    pydantic.Field(union_mode='left_to_right'),
]

# Type adapters for validating records (required for union types)
SessionEntryAdapter: pydantic.TypeAdapter[SessionEntry] = pydantic.TypeAdapter(SessionEntry)
MessageAdapter: pydantic.TypeAdapter[Message] = pydantic.TypeAdapter(Message)
