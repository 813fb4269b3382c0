"""
Session record schemas.

Re-exports the models used outside this package.
"""

from __future__ import annotations

from session_trace.schemas.session.models import (
    AssistantMessage,
    ContentBlock,
    ImageContent,
    Message,
    MessageAdapter,
    MessageEntry,
    ModelChangeEntry,
    SessionEntry,
    SessionEntryAdapter,
    SessionHeader,
    TextContent,
    ThinkingContent,
    ThinkingLevelChangeEntry,
    ToolCallContent,
    ToolResultMessage,
    UnknownContent,
    UnknownEntry,
    UnknownMessage,
    Usage,
    UsageCost,
    UserMessage,
)

__all__ = [
    # Header
    'SessionHeader',
    # Entries
    'SessionEntry',
    'SessionEntryAdapter',
    'MessageEntry',
    'ThinkingLevelChangeEntry',
    'ModelChangeEntry',
    'UnknownEntry',
    # Messages
    'Message',
    'MessageAdapter',
    'UserMessage',
    'AssistantMessage',
    'ToolResultMessage',
    'UnknownMessage',
    'Usage',
    'UsageCost',
    # Content
    'ContentBlock',
    'ThinkingContent',
    'TextContent',
    'ToolCallContent',
    'ImageContent',
    'UnknownContent',
]
