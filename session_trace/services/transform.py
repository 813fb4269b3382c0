"""
Session-to-trace transform - the pure core of session-trace.

Compiles a chronological entry log into a Trace in one pass plus per-turn work:

    entries ──scan_entries──> messages, tool results, level at each prompt
            ──split_turns───> RawTurn per user prompt
            ──build_steps───> narration/action steps + final response   (per turn)
            ──aggregate_usage> tokens, cost, model, elapsed              (per turn)
            ──build_trace───> Trace

No I/O, no logging, no shared state: every call works on its own locals.
Malformed-but-typed input never raises - missing results, usage or text
degrade to defaults.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import attrs

from session_trace.paths import shorten_path
from session_trace.schemas.session import (
    AssistantMessage,
    ContentBlock,
    Message,
    MessageEntry,
    SessionEntry,
    SessionHeader,
    TextContent,
    ThinkingContent,
    ThinkingLevelChangeEntry,
    ToolCallContent,
    ToolResultMessage,
    UserMessage,
)
from session_trace.schemas.trace import ActionStep, EditDiff, NarrationStep, Step, Trace, Turn
from session_trace.schemas.types import ThinkingLevel

__all__ = [
    'RawTurn',
    'ScanResult',
    'StepsResult',
    'TurnUsage',
    'aggregate_usage',
    'build_action',
    'build_steps',
    'build_trace',
    'build_turn',
    'extract_text_content',
    'message_text',
    'round_cost',
    'scan_entries',
    'split_turns',
    'summarize_tool_args',
    'truncate_output',
]

MAX_TOOL_OUTPUT_BYTES = 4096
MAX_ARGS_SUMMARY_CHARS = 200
TRUNCATION_MARKER = '\n…[truncated]'
COST_DECIMALS = 6

PATH_TOOLS = frozenset({'read', 'write', 'edit'})


# ==============================================================================
# Helpers
# ==============================================================================


def round_cost(cost: float) -> float:
    """Round a dollar amount to 6 decimals."""
    return round(cost, COST_DECIMALS)


def extract_text_content(content: Sequence[ContentBlock]) -> str:
    """Join the non-empty text blocks of a content sequence with newlines."""
    return '\n'.join(block.text for block in content if isinstance(block, TextContent) and block.text)


def message_text(message: UserMessage) -> str:
    """Text of a user message, whether content is a string or a block sequence."""
    if isinstance(message.content, str):
        return message.content
    return extract_text_content(message.content)


def summarize_tool_args(tool_name: str, args: Mapping[str, Any], cwd: str) -> str:
    """
    One-line argument summary for an action step.

    - read/write/edit: the path, shortened relative to cwd
    - bash: the command, verbatim
    - anything else: compact JSON, cut at 200 characters
    """
    if tool_name in PATH_TOOLS:
        path = args.get('path')
        return shorten_path(str(path), cwd) if path else ''
    if tool_name == 'bash':
        command = args.get('command')
        return str(command) if command else ''

    summary = json.dumps(args, separators=(',', ':'), ensure_ascii=False, default=str)
    if len(summary) > MAX_ARGS_SUMMARY_CHARS:
        return summary[:MAX_ARGS_SUMMARY_CHARS] + '…'
    return summary


def truncate_output(output: str) -> str:
    """
    Cap tool output at 4096 UTF-8 bytes.

    Cuts back to the last newline inside the budget when there is one, so the
    output never ends mid-line, then appends a truncation marker.
    """
    encoded = output.encode('utf-8')
    if len(encoded) <= MAX_TOOL_OUTPUT_BYTES:
        return output

    # errors='ignore' drops a multi-byte character split by the cut
    truncated = encoded[:MAX_TOOL_OUTPUT_BYTES].decode('utf-8', errors='ignore')
    last_newline = truncated.rfind('\n')
    if last_newline > 0:
        truncated = truncated[:last_newline]
    return truncated + TRUNCATION_MARKER


# ==============================================================================
# Entry Scanner
# ==============================================================================


@attrs.define(frozen=True)
class ScanResult:
    """Output of one pass over the entry log."""

    messages: Sequence[Message]
    tool_results: Mapping[str, ToolResultMessage]  # toolCallId -> result
    level_at_prompt: Mapping[int, ThinkingLevel | None]  # user message index -> active level


def scan_entries(entries: Sequence[SessionEntry]) -> ScanResult:
    """
    Walk the entry log once.

    Tracks the active reasoning level (last write wins), indexes tool results
    by call id (last write wins) and records the level active at each user
    message. Entries that are neither messages nor level changes are skipped.
    """
    messages: list[Message] = []
    tool_results: dict[str, ToolResultMessage] = {}
    level_at_prompt: dict[int, ThinkingLevel | None] = {}
    current_level: ThinkingLevel | None = None

    for entry in entries:
        if isinstance(entry, ThinkingLevelChangeEntry):
            current_level = entry.thinkingLevel
        elif isinstance(entry, MessageEntry):
            message = entry.message
            if isinstance(message, UserMessage):
                level_at_prompt[len(messages)] = current_level
            elif isinstance(message, ToolResultMessage):
                tool_results[message.toolCallId] = message
            messages.append(message)

    return ScanResult(messages=messages, tool_results=tool_results, level_at_prompt=level_at_prompt)


# ==============================================================================
# Turn Segmenter
# ==============================================================================


@attrs.define(frozen=True)
class RawTurn:
    """A user prompt and the messages that followed it, before transformation."""

    prompt: UserMessage
    prompt_index: int  # Position of the prompt in ScanResult.messages
    replies: Sequence[Message]  # Everything up to (excluding) the next prompt

    @property
    def assistant_messages(self) -> list[AssistantMessage]:
        return [m for m in self.replies if isinstance(m, AssistantMessage)]


def split_turns(messages: Sequence[Message]) -> list[RawTurn]:
    """
    Split the message list at every user message.

    Messages before the first user message cannot start a turn and are dropped.
    A prompt with no replies still yields a turn.
    """
    turns: list[RawTurn] = []
    prompt: UserMessage | None = None
    prompt_index = -1
    replies: list[Message] = []

    for index, message in enumerate(messages):
        if isinstance(message, UserMessage):
            if prompt is not None:
                turns.append(RawTurn(prompt=prompt, prompt_index=prompt_index, replies=replies))
            prompt, prompt_index, replies = message, index, []
        elif prompt is not None:
            replies.append(message)

    if prompt is not None:
        turns.append(RawTurn(prompt=prompt, prompt_index=prompt_index, replies=replies))

    return turns


# ==============================================================================
# Step Builder
# ==============================================================================


@attrs.define(frozen=True)
class StepsResult:
    """Ordered steps of a turn plus its final response text."""

    steps: Sequence[Step]
    response: str | None


def build_action(call: ToolCallContent, result: ToolResultMessage | None, cwd: str) -> ActionStep:
    """
    Merge a tool call with its correlated result.

    A call with no result is reported as successful with no output: the
    session may have been captured before the result arrived.
    Output is attached for failures and for successful bash calls only.
    """
    args = call.arguments
    ok = not (result is not None and result.isError)

    fields: dict[str, Any] = {
        'type': 'action',
        'name': call.name,
        'args': dict(args),
        'summary': summarize_tool_args(call.name, args, cwd),
        'ok': ok,
    }

    if result is not None and (not ok or call.name == 'bash'):
        output = extract_text_content(result.content)
        if output:
            fields['output'] = truncate_output(output)

    if call.name == 'edit' and args.get('path') and args.get('oldText') and args.get('newText'):
        fields['diff'] = EditDiff(
            path=shorten_path(str(args['path']), cwd),
            oldText=str(args['oldText']),
            newText=str(args['newText']),
        )

    return ActionStep(**fields)


def build_steps(
    assistant_messages: Sequence[AssistantMessage],
    tool_results: Mapping[str, ToolResultMessage],
    cwd: str,
) -> StepsResult:
    """
    Flatten assistant content blocks into steps, in content order.

    Text is narration when its message also calls a tool (the agent talking
    while it acts); otherwise it belongs to the final response. Action steps
    sit where the call appeared, not where the result arrived.
    """
    steps: list[Step] = []
    response_parts: list[str] = []

    for message in assistant_messages:
        acting = message.has_tool_call

        for block in message.content:
            if isinstance(block, ThinkingContent):
                text = block.thinking.strip()
                if text:
                    steps.append(NarrationStep(type='narration', text=text))
            elif isinstance(block, TextContent):
                text = block.text.strip()
                if not text:
                    continue
                if acting:
                    steps.append(NarrationStep(type='narration', text=text))
                else:
                    response_parts.append(text)
            elif isinstance(block, ToolCallContent):
                steps.append(build_action(block, tool_results.get(block.id), cwd))

    response = '\n\n'.join(response_parts) if response_parts else None
    return StepsResult(steps=steps, response=response)


# ==============================================================================
# Metadata Aggregator
# ==============================================================================


@attrs.define(frozen=True)
class TurnUsage:
    """Aggregated metadata for one turn."""

    model: str
    input_tokens: int
    output_tokens: int
    cost: float  # Rounded
    elapsed: int  # Seconds


def aggregate_usage(raw_turn: RawTurn) -> TurnUsage:
    """
    Sum usage across the turn's assistant messages.

    The model is the LAST one seen (a turn can span a model switch). Elapsed is
    measured from the prompt to the latest timestamp of any message in the turn.
    """
    model = ''
    input_tokens = 0
    output_tokens = 0
    cost = 0.0

    for message in raw_turn.assistant_messages:
        if message.model:
            model = message.model
        if message.usage is not None:
            input_tokens += message.usage.input
            output_tokens += message.usage.output
            if message.usage.cost is not None:
                cost += message.usage.cost.total

    prompt_ts = raw_turn.prompt.timestamp
    elapsed = 0
    if prompt_ts is not None:
        latest = max((m.timestamp for m in raw_turn.replies if m.timestamp is not None), default=prompt_ts)
        elapsed = round((max(latest, prompt_ts) - prompt_ts) / 1000)

    return TurnUsage(
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cost=round_cost(cost),
        elapsed=elapsed,
    )


# ==============================================================================
# Document Assembler
# ==============================================================================


def build_turn(
    raw_turn: RawTurn,
    tool_results: Mapping[str, ToolResultMessage],
    thinking_level: ThinkingLevel | None,
    cwd: str,
) -> Turn:
    """Build one Turn from a raw turn."""
    steps = build_steps(raw_turn.assistant_messages, tool_results, cwd)
    usage = aggregate_usage(raw_turn)

    fields: dict[str, Any] = {
        'prompt': message_text(raw_turn.prompt),
        'steps': steps.steps,
        'model': usage.model,
        'inputTokens': usage.input_tokens,
        'outputTokens': usage.output_tokens,
        'cost': usage.cost,
        'elapsed': usage.elapsed,
    }
    # Absent rather than null when unknown
    if steps.response is not None:
        fields['response'] = steps.response
    if thinking_level is not None:
        fields['thinkingLevel'] = thinking_level

    return Turn(**fields)


def build_trace(header: SessionHeader, entries: Sequence[SessionEntry], title: str) -> Trace:
    """
    Compile a session into a Trace.

    Args:
        header: Session header (id, cwd, creation timestamp)
        entries: Session entries in chronological order
        title: Display title, chosen by the caller

    Returns:
        Trace with one Turn per user prompt
    """
    scan = scan_entries(entries)

    turns = [
        build_turn(raw_turn, scan.tool_results, scan.level_at_prompt.get(raw_turn.prompt_index), header.cwd)
        for raw_turn in split_turns(scan.messages)
    ]

    return Trace(
        id=header.id,
        title=title,
        date=header.timestamp,
        totalCost=round_cost(sum((turn.cost for turn in turns), 0.0)),
        turns=turns,
    )
