"""
Pydantic models for the compiled trace document.

This is the wire format handed to publish sinks and HTML renderers. Field names
are camelCase because they ARE the JSON keys.

Optional fields (response, thinkingLevel, output, diff) are only set when they
carry a value; serialize with to_payload() so unset fields are absent rather
than null.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

import pydantic

from session_trace.schemas.types import BaseStrictModel, ThinkingLevel

# ==============================================================================
# Steps (Discriminated Union)
# ==============================================================================


class NarrationStep(BaseStrictModel):
    """Reasoning or commentary the agent produced while working."""

    type: Literal['narration']
    text: str


class EditDiff(BaseStrictModel):
    """Before/after text of an edit tool call, for diff rendering."""

    path: str  # Shortened relative to the session cwd
    oldText: str
    newText: str


class ActionStep(BaseStrictModel):
    """A tool invocation merged with its result."""

    type: Literal['action']
    name: str
    args: Mapping[str, Any]  # Raw call arguments
    summary: str  # One-line argument summary (path, command, or compact JSON)
    ok: bool
    output: str | None = None
    diff: EditDiff | None = None


Step = Annotated[NarrationStep | ActionStep, pydantic.Field(discriminator='type')]


# ==============================================================================
# Turn
# ==============================================================================


class Turn(BaseStrictModel):
    """One user prompt and all agent activity until the next prompt."""

    prompt: str
    steps: Sequence[Step]
    response: str | None = None
    model: str
    inputTokens: int
    outputTokens: int
    cost: float  # Rounded to 6 decimals
    elapsed: int  # Seconds from prompt to last logged message
    thinkingLevel: ThinkingLevel | None = None


# ==============================================================================
# Trace
# ==============================================================================


class Trace(BaseStrictModel):
    """Top-level compiled document."""

    id: str
    title: str
    date: str  # Session creation timestamp, verbatim
    totalCost: float
    turns: Sequence[Turn]

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with unset optional fields omitted."""
        return self.model_dump(mode='json', exclude_unset=True)

    def to_json_bytes(self) -> bytes:
        """UTF-8 JSON encoding of to_payload()."""
        return self.model_dump_json(exclude_unset=True).encode('utf-8')
