"""
Shared type definitions for schemas.

Layering:
- This module provides FOUNDATION types (BaseStrictModel, PermissiveModel, ThinkingLevel)
- session/ and trace.py import from here
"""

from __future__ import annotations

from typing import Literal

import pydantic

# ==============================================================================
# Base Strict Model (Foundation)
# ==============================================================================


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model for data we produce ourselves.

    Uses extra='forbid' to reject unknown fields - any field not modeled
    causes immediate validation failure (fail-fast).
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Permissive Model (Foundation)
# ==============================================================================


class PermissiveModel(pydantic.BaseModel):
    """
    Foundation permissive model for data read from agent session files.

    Symmetry with BaseStrictModel:
    - BaseStrictModel: extra='forbid' (rejects unknown fields)
    - PermissiveModel: extra='allow' (accepts unknown fields)

    Session files carry many fields we never read (provider, api, stopReason,
    cache token counts, ...). Only the fields the transform needs are modeled.

    Also used as the LAST type in typed unions to catch unknown structures:

        Entry = Annotated[
            MessageEntry | ThinkingLevelChangeEntry | UnknownEntry,
            pydantic.Field(union_mode='left_to_right'),
        ]
    """

    model_config = pydantic.ConfigDict(
        extra='allow',  # Accept unknown fields (graceful fallback)
        strict=True,  # Strict type coercion for known fields
        frozen=True,  # Immutable after creation
    )

    def get_extra_fields(self) -> dict[str, object]:
        """Get extra fields captured by this permissive model."""
        return dict(self.__pydantic_extra__) if self.__pydantic_extra__ else {}


# ==============================================================================
# Reasoning Level
# ==============================================================================

# Ordered from least to most deliberation
ThinkingLevel = Literal['off', 'minimal', 'low', 'medium', 'high', 'xhigh']
