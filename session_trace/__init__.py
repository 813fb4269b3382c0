"""
session-trace - compile coding-agent session logs into render-ready traces.

Basic usage:
    from session_trace import build_trace

    trace = build_trace(header, entries, title='Fix flaky test')
    payload = trace.to_payload()
"""

from __future__ import annotations

from session_trace.schemas.trace import ActionStep, EditDiff, NarrationStep, Trace, Turn
from session_trace.services.transform import build_trace

__version__ = '0.1.0'

__all__ = [
    'ActionStep',
    'EditDiff',
    'NarrationStep',
    'Trace',
    'Turn',
    'build_trace',
]
