"""
Pydantic schemas for session-trace.

- session/: typed records read from agent session files (input side)
- trace.py: the compiled trace document (output side)
- operations/: result models returned by services
"""
