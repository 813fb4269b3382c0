"""Command-line interface for session-trace."""
