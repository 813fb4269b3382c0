"""Configuration for session-trace."""
