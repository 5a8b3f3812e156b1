"""Core configuration, logging and error types for tmuxstar."""

__version__ = "0.3.0"
