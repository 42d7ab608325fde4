"""Groq chat-completions proxy."""

__version__ = "0.1.0"
