"""visionchat: a terminal chat client for OpenAI-compatible vision models."""

__version__ = "0.1.0"
