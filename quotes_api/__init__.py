"""Quotes API: static quote collection plus a Gemini-backed chat."""

__version__ = "1.0.0"
