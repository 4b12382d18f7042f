"""Markdown editor API: user-owned documents with versioned markdown content."""

__version__ = "1.0.0"
