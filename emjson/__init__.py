"""Incremental parser for streams of JSON objects, with a table-driven lexer."""

__version__ = "0.1.0"
__all__ = ["action", "cli", "data", "matcher", "parser"]