"""
Compiler Exceptions

Only two kinds of failure escape the compiler: malformed filter expressions
(TranslationError) and a missing/unprepared context. Everything else degrades.
"""

from typing import Optional


class JsonQueryError(Exception):
    """Base class for all json query errors."""


class TranslationError(JsonQueryError, ValueError):
    """Raised when a filter expression cannot be translated into a predicate."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ContextNotPreparedError(JsonQueryError, RuntimeError):
    """Raised when a query context is requested before prepare() was called."""
