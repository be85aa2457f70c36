"""
Exception hierarchy for InfraExplain.

Only ParseError crosses the parse/analyze boundary; everything else that
goes wrong inside a document is degraded locally.
"""

from typing import Optional


class InfraExplainError(Exception):
    """Base exception for InfraExplain errors."""
    def __init__(self, message: str, source: str = ""):
        self.message = message
        self.source = source
        super().__init__(f"[{source}] {message}" if source else message)


class ParseError(InfraExplainError):
    """Configuration text could not be tokenized."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None,
                 source: str = ""):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message, source)


class RuleLoadError(InfraExplainError):
    """A rule file could not be read or contains an invalid rule."""
    pass


class ExplanationError(InfraExplainError):
    """The Claude API could not produce an explanation."""
    pass
