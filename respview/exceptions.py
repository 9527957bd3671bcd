"""
Exceptions raised inside the respview pipeline stages.

None of these reach the caller of ``respview.process``: the orchestrator
catches them and falls back to the best text it has.
"""

from typing import Optional


class RespviewError(Exception):
    """Base class for respview errors."""


class TokenizationError(RespviewError):
    """A grammar scan could not cover the text losslessly."""

    def __init__(self, message: str, grammar: Optional[str] = None, offset: Optional[int] = None):
        super().__init__(message)
        self.grammar = grammar
        self.offset = offset

    def __str__(self) -> str:
        base = super().__str__()
        if self.grammar is None:
            return base
        return f"{base} (grammar={self.grammar}, offset={self.offset})"


class RenderError(RespviewError):
    """Style emission failed."""
