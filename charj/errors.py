"""
Errors raised while turning a token stream into an AST.

Both error kinds are `ValueError` subclasses carrying a best-effort `loc` so a
driver can convert them into diagnostics instead of crashing.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .span import Span


class CharjError(ValueError):
    def __init__(self, message: str, *, loc: Optional[Span] = None) -> None:
        super().__init__(message)
        self.message = message
        self.loc = loc


class LexicalError(CharjError):
    """
    Malformed source text, raised by the token source.

    The parser never raises this itself; when a token source raises it mid
    stream it propagates out of `parse_program` unchanged.
    """


class CharjSyntaxError(CharjError):
    """
    The first token (or end of input) that no production accepts.

    `found` is the offending terminal name, or `None` at end of input.
    `expected` lists the spellings of the tokens that would have been accepted.
    Parsing stops here; there is no recovery and no partial tree.
    """

    def __init__(
        self,
        message: str,
        *,
        loc: Span,
        found: Optional[str],
        expected: Sequence[str] = (),
    ) -> None:
        super().__init__(message, loc=loc)
        self.found = found
        self.expected = list(expected)

    @property
    def at_eof(self) -> bool:
        return self.found is None

    def __str__(self) -> str:
        text = f"{self.message} at {self.loc}"
        if self.expected:
            text += f"; expected one of {', '.join(self.expected)}"
        return text


__all__ = ["CharjError", "CharjSyntaxError", "LexicalError"]
