"""
Source spans attached to every AST node.

Offsets are byte offsets into the source text and the range is half-open, so
`source[span.start:span.end]` is exactly the text a node was built from.
Spans are diagnostic only; nothing in the tree's meaning depends on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Span:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    @classmethod
    def empty_at(cls, offset: int) -> "Span":
        return cls(offset, offset)

    @classmethod
    def from_token(cls, token: Any) -> "Span":
        """Span of a Lark token produced by the token stream lexer."""
        return cls(token.start_pos, token.end_pos)

    @classmethod
    def from_meta(cls, meta: Any) -> "Span":
        """Span of a Lark tree node (requires `propagate_positions`)."""
        return cls(meta.start_pos, meta.end_pos)

    def text(self, source: str) -> str:
        return source[self.start : self.end]

    def covers(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


__all__ = ["Span"]
