"""Charj front end: token stream in, span-annotated AST out."""

from .errors import CharjError, CharjSyntaxError, LexicalError
from .parser import parse_expression, parse_program
from .span import Span
from .tokens import Token, TokenKind

__all__ = [
    "CharjError",
    "CharjSyntaxError",
    "LexicalError",
    "Span",
    "Token",
    "TokenKind",
    "parse_expression",
    "parse_program",
]
