"""
Test-side token source.

The parser consumes tokens, not text; this small scanner lets the tests be
written as Charj source. It only understands ASCII, so character offsets
are byte offsets.
"""

import re
from typing import Iterator

import pytest

from charj import LexicalError, parse_expression, parse_program
from charj.span import Span
from charj.tokens import KEYWORDS, PUNCTUATION, DocCommentKind, Token, TokenKind

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>[ \t\r]+)
    | (?P<newline>\n)
    | (?P<doc_line>///[^\n]*)
    | (?P<doc_block>/\*\*.*?\*/)
    | (?P<comment>//[^\n]*)
    | (?P<number>[0-9][0-9_]*(?:[eE][0-9][0-9_]*)?)
    | (?P<string>"[^"\n]*")
    | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<punct>\*\*|==|!=|<=|>=|<<|>>|&&|\|\||\+\+|--|=>|[{}()\[\];:,.$=<>+\-*/%!~&|^?])
    """,
    re.VERBOSE | re.DOTALL,
)


def scan(source: str) -> Iterator[Token]:
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise LexicalError(f"unrecognised character {source[pos]!r}", loc=Span(pos, pos + 1))
        start, end = match.span()
        group = match.lastgroup
        text = match.group()
        pos = end
        if group in ("ws", "comment"):
            continue
        if group == "newline":
            yield Token(TokenKind.NEWLINE, start, end)
        elif group == "doc_line":
            yield Token(TokenKind.DOC_COMMENT, start, end, (DocCommentKind.LINE, text[3:].strip()))
        elif group == "doc_block":
            yield Token(TokenKind.DOC_COMMENT, start, end, (DocCommentKind.BLOCK, text[3:-2].strip()))
        elif group == "number":
            mantissa, _, exponent = text.lower().partition("e")
            yield Token(TokenKind.NUMBER, start, end, (mantissa, exponent))
        elif group == "string":
            yield Token(TokenKind.STRING, start, end, text[1:-1])
        elif group == "word":
            if text in KEYWORDS:
                kind, width = KEYWORDS[text]
                yield Token(kind, start, end, width)
            else:
                yield Token(TokenKind.IDENT, start, end, text)
        else:
            yield Token(PUNCTUATION[text], start, end)


@pytest.fixture
def tokens():
    return lambda source: list(scan(source))


@pytest.fixture
def parse():
    return lambda source: parse_program(scan(source))


@pytest.fixture
def parse_expr():
    return lambda source: parse_expression(scan(source))
