"""
The token interface between a Charj token source and the parser.

A token source hands the parser an iterable of `Token`s. Each token carries
its kind, a half-open byte span and, for the kinds that need one, a payload:

- `IDENT`, `STRING`: the text (string contents without quotes)
- `NUMBER`: a `(mantissa, exponent)` pair of digit strings; an empty exponent
  means no scientific notation
- `DOC_COMMENT`: a `(DocCommentKind, text)` pair
- `INT`, `UINT`: the bit width; `FIXED_BYTES`: the byte count

`TokenKind` values double as the terminal names declared in `grammar.lark`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TokenKind(Enum):
    IDENT = "IDENT"
    STRING = "STRING"
    NUMBER = "NUMBER"
    DOC_COMMENT = "DOC_COMMENT"
    NEWLINE = "NEWLINE"

    # keywords
    PACKAGE = "_PACKAGE"
    IMPORT = "_IMPORT"
    AS = "_AS"
    STRUCT = "_STRUCT"
    FUN = "_FUN"
    LET = "_LET"
    IF = "_IF"
    ELSE = "_ELSE"
    WHILE = "_WHILE"
    FOR = "_FOR"
    BREAK = "_BREAK"
    CONTINUE = "_CONTINUE"
    RETURN = "_RETURN"

    # builtin types
    BOOL = "BOOL"
    STRING_TYPE = "STRING_TYPE"
    BYTES = "BYTES"
    INT = "INT"
    UINT = "UINT"
    FIXED_BYTES = "FIXED_BYTES"

    # punctuation
    LBRACE = "_LBRACE"
    RBRACE = "_RBRACE"
    LPAR = "_LPAR"
    RPAR = "_RPAR"
    LSQB = "_LSQB"
    RSQB = "_RSQB"
    SEMI = "_SEMI"
    COLON = "_COLON"
    COMMA = "_COMMA"
    DOT = "_DOT"
    DOLLAR = "_DOLLAR"
    EQUAL = "_EQUAL"
    EQEQ = "EQEQ"
    NOTEQ = "NOTEQ"
    LT = "LT"
    LTE = "LTE"
    GT = "GT"
    GTE = "GTE"
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    PERCENT = "PERCENT"
    POW = "POW"
    BANG = "BANG"
    TILDE = "TILDE"
    INCREMENT = "INCREMENT"
    DECREMENT = "DECREMENT"
    AMP = "AMP"
    PIPE = "PIPE"
    CARET = "CARET"
    SHL = "SHL"
    SHR = "SHR"
    ANDAND = "ANDAND"
    OROR = "OROR"
    QMARK = "QMARK"
    ARROW = "ARROW"

    @property
    def terminal(self) -> str:
        return self.value


class DocCommentKind(Enum):
    LINE = "line"
    BLOCK = "block"


# Tokens the grammar never sees.
IGNORED_KINDS = frozenset({TokenKind.DOC_COMMENT, TokenKind.NEWLINE})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    value: Any = None

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"token {self.kind.name} has invalid span {self.start}..{self.end}")


KEYWORDS: Dict[str, Tuple[TokenKind, Optional[int]]] = {
    "package": (TokenKind.PACKAGE, None),
    "pkg": (TokenKind.PACKAGE, None),
    "import": (TokenKind.IMPORT, None),
    "as": (TokenKind.AS, None),
    "struct": (TokenKind.STRUCT, None),
    "fun": (TokenKind.FUN, None),
    "let": (TokenKind.LET, None),
    "if": (TokenKind.IF, None),
    "else": (TokenKind.ELSE, None),
    "while": (TokenKind.WHILE, None),
    "for": (TokenKind.FOR, None),
    "break": (TokenKind.BREAK, None),
    "continue": (TokenKind.CONTINUE, None),
    "return": (TokenKind.RETURN, None),
    "bool": (TokenKind.BOOL, None),
    "string": (TokenKind.STRING_TYPE, None),
    "bytes": (TokenKind.BYTES, None),
    "byte": (TokenKind.FIXED_BYTES, 1),
    "int": (TokenKind.INT, 256),
    "uint": (TokenKind.UINT, 256),
}
KEYWORDS.update({f"int{bits}": (TokenKind.INT, bits) for bits in range(8, 257, 8)})
KEYWORDS.update({f"uint{bits}": (TokenKind.UINT, bits) for bits in range(8, 257, 8)})
KEYWORDS.update({f"bytes{n}": (TokenKind.FIXED_BYTES, n) for n in range(1, 33)})


PUNCTUATION: Dict[str, TokenKind] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "(": TokenKind.LPAR,
    ")": TokenKind.RPAR,
    "[": TokenKind.LSQB,
    "]": TokenKind.RSQB,
    ";": TokenKind.SEMI,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "$": TokenKind.DOLLAR,
    "=": TokenKind.EQUAL,
    "==": TokenKind.EQEQ,
    "!=": TokenKind.NOTEQ,
    "<": TokenKind.LT,
    "<=": TokenKind.LTE,
    ">": TokenKind.GT,
    ">=": TokenKind.GTE,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "**": TokenKind.POW,
    "!": TokenKind.BANG,
    "~": TokenKind.TILDE,
    "++": TokenKind.INCREMENT,
    "--": TokenKind.DECREMENT,
    "&": TokenKind.AMP,
    "|": TokenKind.PIPE,
    "^": TokenKind.CARET,
    "<<": TokenKind.SHL,
    ">>": TokenKind.SHR,
    "&&": TokenKind.ANDAND,
    "||": TokenKind.OROR,
    "?": TokenKind.QMARK,
    "=>": TokenKind.ARROW,
}

_SPELLINGS: Dict[TokenKind, str] = {kind: text for text, kind in PUNCTUATION.items()}
for _text, (_kind, _width) in KEYWORDS.items():
    if _width is None:
        _SPELLINGS.setdefault(_kind, _text)
# Kinds with a single fixed spelling are quoted when described.
_QUOTED = frozenset(_SPELLINGS)
_SPELLINGS.update(
    {
        TokenKind.IDENT: "identifier",
        TokenKind.STRING: "string literal",
        TokenKind.NUMBER: "number",
        TokenKind.DOC_COMMENT: "doc comment",
        TokenKind.NEWLINE: "newline",
        TokenKind.INT: "intN",
        TokenKind.UINT: "uintN",
        TokenKind.FIXED_BYTES: "bytesN",
    }
)

_BY_TERMINAL: Dict[str, TokenKind] = {kind.terminal: kind for kind in TokenKind}


def kind_for_terminal(terminal: str) -> Optional[TokenKind]:
    return _BY_TERMINAL.get(terminal)


def describe(kind: TokenKind) -> str:
    """Human spelling of a token kind, e.g. `"("` or `identifier`."""
    spelling = _SPELLINGS[kind]
    if kind in _QUOTED:
        return f'"{spelling}"'
    return spelling


__all__ = [
    "DocCommentKind",
    "IGNORED_KINDS",
    "KEYWORDS",
    "PUNCTUATION",
    "Token",
    "TokenKind",
    "describe",
    "kind_for_terminal",
]
