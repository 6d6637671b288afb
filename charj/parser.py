from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from lark import Lark, Token as LarkToken, Tree
from lark.exceptions import UnexpectedToken
from lark.lexer import Lexer

from .ast import (
    Argument,
    Block,
    BreakStmt,
    BuiltinType,
    Call,
    Compare,
    ComparisonOperator,
    ContinueStmt,
    Expr,
    ExprStmt,
    FieldAccess,
    ForStmt,
    FunctionDecl,
    Identifier,
    IfStmt,
    ImportAlias,
    ImportModule,
    IntegerLiteral,
    LetStmt,
    ListLiteral,
    MethodDecl,
    MultipleParameters,
    NoParameters,
    PackageDecl,
    Parameter,
    ParameterList,
    Program,
    ReturnStmt,
    SingleParameter,
    Stmt,
    StringLiteral,
    StructDecl,
    TopLevelItem,
    TypeKind,
    TypeRef,
    VarDecl,
    WhileStmt,
)
from .errors import CharjSyntaxError
from .literals import parse_integer, parse_string
from .span import Span
from .tokens import IGNORED_KINDS, Token, TokenKind, describe, kind_for_terminal

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class TokenStreamLexer(Lexer):
    """
    Feeds tokens from an external token source into Lark.

    Doc comments and newlines are dropped here; the grammar has no use for
    them. Byte offsets travel as `start_pos`/`end_pos` so `propagate_positions`
    yields spans directly.
    """

    def __init__(self, lexer_conf) -> None:
        pass

    def lex(self, tokens: Iterable[Token]) -> Iterator[LarkToken]:
        for token in tokens:
            if token.kind in IGNORED_KINDS:
                continue
            value = token.value if token.value is not None else token.kind.terminal
            yield LarkToken(
                token.kind.terminal,
                value,
                start_pos=token.start,
                end_pos=token.end,
            )


_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    lexer=TokenStreamLexer,
    start=["program", "expression"],
    propagate_positions=True,
    maybe_placeholders=False,
)


def parse_program(tokens: Iterable[Token]) -> Program:
    """
    Parse a whole compilation unit.

    Raises `CharjSyntaxError` for the first token no production accepts.
    Errors raised by the token source itself (e.g. `LexicalError`) pass
    through untouched.
    """
    tree = _parse(tokens, "program")
    return _build_program(tree)


def parse_expression(tokens: Iterable[Token]) -> Expr:
    """Parse a single expression (no comparison chain), e.g. `a.b(c)`."""
    tree = _parse(tokens, "expression")
    return _build_expr(tree)


def _parse(tokens: Iterable[Token], start: str) -> Tree:
    if isinstance(tokens, (str, bytes)):
        raise TypeError("the parser takes a token stream, not source text")
    try:
        return _PARSER.parse(tokens, start=start)
    except UnexpectedToken as err:
        error = _syntax_error(err)
        logger.debug("syntax error: %s", error)
        raise error from err


def _syntax_error(err: UnexpectedToken) -> CharjSyntaxError:
    # LALR over a custom lexer only raises UnexpectedToken. accepts replays the
    # default reductions, expected is the merged state lookahead.
    expected = _describe_expected(err.accepts or err.expected)
    token = err.token
    if token.type == "$END":
        # Lark borrows the position of the last real token for $END.
        offset = token.end_pos if token.end_pos is not None else (token.start_pos or 0)
        return CharjSyntaxError("unexpected end of input", loc=Span.empty_at(offset), found=None, expected=expected)
    kind = kind_for_terminal(token.type)
    found = describe(kind) if kind is not None else token.type
    return CharjSyntaxError(
        f"unexpected token {found}",
        loc=Span.from_token(token),
        found=token.type,
        expected=expected,
    )


def _describe_expected(terminals: Iterable[str]) -> List[str]:
    result = []
    for terminal in terminals:
        if terminal == "$END":
            result.append("end of input")
            continue
        kind = kind_for_terminal(terminal)
        result.append(describe(kind) if kind is not None else terminal)
    return sorted(set(result))


def _build_program(tree: Tree) -> Program:
    items: List[TopLevelItem] = []
    for child in tree.children:
        kind = _name(child)
        if kind == "package_decl":
            items.append(PackageDecl(loc=_loc(child), name=_build_ident(child.children[0])))
        elif kind == "import_module":
            items.append(ImportModule(loc=_loc(child), name=_build_ident(child.children[0])))
        elif kind == "import_alias":
            path_token, alias_token = child.children
            path = StringLiteral(loc=Span.from_token(path_token), value=parse_string(path_token.value))
            items.append(ImportAlias(loc=_loc(child), path=path, alias=_build_ident(alias_token)))
        elif kind == "struct_decl":
            items.append(_build_struct(child))
        elif kind == "function_decl":
            items.append(_build_function(child))
        elif kind == "method_decl":
            items.append(_build_method(child))
        else:
            raise ValueError(f"Unexpected top-level node: {kind}")
    return Program(loc=_loc(tree), items=tuple(items))


def _build_struct(tree: Tree) -> StructDecl:
    name_token = tree.children[0]
    fields = []
    for field_node in tree.children[1:]:
        field_name, type_node = field_node.children
        fields.append(VarDecl(loc=_loc(field_node), name=_build_ident(field_name), type_expr=_build_expr(type_node)))
    return StructDecl(loc=_loc(tree), name=_build_ident(name_token), fields=tuple(fields))


def _build_function(tree: Tree) -> FunctionDecl:
    name = _build_ident(tree.children[0])
    params, body = _build_signature_tail(name, tree.children[1:])
    return FunctionDecl(loc=_loc(tree), name=name, params=params, body=body)


def _build_method(tree: Tree) -> MethodDecl:
    receiver = _build_ident(tree.children[0])
    name = _build_ident(tree.children[1])
    params, body = _build_signature_tail(name, tree.children[2:])
    return MethodDecl(loc=_loc(tree), receiver=receiver, name=name, params=params, body=body)


def _build_signature_tail(name: Identifier, children: list) -> tuple[ParameterList, Block]:
    if len(children) == 2:
        params = _build_parameter_list(children[0])
    else:
        # No parentheses at all: an empty list sitting right after the name.
        params = NoParameters(loc=Span.empty_at(name.loc.end))
    return params, _build_block(children[-1])


def _build_parameter_list(tree: Tree) -> ParameterList:
    kind = _name(tree)
    if kind == "no_parameters":
        return NoParameters(loc=_loc(tree))
    if kind == "single_parameter":
        return SingleParameter(loc=_loc(tree), parameter=_build_parameter(tree.children[0]))
    if kind == "multiple_parameters":
        entries = tuple(_build_optional_parameter(slot) for slot in tree.children)
        return MultipleParameters(loc=_loc(tree), entries=entries)
    raise ValueError(f"Unexpected parameter list node: {kind}")


def _build_optional_parameter(tree: Tree) -> Optional[Parameter]:
    if not tree.children:
        return None
    return _build_parameter(tree.children[0])


def _build_parameter(tree: Tree) -> Parameter:
    kind = _name(tree)
    if kind == "named_parameter":
        name_token, type_node = tree.children
        return Parameter(loc=_loc(tree), type_expr=_build_expr(type_node), name=_build_ident(name_token))
    if kind == "typed_parameter":
        type_expr = _build_expr(tree.children[0])
        name = _build_ident(tree.children[1]) if len(tree.children) > 1 else None
        return Parameter(loc=_loc(tree), type_expr=type_expr, name=name)
    raise ValueError(f"Unexpected parameter node: {kind}")


def _build_block(tree: Tree) -> Block:
    statements = tuple(_build_stmt(child) for child in tree.children)
    return Block(loc=_loc(tree), statements=statements)


def _build_stmt(tree: Tree) -> Stmt:
    kind = _name(tree)
    loc = _loc(tree)
    if kind == "let_stmt":
        name_token, type_node, value_node = tree.children
        return LetStmt(
            loc=loc,
            name=_build_ident(name_token),
            type_expr=_build_expr(type_node),
            value=_build_expr(value_node),
        )
    if kind == "expr_stmt":
        return ExprStmt(loc=loc, value=_build_expr(tree.children[0]))
    if kind == "if_stmt":
        condition = _build_expr(tree.children[0])
        then_block = _build_block(tree.children[1])
        else_block = _build_block(tree.children[2]) if len(tree.children) > 2 else None
        return IfStmt(loc=loc, condition=condition, then_block=then_block, else_block=else_block)
    if kind == "while_stmt":
        return WhileStmt(loc=loc, condition=_build_expr(tree.children[0]), body=_build_block(tree.children[1]))
    if kind == "for_stmt":
        return ForStmt(loc=loc)
    if kind == "break_stmt":
        return BreakStmt(loc=loc)
    if kind == "continue_stmt":
        return ContinueStmt(loc=loc)
    if kind == "return_stmt":
        values = None
        if tree.children:
            list_node = tree.children[0]
            elements = tuple(_build_expr(child) for child in list_node.children)
            values = ListLiteral(loc=_loc(list_node), elements=elements)
        return ReturnStmt(loc=loc, values=values)
    raise ValueError(f"Unsupported statement node: {kind}")


_COMPARISON_OPS = {
    "EQEQ": ComparisonOperator.EQ,
    "NOTEQ": ComparisonOperator.NE,
    "LT": ComparisonOperator.LT,
    "LTE": ComparisonOperator.LE,
    "GT": ComparisonOperator.GT,
    "GTE": ComparisonOperator.GE,
}


def _build_expr(node) -> Expr:
    if not isinstance(node, Tree):
        raise TypeError(f"Unexpected node type: {type(node)}")
    name = _name(node)
    loc = _loc(node)

    if name == "identifier":
        return Identifier(loc=loc, name=node.children[0].value)
    if name == "builtin_type":
        return TypeRef(loc=loc, type=_builtin_type(node.children[0]))
    if name == "list_type":
        return ListLiteral(loc=loc, elements=(), element_type=_build_expr(node.children[0]))
    if name == "string_literal":
        return StringLiteral(loc=loc, value=parse_string(node.children[0].value))
    if name == "number_literal":
        mantissa, exponent = node.children[0].value
        return IntegerLiteral(loc=loc, value=parse_integer(mantissa, exponent))
    if name == "call":
        callee = _build_expr(node.children[0])
        args: tuple = ()
        if len(node.children) > 1:
            args = tuple(
                Argument(loc=_loc(arg), value=_build_expr(arg.children[0]))
                for arg in node.children[1].children
            )
        return Call(loc=loc, callee=callee, args=args)
    if name == "field_access":
        receiver = _build_expr(node.children[0])
        return FieldAccess(loc=loc, receiver=receiver, name=_build_ident(node.children[1]))
    if name == "comparison":
        return _build_compare(node)
    raise ValueError(f"Unsupported expression node: {name}")


def _build_compare(tree: Tree) -> Compare:
    operands = [_build_expr(tree.children[0])]
    operators = []
    children = tree.children[1:]
    for idx in range(0, len(children), 2):
        operators.append(_COMPARISON_OPS[children[idx].type])
        operands.append(_build_expr(children[idx + 1]))
    return Compare(loc=_loc(tree), operands=tuple(operands), operators=tuple(operators))


def _builtin_type(token: LarkToken) -> BuiltinType:
    kind = kind_for_terminal(token.type)
    if kind is TokenKind.BOOL:
        return BuiltinType(TypeKind.BOOL)
    if kind is TokenKind.STRING_TYPE:
        return BuiltinType(TypeKind.STRING)
    if kind is TokenKind.BYTES:
        return BuiltinType(TypeKind.DYNAMIC_BYTES)
    if kind is TokenKind.INT:
        return BuiltinType(TypeKind.INT, token.value)
    if kind is TokenKind.UINT:
        return BuiltinType(TypeKind.UINT, token.value)
    if kind is TokenKind.FIXED_BYTES:
        return BuiltinType(TypeKind.BYTES, token.value)
    raise ValueError(f"Unexpected type token: {token.type}")


def _build_ident(token: LarkToken) -> Identifier:
    return Identifier(loc=Span.from_token(token), name=token.value)


def _loc(tree: Tree) -> Span:
    return Span.from_meta(tree.meta)


def _name(node: Tree | LarkToken) -> str:
    if isinstance(node, Tree):
        data = node.data
        if isinstance(data, LarkToken):
            return data.value
        return data
    if isinstance(node, LarkToken):
        return node.type
    return str(node)


__all__ = ["TokenStreamLexer", "parse_expression", "parse_program"]
