from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from .span import Span


class Node:
    loc: Span


class Expr(Node):
    pass


class Stmt(Node):
    pass


class TypeKind(Enum):
    BOOL = "bool"
    STRING = "string"
    DYNAMIC_BYTES = "bytes"
    INT = "int"
    UINT = "uint"
    BYTES = "bytesN"


@dataclass(frozen=True)
class BuiltinType:
    kind: TypeKind
    # bits for INT/UINT, bytes for BYTES
    width: Optional[int] = None

    def __str__(self) -> str:
        if self.kind is TypeKind.BYTES:
            return f"bytes{self.width}"
        if self.kind in (TypeKind.INT, TypeKind.UINT):
            return f"{self.kind.value}{self.width}"
        return self.kind.value


class ComparisonOperator(Enum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


# Expressions


@dataclass(frozen=True)
class Identifier(Expr):
    loc: Span = field(compare=False)
    name: str


@dataclass(frozen=True)
class TypeRef(Expr):
    loc: Span = field(compare=False)
    type: BuiltinType


@dataclass(frozen=True)
class StringLiteral(Expr):
    loc: Span = field(compare=False)
    value: str


@dataclass(frozen=True)
class IntegerLiteral(Expr):
    loc: Span = field(compare=False)
    value: int


@dataclass(frozen=True)
class ListLiteral(Expr):
    """
    A list of expressions.

    Return statements use it for their value list. A `[]T` list type is an
    empty `ListLiteral` whose `element_type` holds `T`.
    """

    loc: Span = field(compare=False)
    elements: Tuple[Expr, ...]
    element_type: Optional[Expr] = None


@dataclass(frozen=True)
class Argument(Node):
    loc: Span = field(compare=False)
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    loc: Span = field(compare=False)
    callee: Expr
    args: Tuple[Argument, ...]


@dataclass(frozen=True)
class FieldAccess(Expr):
    loc: Span = field(compare=False)
    receiver: Expr
    name: Identifier


@dataclass(frozen=True)
class Compare(Expr):
    """
    A flat comparison chain: `a < b <= c` keeps all three operands and both
    operators in source order instead of nesting binary nodes.
    """

    loc: Span = field(compare=False)
    operands: Tuple[Expr, ...]
    operators: Tuple[ComparisonOperator, ...]

    def __post_init__(self) -> None:
        if not self.operators:
            raise ValueError("Compare requires at least one operator")
        if len(self.operands) != len(self.operators) + 1:
            raise ValueError("Compare needs exactly one more operand than operators")

    def pairs(self) -> Iterator[Tuple[Expr, ComparisonOperator, Expr]]:
        """Adjacent `(left, op, right)` triples, the conjuncts of the chain."""
        for idx, op in enumerate(self.operators):
            yield self.operands[idx], op, self.operands[idx + 1]


# Statements


@dataclass(frozen=True)
class Block(Node):
    loc: Span = field(compare=False)
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class VarDecl(Stmt):
    loc: Span = field(compare=False)
    name: Identifier
    type_expr: Expr


@dataclass(frozen=True)
class LetStmt(Stmt):
    loc: Span = field(compare=False)
    name: Identifier
    type_expr: Expr
    value: Expr


@dataclass(frozen=True)
class ExprStmt(Stmt):
    loc: Span = field(compare=False)
    value: Expr


@dataclass(frozen=True)
class IfStmt(Stmt):
    loc: Span = field(compare=False)
    condition: Expr
    then_block: Block
    else_block: Optional[Block] = None


@dataclass(frozen=True)
class WhileStmt(Stmt):
    loc: Span = field(compare=False)
    condition: Expr
    body: Block


@dataclass(frozen=True)
class ForStmt(Stmt):
    loc: Span = field(compare=False)


@dataclass(frozen=True)
class BreakStmt(Stmt):
    loc: Span = field(compare=False)


@dataclass(frozen=True)
class ContinueStmt(Stmt):
    loc: Span = field(compare=False)


@dataclass(frozen=True)
class ReturnStmt(Stmt):
    loc: Span = field(compare=False)
    values: Optional[ListLiteral]


# Declarations


@dataclass(frozen=True)
class Parameter(Node):
    loc: Span = field(compare=False)
    type_expr: Expr
    name: Optional[Identifier] = None


class ParameterList(Node):
    """
    Base for the three parameter list shapes.

    Only `MultipleParameters` can hold a missing slot; a one-parameter list is
    always a `SingleParameter` with the parameter present.
    """

    @property
    def slots(self) -> Tuple[Optional[Parameter], ...]:
        raise NotImplementedError


@dataclass(frozen=True)
class NoParameters(ParameterList):
    loc: Span = field(compare=False)

    @property
    def slots(self) -> Tuple[Optional[Parameter], ...]:
        return ()


@dataclass(frozen=True)
class SingleParameter(ParameterList):
    loc: Span = field(compare=False)
    parameter: Parameter

    def __post_init__(self) -> None:
        if self.parameter is None:
            raise ValueError("SingleParameter cannot hold a missing parameter")

    @property
    def slots(self) -> Tuple[Optional[Parameter], ...]:
        return (self.parameter,)


@dataclass(frozen=True)
class MultipleParameters(ParameterList):
    loc: Span = field(compare=False)
    entries: Tuple[Optional[Parameter], ...]

    def __post_init__(self) -> None:
        if len(self.entries) < 2:
            raise ValueError("MultipleParameters needs at least two slots")

    @property
    def slots(self) -> Tuple[Optional[Parameter], ...]:
        return self.entries


@dataclass(frozen=True)
class PackageDecl(Node):
    loc: Span = field(compare=False)
    name: Identifier


class ImportDecl(Node):
    pass


@dataclass(frozen=True)
class ImportModule(ImportDecl):
    """`import name;`"""

    loc: Span = field(compare=False)
    name: Identifier


@dataclass(frozen=True)
class ImportAlias(ImportDecl):
    """`import "path" as alias;`"""

    loc: Span = field(compare=False)
    path: StringLiteral
    alias: Identifier


@dataclass(frozen=True)
class StructDecl(Node):
    loc: Span = field(compare=False)
    name: Identifier
    fields: Tuple[VarDecl, ...]


@dataclass(frozen=True)
class FunctionDecl(Node):
    loc: Span = field(compare=False)
    name: Identifier
    params: ParameterList
    body: Block


@dataclass(frozen=True)
class MethodDecl(Node):
    """`Receiver$name(...) { ... }`, a function bound to a struct name."""

    loc: Span = field(compare=False)
    receiver: Identifier
    name: Identifier
    params: ParameterList
    body: Block


TopLevelItem = Union[PackageDecl, ImportDecl, StructDecl, FunctionDecl, MethodDecl]


@dataclass(frozen=True)
class Program(Node):
    loc: Span = field(compare=False)
    items: Tuple[TopLevelItem, ...]

    @property
    def functions(self) -> Tuple[FunctionDecl, ...]:
        return tuple(item for item in self.items if isinstance(item, FunctionDecl))

    @property
    def methods(self) -> Tuple[MethodDecl, ...]:
        return tuple(item for item in self.items if isinstance(item, MethodDecl))

    @property
    def structs(self) -> Tuple[StructDecl, ...]:
        return tuple(item for item in self.items if isinstance(item, StructDecl))

    @property
    def imports(self) -> Tuple[ImportDecl, ...]:
        return tuple(item for item in self.items if isinstance(item, ImportDecl))


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of `node` in field order, skipping missing slots."""
    for f in fields(node):
        if f.name == "loc":
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, Node):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of `node` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))


__all__ = [
    "Argument",
    "Block",
    "BreakStmt",
    "BuiltinType",
    "Call",
    "Compare",
    "ComparisonOperator",
    "ContinueStmt",
    "Expr",
    "ExprStmt",
    "FieldAccess",
    "ForStmt",
    "FunctionDecl",
    "Identifier",
    "IfStmt",
    "ImportAlias",
    "ImportDecl",
    "ImportModule",
    "IntegerLiteral",
    "LetStmt",
    "ListLiteral",
    "MethodDecl",
    "MultipleParameters",
    "Node",
    "NoParameters",
    "PackageDecl",
    "Parameter",
    "ParameterList",
    "Program",
    "ReturnStmt",
    "SingleParameter",
    "Stmt",
    "StringLiteral",
    "StructDecl",
    "TopLevelItem",
    "TypeKind",
    "TypeRef",
    "VarDecl",
    "WhileStmt",
    "iter_child_nodes",
    "walk",
]
