from charj.ast import (
    Argument,
    BuiltinType,
    Call,
    Compare,
    ComparisonOperator,
    FieldAccess,
    Identifier,
    IntegerLiteral,
    ListLiteral,
    StringLiteral,
    TypeKind,
    TypeRef,
)


def _condition(parse, cond: str):
    (fn,) = parse(f"fun f {{ if ({cond}) {{ }} }}").functions
    return fn.body.statements[0].condition


def test_chained_comparison_stays_flat(parse) -> None:
    cond = _condition(parse, "a < b <= c")
    assert isinstance(cond, Compare)
    assert [op.name for op in cond.operands] == ["a", "b", "c"]
    assert cond.operators == (ComparisonOperator.LT, ComparisonOperator.LE)
    assert not any(isinstance(op, Compare) for op in cond.operands)


def test_all_comparison_operators(parse) -> None:
    cond = _condition(parse, "a == b != c < d <= e > f >= g")
    assert [op.value for op in cond.operators] == ["==", "!=", "<", "<=", ">", ">="]
    assert len(cond.operands) == 7


def test_compare_pairs_are_adjacent_conjuncts(parse) -> None:
    cond = _condition(parse, "lo <= x < hi")
    pairs = [(left.name, op.value, right.name) for left, op, right in cond.pairs()]
    assert pairs == [("lo", "<=", "x"), ("x", "<", "hi")]


def test_comparison_operands_can_be_calls(parse) -> None:
    cond = _condition(parse, "len(xs) >= 1")
    left, right = cond.operands
    assert isinstance(left, Call)
    assert isinstance(right, IntegerLiteral) and right.value == 1


def test_suffixes_chain_left_to_right(parse_expr) -> None:
    expr = parse_expr("a.b(x).c(y)")
    assert isinstance(expr, Call)
    (y,) = expr.args
    assert y.value == Identifier(loc=y.value.loc, name="y")
    c = expr.callee
    assert isinstance(c, FieldAccess) and c.name.name == "c"
    call_b = c.receiver
    assert isinstance(call_b, Call)
    assert [arg.value.name for arg in call_b.args] == ["x"]
    b = call_b.callee
    assert isinstance(b, FieldAccess) and b.name.name == "b"
    assert b.receiver.name == "a"


def test_field_access_after_call(parse_expr) -> None:
    expr = parse_expr("a.b(x).c")
    assert isinstance(expr, FieldAccess)
    assert expr.name.name == "c"
    assert isinstance(expr.receiver, Call)
    assert isinstance(expr.receiver.callee, FieldAccess)


def test_call_arguments(parse_expr) -> None:
    expr = parse_expr('emit("done", 2e3, f())')
    assert all(isinstance(arg, Argument) for arg in expr.args)
    text, number, inner = (arg.value for arg in expr.args)
    assert text == StringLiteral(loc=text.loc, value="done")
    assert number.value == 2000
    assert isinstance(inner, Call) and inner.args == ()


def test_call_without_arguments(parse_expr) -> None:
    expr = parse_expr("now()")
    assert isinstance(expr, Call)
    assert expr.args == ()


def test_builtin_types_are_type_refs(parse_expr) -> None:
    assert parse_expr("bool").type == BuiltinType(TypeKind.BOOL)
    assert parse_expr("string").type == BuiltinType(TypeKind.STRING)
    assert parse_expr("bytes").type == BuiltinType(TypeKind.DYNAMIC_BYTES)
    assert parse_expr("int").type == BuiltinType(TypeKind.INT, 256)
    assert parse_expr("int16").type == BuiltinType(TypeKind.INT, 16)
    assert parse_expr("uint").type == BuiltinType(TypeKind.UINT, 256)
    assert parse_expr("byte").type == BuiltinType(TypeKind.BYTES, 1)
    assert parse_expr("bytes4").type == BuiltinType(TypeKind.BYTES, 4)
    assert str(BuiltinType(TypeKind.UINT, 8)) == "uint8"
    assert str(BuiltinType(TypeKind.BYTES, 4)) == "bytes4"


def test_type_conversion_call_uses_type_ref_callee(parse_expr) -> None:
    expr = parse_expr("uint8(x)")
    assert isinstance(expr.callee, TypeRef)
    assert expr.callee.type == BuiltinType(TypeKind.UINT, 8)


def test_user_type_names_are_plain_identifiers(parse_expr) -> None:
    expr = parse_expr("Point")
    assert isinstance(expr, Identifier)
    assert expr.name == "Point"


def test_list_type_keeps_element_type(parse_expr) -> None:
    expr = parse_expr("[][]Point")
    assert isinstance(expr, ListLiteral)
    assert expr.elements == ()
    inner = expr.element_type
    assert isinstance(inner, ListLiteral)
    assert inner.element_type.name == "Point"


def test_scientific_integer_literal(parse_expr) -> None:
    expr = parse_expr("3e100")
    assert isinstance(expr, IntegerLiteral)
    assert expr.value == 3 * 10**100
    assert len(str(expr.value)) == 101


def test_underscored_integer_literal(parse_expr) -> None:
    assert parse_expr("1_000").value == 1000
