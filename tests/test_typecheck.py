import io

import pytest

from coolsemant.classtable import ClassTable, SemanticError
from coolsemant.symtab import SymbolTable
from coolsemant.tree import (
    Assign,
    Attr,
    Block,
    BoolConst,
    Branch,
    ClassDecl,
    Cond,
    Dispatch,
    IntConst,
    Let,
    Lt,
    Method,
    New,
    NoExpr,
    ObjectRef,
    Plus,
    Program,
    StaticDispatch,
    StringConst,
    TypCase,
)
from coolsemant.typecheck import check_expression, check_program


def _hierarchy():
    a = ClassDecl("A", "Object", [Method("f", [], "SELF_TYPE", NoExpr())], "t.cl")
    b = ClassDecl("B", "A", [], "t.cl")
    c = ClassDecl("C", "A", [], "t.cl")
    return [a, b, c]


def _table():
    stream = io.StringIO()
    return ClassTable(_hierarchy(), stream), stream


def _env(**bindings):
    env = SymbolTable()
    env.enterscope()
    env.addid("self", "SELF_TYPE")
    for name, type_name in bindings.items():
        env.addid(name, type_name)
    return env


def test_constants_are_annotated():
    table, _ = _table()
    expr = IntConst("7")
    assert check_expression(expr, table, "A", _env()) == "Int"
    assert expr.type == "Int"
    assert check_expression(StringConst("s"), table, "A", _env()) == "String"
    assert check_expression(BoolConst(True), table, "A", _env()) == "Bool"


def test_self_is_self_type():
    table, _ = _table()
    assert check_expression(ObjectRef("self"), table, "A", _env()) == "SELF_TYPE"


def test_undeclared_identifier():
    table, stream = _table()
    assert check_expression(ObjectRef("y"), table, "A", _env()) == "Object"
    assert stream.getvalue() == "Undeclared identifier y.\n"
    assert table.errors() == 1


def test_arithmetic_and_comparison_annotate_operands():
    table, _ = _table()
    left = IntConst("1")
    expr = Plus(left, IntConst("2"))
    assert check_expression(expr, table, "A", _env()) == "Int"
    assert left.type == "Int"
    assert check_expression(Lt(IntConst("1"), IntConst("2")), table, "A", _env()) == "Bool"


def test_empty_block_is_object():
    table, _ = _table()
    assert check_expression(Block([]), table, "A", _env()) == "Object"
    assert check_expression(Block([IntConst("1"), StringConst("x")]), table, "A", _env()) == "String"


def test_cond_takes_least_upper_bound():
    table, stream = _table()
    expr = Cond(BoolConst(True), ObjectRef("b"), ObjectRef("c"))
    assert check_expression(expr, table, "A", _env(b="B", c="C")) == "A"
    assert table.errors() == 0
    both_self = Cond(BoolConst(False), ObjectRef("self"), ObjectRef("self"))
    assert check_expression(both_self, table, "A", _env()) == "SELF_TYPE"


def test_cond_predicate_must_be_bool():
    table, stream = _table()
    expr = Cond(IntConst("1"), IntConst("2"), IntConst("3"), line_number=4)
    check_expression(expr, table, "A", _env())
    assert stream.getvalue() == "t.cl:4: Predicate of 'if' does not have type Bool.\n"


def test_assign_conforming_and_not():
    table, stream = _table()
    assert check_expression(Assign("x", New("B")), table, "A", _env(x="A")) == "B"
    assert table.errors() == 0
    check_expression(Assign("x", IntConst("1")), table, "A", _env(x="A"))
    assert "Type Int of assigned expression does not conform to declared type A of identifier x." in stream.getvalue()


def test_assign_to_self():
    table, stream = _table()
    assert check_expression(Assign("self", IntConst("1")), table, "A", _env()) == "Object"
    assert "Cannot assign to 'self'." in stream.getvalue()


def test_let_scopes_identifier_and_checks_init():
    table, stream = _table()
    env = _env()
    expr = Let("x", "Int", StringConst("s"), ObjectRef("x"))
    assert check_expression(expr, table, "A", env) == "Int"
    assert env.lookup("x") is None
    assert (
        "Inferred type String of initialization of x does not conform to identifier's declared type Int."
        in stream.getvalue()
    )


def test_case_lub_and_duplicates():
    table, stream = _table()
    expr = TypCase(New("B"), [Branch("b", "B", ObjectRef("b")), Branch("c", "C", ObjectRef("c"))])
    assert check_expression(expr, table, "A", _env()) == "A"
    assert table.errors() == 0
    dup = TypCase(IntConst("1"), [Branch("a", "Int", IntConst("2")), Branch("b", "Int", IntConst("3"))])
    assert check_expression(dup, table, "A", _env()) == "Int"
    assert "Duplicate branch Int in case statement." in stream.getvalue()


def test_dispatch_self_type_return_takes_receiver_type():
    table, _ = _table()
    expr = Dispatch(New("IO"), "out_string", [StringConst("hi")])
    assert check_expression(expr, table, "A", _env()) == "IO"
    on_self = Dispatch(ObjectRef("self"), "f", [])
    assert check_expression(on_self, table, "B", _env()) == "SELF_TYPE"


def test_dispatch_errors():
    table, stream = _table()
    assert check_expression(Dispatch(New("A"), "nope", []), table, "A", _env()) == "Object"
    assert "Dispatch to undefined method nope." in stream.getvalue()
    check_expression(Dispatch(New("IO"), "out_int", []), table, "A", _env())
    assert "Method out_int called with wrong number of arguments." in stream.getvalue()
    check_expression(Dispatch(New("IO"), "out_string", [IntConst("1")]), table, "A", _env())
    assert (
        "In call of method out_string, type Int of parameter arg does not conform to declared type String."
        in stream.getvalue()
    )
    assert table.errors() == 3


def test_static_dispatch():
    table, stream = _table()
    expr = StaticDispatch(New("B"), "A", "f", [])
    assert check_expression(expr, table, "A", _env()) == "A"
    assert table.errors() == 0
    check_expression(StaticDispatch(IntConst("1"), "A", "f", []), table, "A", _env())
    assert "Expression type Int does not conform to declared static dispatch type A." in stream.getvalue()


def test_unknown_node_raises_type_error():
    table, _ = _table()
    with pytest.raises(TypeError):
        check_expression(Branch("a", "Int", IntConst("1")), table, "A", _env())


def test_check_program_accepts_valid_program():
    body = Dispatch(ObjectRef("self"), "out_string", [ObjectRef("greeting")])
    main = ClassDecl(
        "Main",
        "IO",
        [
            Attr("greeting", "String", StringConst("hi")),
            Method("main", [], "SELF_TYPE", body),
        ],
        "t.cl",
    )
    stream = io.StringIO()
    table = check_program(Program([main]), stream)
    assert table.errors() == 0
    assert body.type == "SELF_TYPE"
    assert stream.getvalue() == ""


def test_check_program_reports_bad_return_type():
    method = Method("f", [], "Int", StringConst("s"), line_number=3)
    cls = ClassDecl("Main", "Object", [method], "t.cl")
    stream = io.StringIO()
    with pytest.raises(SemanticError) as info:
        check_program(Program([cls]), stream)
    assert info.value.errors == 1
    assert stream.getvalue() == (
        "t.cl:3: Inferred return type String of method f does not conform to declared return type Int.\n"
        "Compilation halted due to static semantic errors.\n"
    )


def test_check_program_checks_attribute_initializers_and_formals():
    good = Method("g", [Formal_ := None] if False else [], "Int", IntConst("1"))
    cls = ClassDecl(
        "Main",
        "Object",
        [Attr("a", "Int", ObjectRef("missing")), good],
        "t.cl",
    )
    stream = io.StringIO()
    with pytest.raises(SemanticError):
        check_program(Program([cls]), stream)
    assert stream.getvalue().startswith("Undeclared identifier missing.\n")