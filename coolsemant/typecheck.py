"""Static type checking of expressions, methods and whole programs."""

from __future__ import annotations

from functools import singledispatch
from typing import List, Optional, TextIO

from .classtable import (
    BOOL,
    HALT_MESSAGE,
    INT,
    NO_TYPE,
    OBJECT,
    SELF,
    SELF_TYPE,
    STR,
    ClassTable,
    SemanticError,
)
from .symtab import SymbolTable
from .tree import (
    Assign,
    Attr,
    Block,
    BoolConst,
    ClassDecl,
    Comp,
    Cond,
    Dispatch,
    Divide,
    Eq,
    Expression,
    IntConst,
    IsVoid,
    Leq,
    Let,
    Loop,
    Lt,
    Method,
    Mul,
    Neg,
    New,
    NoExpr,
    ObjectRef,
    Plus,
    Program,
    StaticDispatch,
    StringConst,
    Sub,
    TypCase,
)

Env = SymbolTable[str, str]


def _typed(expr: Expression, type_name: str) -> str:
    expr.type = type_name
    return type_name


def _resolve(type_name: str, current_class: str) -> str:
    """Read SELF_TYPE as the class being checked."""
    return current_class if type_name == SELF_TYPE else type_name


def check_expression(expr: Expression, table: ClassTable, current_class: str, env: Env) -> str:
    """Type-check ``expr`` inside ``current_class``, annotate it and return its type."""
    return _check(expr, table, current_class, env)


@singledispatch
def _check(expr, table: ClassTable, current_class: str, env: Env) -> str:
    raise TypeError(f"cannot type-check {type(expr).__name__}")


@_check.register
def _(expr: IntConst, table, current_class, env):
    return _typed(expr, INT)


@_check.register
def _(expr: BoolConst, table, current_class, env):
    return _typed(expr, BOOL)


@_check.register
def _(expr: StringConst, table, current_class, env):
    return _typed(expr, STR)


@_check.register
def _(expr: NoExpr, table, current_class, env):
    return _typed(expr, NO_TYPE)


@_check.register
def _(expr: New, table, current_class, env):
    return _typed(expr, expr.type_name)


@_check.register
def _(expr: ObjectRef, table, current_class, env):
    if expr.name == SELF:
        return _typed(expr, SELF_TYPE)
    found = env.lookup(expr.name)
    if found is None:
        table.report(f"Undeclared identifier {expr.name}.")
        return _typed(expr, OBJECT)
    return _typed(expr, found)


@_check.register
def _(expr: Assign, table, current_class, env):
    filename = table.filename_of(current_class)
    if expr.name == SELF:
        table.report("Cannot assign to 'self'.", filename, expr)
        _check(expr.expr, table, current_class, env)
        return _typed(expr, OBJECT)

    given = _check(expr.expr, table, current_class, env)
    declared = env.lookup(expr.name)
    if declared is None:
        table.report(f"Assignment to undeclared variable {expr.name}.", filename, expr)
        return _typed(expr, given)

    if declared == SELF_TYPE:
        ok = given in (SELF_TYPE, NO_TYPE)
    else:
        ok = given == NO_TYPE or table.conforms(_resolve(given, current_class), declared)
    if not ok:
        table.report(
            f"Type {given} of assigned expression does not conform to declared type "
            f"{declared} of identifier {expr.name}.",
            filename,
            expr,
        )
    return _typed(expr, given)


@_check.register
def _(expr: Block, table, current_class, env):
    last = OBJECT
    for sub in expr.body:
        last = _check(sub, table, current_class, env)
    return _typed(expr, last)


@_check.register(IsVoid)
@_check.register(Comp)
def _(expr, table, current_class, env):
    _check(expr.e1, table, current_class, env)
    return _typed(expr, BOOL)


@_check.register
def _(expr: Neg, table, current_class, env):
    _check(expr.e1, table, current_class, env)
    return _typed(expr, INT)


@_check.register(Plus)
@_check.register(Sub)
@_check.register(Mul)
@_check.register(Divide)
def _(expr, table, current_class, env):
    _check(expr.e1, table, current_class, env)
    _check(expr.e2, table, current_class, env)
    return _typed(expr, INT)


@_check.register(Lt)
@_check.register(Leq)
@_check.register(Eq)
def _(expr, table, current_class, env):
    _check(expr.e1, table, current_class, env)
    _check(expr.e2, table, current_class, env)
    return _typed(expr, BOOL)


@_check.register
def _(expr: Cond, table, current_class, env):
    filename = table.filename_of(current_class)
    if _check(expr.pred, table, current_class, env) != BOOL:
        table.report("Predicate of 'if' does not have type Bool.", filename, expr)
    t_then = _check(expr.then_exp, table, current_class, env)
    t_else = _check(expr.else_exp, table, current_class, env)
    if t_then == SELF_TYPE and t_else == SELF_TYPE:
        return _typed(expr, SELF_TYPE)
    result = table.lub(_resolve(t_then, current_class), _resolve(t_else, current_class))
    return _typed(expr, result)


@_check.register
def _(expr: Loop, table, current_class, env):
    _check(expr.pred, table, current_class, env)
    _check(expr.body, table, current_class, env)
    return _typed(expr, OBJECT)


@_check.register
def _(expr: Let, table, current_class, env):
    filename = table.filename_of(current_class)
    init_type = _check(expr.init, table, current_class, env)
    if init_type != NO_TYPE and not table.conforms(init_type, expr.type_decl):
        table.report(
            f"Inferred type {init_type} of initialization of {expr.identifier} "
            f"does not conform to identifier's declared type {expr.type_decl}.",
            filename,
            expr,
        )
    with env.scope():
        env.addid(expr.identifier, expr.type_decl)
        body_type = _check(expr.body, table, current_class, env)
    return _typed(expr, body_type)


@_check.register
def _(expr: TypCase, table, current_class, env):
    filename = table.filename_of(current_class)
    _check(expr.expr, table, current_class, env)

    result = NO_TYPE
    seen = set()
    all_self_type = True
    for branch in expr.cases:
        if branch.type_decl in seen:
            table.report(f"Duplicate branch {branch.type_decl} in case statement.", filename, expr)
        else:
            seen.add(branch.type_decl)

        with env.scope():
            env.addid(branch.name, branch.type_decl)
            branch_type = _check(branch.expr, table, current_class, env)

        if branch_type != SELF_TYPE:
            all_self_type = False
        branch_cmp = _resolve(branch_type, current_class)
        if result == NO_TYPE:
            result = branch_cmp
        else:
            result = table.lub(_resolve(result, current_class), branch_cmp)

    if result == NO_TYPE:
        result = OBJECT
    if all_self_type:
        result = SELF_TYPE
    return _typed(expr, result)


def _check_actuals(actuals: List[Expression], table, current_class, env) -> List[str]:
    return [_check(arg, table, current_class, env) for arg in actuals]


def _argument_error(table, filename, expr, formal, given) -> None:
    table.report(
        f"In call of method {expr.name}, type {given} of parameter {formal.name} "
        f"does not conform to declared type {formal.type_decl}.",
        filename,
        expr,
    )


def _arity_matches(table, filename, expr, method: Method, actual_types: List[str]) -> bool:
    if len(actual_types) != len(method.formals):
        table.report(f"Method {expr.name} called with wrong number of arguments.", filename, expr)
        return False
    return True


@_check.register
def _(expr: Dispatch, table, current_class, env):
    filename = table.filename_of(current_class)
    receiver = _check(expr.expr, table, current_class, env)
    actual_types = _check_actuals(expr.actual, table, current_class, env)

    method = table.lookup_method(_resolve(receiver, current_class), expr.name)
    if method is None:
        table.report(f"Dispatch to undefined method {expr.name}.", filename, expr)
        return _typed(expr, OBJECT)

    if _arity_matches(table, filename, expr, method, actual_types):
        for formal, given in zip(method.formals, actual_types):
            if formal.type_decl == SELF_TYPE:
                ok = given == SELF_TYPE
            else:
                ok = table.conforms(_resolve(given, current_class), formal.type_decl)
            if not ok:
                _argument_error(table, filename, expr, formal, given)

    result = method.return_type
    if result == SELF_TYPE:
        result = SELF_TYPE if receiver == NO_TYPE else receiver
    return _typed(expr, result)


@_check.register
def _(expr: StaticDispatch, table, current_class, env):
    filename = table.filename_of(current_class)
    receiver = _check(expr.expr, table, current_class, env)
    target = _resolve(expr.type_name, current_class)

    if not table.conforms(_resolve(receiver, current_class), target):
        table.report(
            f"Expression type {receiver} does not conform to declared static dispatch "
            f"type {expr.type_name}.",
            filename,
            expr,
        )

    actual_types = _check_actuals(expr.actual, table, current_class, env)

    method = table.lookup_method(target, expr.name)
    if method is None:
        table.report(f"Dispatch to undefined method {expr.name}.", filename, expr)
        return _typed(expr, OBJECT)

    if _arity_matches(table, filename, expr, method, actual_types):
        for formal, given in zip(method.formals, actual_types):
            declared = target if formal.type_decl == SELF_TYPE else formal.type_decl
            if not table.conforms(_resolve(given, current_class), declared):
                _argument_error(table, filename, expr, formal, given)

    result = method.return_type
    if result == SELF_TYPE:
        result = expr.type_name
    return _typed(expr, result)


def _halt_if_errors(table: ClassTable) -> None:
    if table.errors():
        table.error_stream.write(f"{HALT_MESSAGE}\n")
        raise SemanticError(table.errors())


def _check_method(method: Method, table: ClassTable, current_class: str, env: Env) -> None:
    with env.scope():
        for formal in method.formals:
            env.addid(formal.name, formal.type_decl)
        inferred = _check(method.expr, table, current_class, env)

    declared = method.return_type
    if not table.conforms(_resolve(inferred, current_class), _resolve(declared, current_class)):
        table.report(
            f"Inferred return type {inferred} of method {method.name} does not conform "
            f"to declared return type {declared}.",
            table.filename_of(current_class),
            method,
        )


def _check_class(cls: ClassDecl, table: ClassTable) -> None:
    env: Env = SymbolTable()
    with env.scope():
        env.addid(SELF, SELF_TYPE)
        attrs = [f for f in cls.features if isinstance(f, Attr)]
        for attr in attrs:
            env.addid(attr.name, attr.type_decl)
        for attr in attrs:
            _check(attr.init, table, cls.name, env)
        for feature in cls.features:
            if isinstance(feature, Method):
                _check_method(feature, table, cls.name, env)


def check_program(program: Program, error_stream: Optional[TextIO] = None) -> ClassTable:
    """Type-check every class of ``program`` and annotate its expressions.

    Returns the class table; raises SemanticError after writing the halt
    message when a class turns out to have errors.
    """
    table = ClassTable(program.classes, error_stream)
    _halt_if_errors(table)
    for cls in program.classes:
        _check_class(cls, table)
        _halt_if_errors(table)
    return table