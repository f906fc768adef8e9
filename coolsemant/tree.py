"""Abstract syntax tree nodes for programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class TreeNode:
    """Base of every node; carries the source line it came from."""

    line_number: int = field(default=1, kw_only=True, compare=False)

    def copy_position(self, other: TreeNode) -> TreeNode:
        """Take the line number of ``other`` and return this node."""
        self.line_number = other.line_number
        return self


@dataclass
class Expression(TreeNode):
    """Base of expression nodes; ``type`` is filled in by type checking."""

    type: Optional[str] = field(default=None, kw_only=True, compare=False)


@dataclass
class Formal(TreeNode):
    name: str
    type_decl: str


@dataclass
class Method(TreeNode):
    name: str
    formals: List[Formal]
    return_type: str
    expr: Expression


@dataclass
class Attr(TreeNode):
    name: str
    type_decl: str
    init: Expression


@dataclass
class Branch(TreeNode):
    name: str
    type_decl: str
    expr: Expression


@dataclass
class ClassDecl(TreeNode):
    name: str
    parent: str
    features: List[Union[Method, Attr]]
    filename: str


@dataclass
class Program(TreeNode):
    classes: List[ClassDecl]


@dataclass
class IntConst(Expression):
    token: str


@dataclass
class BoolConst(Expression):
    value: bool


@dataclass
class StringConst(Expression):
    token: str


@dataclass
class ObjectRef(Expression):
    name: str


@dataclass
class Assign(Expression):
    name: str
    expr: Expression


@dataclass
class Block(Expression):
    body: List[Expression]


@dataclass
class New(Expression):
    type_name: str


@dataclass
class NoExpr(Expression):
    """The absent expression: a missing initializer or method body."""


@dataclass
class _Unary(Expression):
    e1: Expression


@dataclass
class _Binary(Expression):
    e1: Expression
    e2: Expression


@dataclass
class IsVoid(_Unary):
    pass


@dataclass
class Neg(_Unary):
    pass


@dataclass
class Comp(_Unary):
    pass


@dataclass
class Plus(_Binary):
    pass


@dataclass
class Sub(_Binary):
    pass


@dataclass
class Mul(_Binary):
    pass


@dataclass
class Divide(_Binary):
    pass


@dataclass
class Lt(_Binary):
    pass


@dataclass
class Leq(_Binary):
    pass


@dataclass
class Eq(_Binary):
    pass


@dataclass
class Cond(Expression):
    pred: Expression
    then_exp: Expression
    else_exp: Expression


@dataclass
class Loop(Expression):
    pred: Expression
    body: Expression


@dataclass
class Let(Expression):
    identifier: str
    type_decl: str
    init: Expression
    body: Expression


@dataclass
class TypCase(Expression):
    expr: Expression
    cases: List[Branch]


@dataclass
class Dispatch(Expression):
    expr: Expression
    name: str
    actual: List[Expression]


@dataclass
class StaticDispatch(Expression):
    expr: Expression
    type_name: str
    name: str
    actual: List[Expression]