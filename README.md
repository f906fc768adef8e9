# coolsemant

Semantic analysis for programs in Cool, the small object-oriented teaching
language. Given an abstract syntax tree, `coolsemant` puts the built-in
classes (`Object`, `IO`, `Int`, `Bool`, `String`) in front of the program's
own classes, walks every attribute initializer and method body, annotates
each expression with its static type, and reports type errors.

It is a library with no dependencies beyond the standard library and needs
Python 3.10 or later.

## Installation

```
pip install .
```

## Example

```python
from coolsemant.tree import ClassDecl, Dispatch, Method, ObjectRef, Program, StringConst
from coolsemant.typecheck import check_program

body = Dispatch(ObjectRef("self"), "out_string", [StringConst("hello\n")], line_number=3)
main = ClassDecl("Main", "IO", [Method("main", [], "Object", body, line_number=2)], "hello.cl")

table = check_program(Program([main]))
print(body.type)  # SELF_TYPE
```

When a check fails, the messages go to the error stream (standard error by
default) and `check_program` raises `SemanticError`:

```python
import io
from coolsemant.classtable import SemanticError

errors = io.StringIO()
bad = ClassDecl(
    "Main", "Object",
    [Method("main", [], "Int", StringConst("no"), line_number=4)],
    "bad.cl",
)
try:
    check_program(Program([bad]), errors)
except SemanticError as exc:
    print(exc.errors)          # 1
print(errors.getvalue())
# bad.cl:4: Inferred return type String of method main does not conform to declared return type Int.
# Compilation halted due to static semantic errors.
```

## Modules

### `coolsemant.tree`

Dataclasses for the syntax tree. Every node carries a keyword-only
`line_number` (default 1), and `copy_position(other)` copies it from another
node. Every expression carries a keyword-only `type`, which starts as `None`
and is set by type checking.

- Structure: `Program(classes)`, `ClassDecl(name, parent, features, filename)`,
  `Method(name, formals, return_type, expr)`, `Attr(name, type_decl, init)`,
  `Formal(name, type_decl)`, `Branch(name, type_decl, expr)`.
- Expressions: `IntConst(token)`, `BoolConst(value)`, `StringConst(token)`,
  `ObjectRef(name)`, `Assign(name, expr)`, `Block(body)`, `New(type_name)`,
  `NoExpr()` (an absent expression), `IsVoid(e1)`, `Neg(e1)`, `Comp(e1)`,
  `Plus`, `Sub`, `Mul`, `Divide`, `Lt`, `Leq`, `Eq` (each `(e1, e2)`),
  `Cond(pred, then_exp, else_exp)`, `Loop(pred, body)`,
  `Let(identifier, type_decl, init, body)`, `TypCase(expr, cases)`,
  `Dispatch(expr, name, actual)` and
  `StaticDispatch(expr, type_name, name, actual)`.

### `coolsemant.classtable`

- `basic_classes(filename="<basic class>")` builds the built-in classes.
- `ClassTable(classes=(), error_stream=None)` holds the built-in classes
  followed by the given ones and answers questions about them:
  `parent_of`, `filename_of`, `conforms(child, parent)`, `lub(a, b)` (least
  common ancestor) and `lookup_method(class_name, method_name)`, which
  searches up the inheritance chain. `report(message, filename, node)` writes
  one error line, prefixed with `filename:line:` when a node is given, and
  `errors()` counts the errors reported so far.
- `SemanticError` is raised when checking halts; its `errors` attribute holds
  the error count.

### `coolsemant.typecheck`

- `check_program(program, error_stream=None)` checks every class in order,
  stops after the first class that has errors, and returns the `ClassTable`
  when all is well.
- `check_expression(expr, table, current_class, env)` checks one expression
  against a `ClassTable` and a `SymbolTable` environment, sets its `type`
  and returns it.

The checks cover undeclared identifiers, assignment to `self` or to an
undeclared variable, assignments and `let` initializers that do not conform
to the declared type, `if` predicates that are not `Bool`, duplicate `case`
branches, dispatch to undefined methods, wrong argument counts and argument
types, static dispatch on a non-conforming receiver, and method bodies that
do not conform to the declared return type. `SELF_TYPE` is handled as the
class being checked.

### `coolsemant.symtab`

- `SymbolTable` is a stack of scopes with `enterscope`, `exitscope`,
  `addid`, `lookup` (any scope, innermost first) and `probe` (innermost scope
  only); `scope()` is a context manager that enters a scope and leaves it on
  exit.
- `StringTable` keeps unique strings in insertion order: `add_string(s,
  max_len=None)`, `lookup(s)` (raises `KeyError` when absent), `in`,
  iteration and `len`.

### `coolsemant.utilities`

`Token` (an `IntEnum` of token codes), `token_to_string(token)`,
`escape_string(s)`, `format_token(lineno, token, value=None)` and `pad(n)`
(up to 80 spaces) for printing tokens and trees.

## What it does not do

- There is no command-line program, lexer or parser: trees are built in
  Python from the node classes above.
- It generates no code.
- It does not validate the class hierarchy itself: undefined parent classes,
  inheritance cycles, redefined classes, a missing `Main` class and
  overridden methods with different signatures are not reported.
- Operand types of arithmetic, comparison, `not`, `~` and loop predicates
  are not checked; those expressions simply take their result type.
- Only the attributes a class declares itself are in scope in its methods;
  inherited attributes are not.