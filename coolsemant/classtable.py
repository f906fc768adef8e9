"""The class hierarchy of a program: inheritance, conformance and method lookup."""

from __future__ import annotations

import sys
from typing import Dict, Iterable, List, Optional, TextIO

from .tree import Attr, ClassDecl, Formal, Method, NoExpr, TreeNode

OBJECT = "Object"
IO = "IO"
INT = "Int"
BOOL = "Bool"
STR = "String"
SELF_TYPE = "SELF_TYPE"
SELF = "self"
NO_CLASS = "_no_class"
NO_TYPE = "_no_type"
PRIM_SLOT = "_prim_slot"
BASIC_FILENAME = "<basic class>"
UNKNOWN_FILENAME = "<unknown>"
HALT_MESSAGE = "Compilation halted due to static semantic errors."


class SemanticError(Exception):
    """Raised when static semantic errors stop compilation."""

    def __init__(self, errors: int, message: str = HALT_MESSAGE) -> None:
        super().__init__(message)
        self.errors = errors


def _method(name: str, formals: List[Formal], return_type: str) -> Method:
    return Method(name, formals, return_type, NoExpr())


def _attr(name: str, type_decl: str) -> Attr:
    return Attr(name, type_decl, NoExpr())


def basic_classes(filename: str = BASIC_FILENAME) -> List[ClassDecl]:
    """Return the built-in classes Object, IO, Int, Bool and String."""
    object_class = ClassDecl(
        OBJECT,
        NO_CLASS,
        [
            _method("abort", [], OBJECT),
            _method("type_name", [], STR),
            _method("copy", [], SELF_TYPE),
        ],
        filename,
    )
    io_class = ClassDecl(
        IO,
        OBJECT,
        [
            _method("out_string", [Formal("arg", STR)], SELF_TYPE),
            _method("out_int", [Formal("arg", INT)], SELF_TYPE),
            _method("in_string", [], STR),
            _method("in_int", [], INT),
        ],
        filename,
    )
    int_class = ClassDecl(INT, OBJECT, [_attr("_val", PRIM_SLOT)], filename)
    bool_class = ClassDecl(BOOL, OBJECT, [_attr("_val", PRIM_SLOT)], filename)
    str_class = ClassDecl(
        STR,
        OBJECT,
        [
            _attr("_val", INT),
            _attr("_str_field", PRIM_SLOT),
            _method("length", [], INT),
            _method("concat", [Formal("arg", STR)], STR),
            _method("substr", [Formal("arg", INT), Formal("arg2", INT)], STR),
        ],
        filename,
    )
    return [object_class, io_class, int_class, bool_class, str_class]


class ClassTable:
    """The built-in classes followed by the program's own, with error reporting."""

    def __init__(self, classes: Iterable[ClassDecl] = (), error_stream: Optional[TextIO] = None) -> None:
        self.classes: List[ClassDecl] = basic_classes() + list(classes)
        self.error_stream = error_stream if error_stream is not None else sys.stderr
        self._errors = 0
        self._by_name: Dict[str, ClassDecl] = {}
        for cls in self.classes:
            self._by_name.setdefault(cls.name, cls)

    def report(self, message: str, filename: Optional[str] = None, node: Optional[TreeNode] = None) -> None:
        """Write one error line, prefixed with ``filename:line:`` when a node is given."""
        if node is not None:
            if filename is None and isinstance(node, ClassDecl):
                filename = node.filename
            self.error_stream.write(f"{filename}:{node.line_number}: ")
        self._errors += 1
        self.error_stream.write(f"{message}\n")

    def _ancestry(self, class_name: str) -> Iterable[str]:
        seen = set()
        cur = class_name
        while cur != NO_CLASS and cur not in seen:
            seen.add(cur)
            yield cur
            cur = self.parent_of(cur)

    def parent_of(self, class_name: str) -> str:
        """Return the parent of ``class_name``, or the no-class marker if unknown."""
        cls = self._by_name.get(class_name)
        return cls.parent if cls is not None else NO_CLASS

    def filename_of(self, class_name: str) -> str:
        """Return the file ``class_name`` was declared in."""
        cls = self._by_name.get(class_name)
        return cls.filename if cls is not None else UNKNOWN_FILENAME

    def conforms(self, child: str, parent: str) -> bool:
        """Whether ``child`` is ``parent`` or inherits from it."""
        if child == parent or child == NO_TYPE or parent == OBJECT:
            return True
        return parent in self._ancestry(child)

    def lub(self, a: str, b: str) -> str:
        """Return the least common ancestor of ``a`` and ``b``."""
        if a == NO_TYPE:
            return b
        if b == NO_TYPE:
            return a
        ancestors = set(self._ancestry(a))
        return next((cur for cur in self._ancestry(b) if cur in ancestors), OBJECT)

    def lookup_method(self, class_name: str, method_name: str) -> Optional[Method]:
        """Find ``method_name`` in ``class_name`` or the nearest ancestor defining it."""
        for cur in self._ancestry(class_name):
            cls = self._by_name.get(cur)
            if cls is None:
                continue
            for feature in cls.features:
                if isinstance(feature, Method) and feature.name == method_name:
                    return feature
        return None

    def errors(self) -> int:
        """Number of errors reported so far."""
        return self._errors